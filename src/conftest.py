"""
Project-wide fixtures: users, authenticated API clients and test isolation.
"""

import secrets
import string
import typing as t
from pathlib import Path

import faker
import pytest
from django.core.cache import cache
from django.test.client import Client
from ninja_jwt.tokens import RefreshToken
from pytest import MonkeyPatch

from accounts.models import NominatorUser


@pytest.fixture(autouse=True)
def clear_cache() -> t.Iterator[None]:
    """Clear the cache around each test so throttling state does not leak between tests."""
    cache.clear()
    yield
    cache.clear()


@pytest.fixture(autouse=True)
def increase_rate_limit(monkeypatch: MonkeyPatch) -> None:
    """Increase the rate limits for AuthThrottle to allow testing."""
    monkeypatch.setattr("common.throttling.AuthThrottle.rate", "1000/min")


@pytest.fixture(autouse=True)
def media_root(settings: t.Any, tmp_path: Path) -> Path:
    """Store uploaded attachments in a temporary directory."""
    settings.MEDIA_ROOT = str(tmp_path / "media")
    return Path(settings.MEDIA_ROOT)


@pytest.fixture(autouse=True)
def mock_llm_backends(settings: t.Any) -> None:
    """Never call the hosted model from tests."""
    settings.NOMINATIONS_SCHEMA_GENERATOR = "nominations.llms.MockFormSchemaGenerator"
    settings.NOMINATIONS_TEXT_ASSISTANT = "nominations.llms.MockNominationTextAssistant"


class NominatorUserFactory:
    """Factory for creating NominatorUser instances for testing."""

    fake = faker.Faker()

    def create_user(self, **kwargs: t.Any) -> NominatorUser:
        username = kwargs.pop(
            "username", "".join(secrets.choice(string.ascii_lowercase) for _ in range(8)) + "@user.test"
        )
        email = kwargs.pop("email", username)
        password = kwargs.pop("password", "password")
        first_name = kwargs.pop("first_name", self.fake.first_name())
        last_name = kwargs.pop("last_name", self.fake.last_name())
        return NominatorUser.objects.create_user(
            username=username,
            email=email,
            password=password,
            first_name=first_name,
            last_name=last_name,
            **kwargs,
        )

    def __call__(self, **kwargs: t.Any) -> NominatorUser:
        return self.create_user(**kwargs)


@pytest.fixture
def nominator_user_factory() -> NominatorUserFactory:
    return NominatorUserFactory()


@pytest.fixture
def nominator(nominator_user_factory: NominatorUserFactory) -> NominatorUser:
    """A regular nominator."""
    return nominator_user_factory(organization_name="City Maternity Hospital")


@pytest.fixture
def other_nominator(nominator_user_factory: NominatorUserFactory) -> NominatorUser:
    """A second nominator, to check that data is scoped per user."""
    return nominator_user_factory()


@pytest.fixture
def reviewer(nominator_user_factory: NominatorUserFactory) -> NominatorUser:
    """A staff member who manages forms and reviews submissions."""
    return nominator_user_factory(is_staff=True)


@pytest.fixture
def superuser(nominator_user_factory: NominatorUserFactory) -> NominatorUser:
    """A superuser."""
    return nominator_user_factory(is_superuser=True, is_staff=True)


def _client_for(user: NominatorUser) -> Client:
    refresh = RefreshToken.for_user(user)
    return Client(HTTP_AUTHORIZATION=f"Bearer {str(refresh.access_token)}")  # type: ignore[attr-defined]


@pytest.fixture
def nominator_client(nominator: NominatorUser) -> Client:
    """An API client authenticated as the nominator."""
    return _client_for(nominator)


@pytest.fixture
def other_nominator_client(other_nominator: NominatorUser) -> Client:
    """An API client authenticated as the second nominator."""
    return _client_for(other_nominator)


@pytest.fixture
def reviewer_client(reviewer: NominatorUser) -> Client:
    """An API client authenticated as the reviewer."""
    return _client_for(reviewer)
