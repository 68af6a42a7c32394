import pytest
from ninja.errors import HttpError

from accounts import schema
from accounts.models import NominatorUser
from accounts.service.account import register_user

pytestmark = pytest.mark.django_db


def test_register_user_uses_email_as_username(valid_register_payload: schema.RegisterUserSchema) -> None:
    user = register_user(valid_register_payload)

    assert user.username == "newuser@example.com"
    assert user.email == "newuser@example.com"
    assert user.organization_name == "Sunrise Women's Hospital"
    assert user.check_password("a-Strong-password-123!")
    assert not user.is_staff


def test_register_user_rejects_duplicate_email(
    valid_register_payload: schema.RegisterUserSchema, user: NominatorUser
) -> None:
    payload = valid_register_payload.model_copy(update={"email": user.email})

    with pytest.raises(HttpError) as exc_info:
        register_user(payload)

    assert exc_info.value.status_code == 400
    assert NominatorUser.objects.filter(email=user.email).count() == 1


def test_password_mismatch_is_rejected() -> None:
    with pytest.raises(ValueError, match="Passwords do not match"):
        schema.RegisterUserSchema(
            email="someone@example.com",
            password1="a-Strong-password-123!",
            password2="another-Strong-password-123!",
        )


def test_weak_password_is_rejected() -> None:
    with pytest.raises(HttpError):
        schema.RegisterUserSchema(email="someone@example.com", password1="12345678", password2="12345678")
