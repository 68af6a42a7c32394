from datetime import datetime, timezone
from unittest.mock import patch

import pytest
from django.db import DatabaseError
from freezegun import freeze_time

from accounts.models import NominatorUser
from nominations.exceptions import PersistenceError
from nominations.models import Draft, FormConfiguration
from nominations.service import draft_service

pytestmark = pytest.mark.django_db


def test_get_draft_returns_none_without_draft(nominator: NominatorUser, form_config: FormConfiguration) -> None:
    assert draft_service.get_draft(nominator, form_config) is None


def test_save_draft_creates_then_overwrites(nominator: NominatorUser, form_config: FormConfiguration) -> None:
    with freeze_time("2026-03-01 10:00:00"):
        first = draft_service.save_draft(nominator, form_config, {"nominee-name": "Dr. A"})
    with freeze_time("2026-03-01 10:05:00"):
        second = draft_service.save_draft(nominator, form_config, {"nominee-name": "Dr. Asha Rao", "areas": []})

    assert first.pk == second.pk
    assert Draft.objects.count() == 1
    draft = draft_service.get_draft(nominator, form_config)
    assert draft is not None
    assert draft.responses == {"nominee-name": "Dr. Asha Rao", "areas": []}
    assert draft.last_saved_at == datetime(2026, 3, 1, 10, 5, tzinfo=timezone.utc)


def test_drafts_are_scoped_per_user(
    nominator: NominatorUser, other_nominator: NominatorUser, form_config: FormConfiguration
) -> None:
    draft_service.save_draft(nominator, form_config, {"nominee-name": "Mine"})

    assert draft_service.get_draft(other_nominator, form_config) is None


def test_save_draft_database_failure(nominator: NominatorUser, form_config: FormConfiguration) -> None:
    with patch.object(Draft.objects, "update_or_create", side_effect=DatabaseError("down")):
        with pytest.raises(PersistenceError):
            draft_service.save_draft(nominator, form_config, {"nominee-name": "Dr. A"})
