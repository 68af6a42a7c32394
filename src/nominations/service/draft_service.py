"""Server side of the draft lifecycle: one draft per (user, category), last writer wins."""

import typing as t

import structlog
from django.db import DatabaseError
from django.utils import timezone

from accounts.models import NominatorUser
from nominations.exceptions import PersistenceError
from nominations.models import Draft, FormConfiguration

logger = structlog.get_logger(__name__)


def get_draft(user: NominatorUser, category: FormConfiguration) -> Draft | None:
    """Get the draft of the user for the category, if any."""
    try:
        return Draft.objects.filter(user=user, category=category).first()
    except DatabaseError as e:
        logger.error("draft_load_failed", user_id=str(user.id), category_id=category.id, error=str(e))
        raise PersistenceError("Could not load the draft.") from e


def save_draft(user: NominatorUser, category: FormConfiguration, responses: dict[str, t.Any]) -> Draft:
    """Create or overwrite the draft of the user for the category."""
    try:
        draft, created = Draft.objects.update_or_create(
            user=user,
            category=category,
            defaults={"responses": responses, "last_saved_at": timezone.now()},
        )
    except DatabaseError as e:
        logger.error("draft_save_failed", user_id=str(user.id), category_id=category.id, error=str(e))
        raise PersistenceError("Could not save the draft.") from e
    logger.debug(
        "draft_saved",
        user_id=str(user.id),
        category_id=category.id,
        created=created,
        answer_count=len(responses),
    )
    return draft
