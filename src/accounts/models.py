import re
import typing as t
import uuid

from django.contrib.auth.models import AbstractUser, UserManager
from django.db import models


class NominatorUserQueryset(models.QuerySet["NominatorUser"]):
    """Queryset for NominatorUser."""

    def reviewers(self) -> t.Self:
        """Users allowed to manage form configurations and review submissions."""
        return self.filter(is_staff=True, is_active=True)


class NominatorUserManager(UserManager["NominatorUser"]):
    def get_queryset(self) -> NominatorUserQueryset:
        """Get queryset for NominatorUser."""
        return NominatorUserQueryset(self.model)

    def reviewers(self) -> NominatorUserQueryset:
        """Users allowed to manage form configurations and review submissions."""
        return self.get_queryset().reviewers()


class NominatorUser(AbstractUser):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    organization_name = models.CharField(
        max_length=255, blank=True, help_text="Organization the nominator submits on behalf of"
    )

    objects = NominatorUserManager()  # type: ignore[misc]

    class Meta:
        ordering = ["username"]

    @property
    def display_name(self) -> str:
        """Display name."""
        return self.get_display_name()

    def get_display_name(self) -> str:
        """Returns the user's full name, or a readable version of the username as a fallback."""
        return self.get_full_name() or re.sub(r"(\W|_)+", " ", self.username.split("@")[0]).title()
