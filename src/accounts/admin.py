"""Admin interface for accounts app."""

import typing as t

from django.contrib import admin
from django.contrib.auth.admin import UserAdmin
from django.db.models import Count, QuerySet
from django.http import HttpRequest
from unfold.admin import ModelAdmin

from accounts.models import NominatorUser


@admin.register(NominatorUser)
class NominatorUserAdmin(UserAdmin, ModelAdmin):  # type: ignore[type-arg,misc]
    """Admin for nominators and reviewers."""

    list_display = [
        "username",
        "email",
        "display_name",
        "organization_name",
        "is_staff",
        "is_active",
        "date_joined",
        "submission_count",
    ]
    list_filter = ["is_staff", "is_superuser", "is_active", "date_joined", "last_login"]
    search_fields = ["username", "first_name", "last_name", "email", "organization_name"]
    ordering = ["-date_joined"]
    date_hierarchy = "date_joined"

    fieldsets = (
        *UserAdmin.fieldsets,  # type: ignore[misc]
        ("Nominator", {"fields": ("organization_name",)}),
    )

    def get_queryset(self, request: HttpRequest) -> QuerySet[NominatorUser]:
        """Annotate submission counts."""
        return super().get_queryset(request).annotate(_submission_count=Count("nomination_submissions"))

    @admin.display(description="Submissions", ordering="_submission_count")
    def submission_count(self, obj: t.Any) -> int:
        return int(getattr(obj, "_submission_count", 0))
