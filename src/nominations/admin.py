import json
import typing as t

from django.contrib import admin
from django.db.models import QuerySet
from django.http import HttpRequest
from django.urls import reverse
from django.utils.html import format_html, format_html_join
from django.utils.safestring import mark_safe
from unfold.admin import ModelAdmin

from . import models
from .service.review_service import set_submission_status


class UserLinkMixin:
    """Mixin to add a link to the user owning the object."""

    def user_link(self, obj: t.Any) -> str | None:
        if not getattr(obj, "user", None):
            return None
        url = reverse("admin:accounts_nominatoruser_change", args=[obj.user.id])
        return format_html('<a href="{}">{}</a>', url, obj.user.username)

    user_link.short_description = "User"  # type: ignore[attr-defined]


class CategoryLinkMixin:
    """Mixin to add a link to the form configuration of the object's category."""

    def category_link(self, obj: t.Any) -> str:
        url = reverse("admin:nominations_formconfiguration_change", args=[obj.category_id])
        return format_html('<a href="{}">{}</a>', url, obj.category.category_name)

    category_link.short_description = "Category"  # type: ignore[attr-defined]


def _pretty_json(value: t.Any) -> str:
    pretty = json.dumps(value, indent=2, ensure_ascii=False)
    return format_html("<pre style='background: #f8f9fa; padding: 10px; border-radius: 4px;'>{}</pre>", pretty)


@admin.register(models.FormConfiguration)
class FormConfigurationAdmin(ModelAdmin):  # type: ignore[misc]
    """Admin for category form configurations.

    Saving goes through ``full_clean``, so an invalid sections tree is rejected on the form.
    """

    list_display = ["id", "segment_name", "category_name", "question_count", "updated_at"]
    list_filter = ["segment_name"]
    search_fields = ["id", "segment_name", "category_name"]
    readonly_fields = ["created_at", "updated_at", "sections_preview"]
    fieldsets = (
        (None, {"fields": ("id", "segment_name", "category_name", "description")}),
        ("Form", {"fields": ("sections", "sections_preview")}),
        ("Timestamps", {"fields": ("created_at", "updated_at"), "classes": ("collapse",)}),
    )

    @admin.display(description="Questions")
    def question_count(self, obj: models.FormConfiguration) -> int:
        return obj.question_count

    @admin.display(description="Sections (formatted)")
    def sections_preview(self, obj: models.FormConfiguration) -> str:
        return _pretty_json(obj.sections)


@admin.register(models.Draft)
class DraftAdmin(ModelAdmin, UserLinkMixin, CategoryLinkMixin):  # type: ignore[misc]
    """Admin for in-progress drafts."""

    list_display = ["__str__", "user_link", "category_link", "last_saved_at"]
    list_filter = ["category__segment_name", "last_saved_at"]
    search_fields = ["user__username", "user__email", "category__category_name"]
    autocomplete_fields = ["user", "category"]
    readonly_fields = ["last_saved_at", "responses_preview"]

    def get_queryset(self, request: HttpRequest) -> QuerySet[models.Draft]:
        return super().get_queryset(request).select_related("user", "category")

    @admin.display(description="Responses (formatted)")
    def responses_preview(self, obj: models.Draft) -> str:
        return _pretty_json(obj.responses)


@admin.register(models.Submission)
class SubmissionAdmin(ModelAdmin, UserLinkMixin, CategoryLinkMixin):  # type: ignore[misc]
    """Admin for submitted nominations.

    Answers and attachments are read-only; only the review fields can change.
    """

    list_display = ["__str__", "user_link", "category_link", "status", "submitted_at", "reviewed_by"]
    list_filter = ["status", "category__segment_name", "category", "submitted_at"]
    search_fields = ["user__username", "user__email", "category__category_name"]
    autocomplete_fields = ["reviewed_by"]
    readonly_fields = [
        "user",
        "category",
        "submitted_at",
        "responses_preview",
        "attachments_preview",
        "reviewed_at",
    ]
    fields = [
        "user",
        "category",
        "submitted_at",
        "status",
        "reviewed_by",
        "reviewed_at",
        "responses_preview",
        "attachments_preview",
    ]
    date_hierarchy = "submitted_at"
    actions = ["approve_submissions", "reject_submissions"]

    def get_queryset(self, request: HttpRequest) -> QuerySet[models.Submission]:
        return super().get_queryset(request).select_related("user", "category", "reviewed_by")

    @admin.display(description="Responses (formatted)")
    def responses_preview(self, obj: models.Submission) -> str:
        return _pretty_json(obj.responses)

    @admin.display(description="Attachments")
    def attachments_preview(self, obj: models.Submission) -> str:
        if not obj.attachments:
            return "-"
        return format_html_join(
            mark_safe("<br>"),
            '{}: <a href="{}" target="_blank">{}</a>',
            ((question_id, url, url) for question_id, url in obj.attachments.items()),
        )

    @admin.action(description="Approve selected submissions")
    def approve_submissions(self, request: HttpRequest, queryset: QuerySet[models.Submission]) -> None:
        self._set_status(request, queryset, models.Submission.Status.APPROVED)

    @admin.action(description="Reject selected submissions")
    def reject_submissions(self, request: HttpRequest, queryset: QuerySet[models.Submission]) -> None:
        self._set_status(request, queryset, models.Submission.Status.REJECTED)

    def _set_status(self, request: HttpRequest, queryset: QuerySet[models.Submission], status: str) -> None:
        changed = sum(set_submission_status(submission, status, request.user) for submission in queryset)
        self.message_user(request, f"{changed} submission(s) marked as {status}.")

