import typing as t

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import models
from django.db.models import Count
from django.utils import timezone

from common.models import TimeStampedModel

from .exceptions import SchemaValidationError
from .utils import slugify_category

if t.TYPE_CHECKING:
    from .schema import FormConfigSchema

# ---- FormConfiguration ----


class FormConfigurationQueryset(models.QuerySet["FormConfiguration"]):
    """FormConfiguration queryset."""

    def for_segment(self, segment_name: str) -> t.Self:
        """Filter by segment."""
        return self.filter(segment_name=segment_name)


class FormConfigurationManager(models.Manager["FormConfiguration"]):
    def get_queryset(self) -> FormConfigurationQueryset:
        """Get FormConfiguration queryset."""
        return FormConfigurationQueryset(self.model)


class FormConfiguration(TimeStampedModel):
    """The dynamic nomination form of one award category.

    The primary key is the slug of the category name, so saving a configuration for the same
    category again overwrites the previous one.
    """

    id = models.SlugField(primary_key=True, max_length=255)  # type: ignore[assignment]
    segment_name = models.CharField(max_length=150, db_index=True)
    category_name = models.CharField(max_length=255)
    description = models.TextField(blank=True, default="")
    sections = models.JSONField(default=list, blank=True, help_text="Sections and questions of the form.")

    objects = FormConfigurationManager()

    class Meta:
        ordering = ["segment_name", "category_name"]

    def __str__(self) -> str:
        return f"{self.segment_name} / {self.category_name}"

    def clean(self) -> None:
        """Keep the stored tree a valid form whose id is the slug of the category name."""
        from .schema import validate_form_config

        super().clean()
        try:
            validate_form_config(self._document())
        except SchemaValidationError as e:
            field = "sections" if e.path.startswith("sections") else "category_name"
            raise ValidationError({field: f"{e.path}: {e.message}"})
        if self.id != slugify_category(self.category_name):
            raise ValidationError({"id": "The id must be the slug of the category name."})

    @property
    def is_empty(self) -> bool:
        """True when the configuration has no sections to render."""
        return not self.sections

    @property
    def question_count(self) -> int:
        """Number of questions across all sections."""
        return sum(len(section.get("questions", [])) for section in self.sections)

    def as_schema(self) -> "FormConfigSchema":
        """Return the validated form configuration tree."""
        from .schema import FormConfigSchema

        return FormConfigSchema.model_validate(self._document())

    def _document(self) -> dict[str, t.Any]:
        return {
            "segmentName": self.segment_name,
            "categoryName": self.category_name,
            "description": self.description,
            "sections": self.sections,
        }


# ---- Draft ----


class DraftQueryset(models.QuerySet["Draft"]):
    """Draft queryset."""

    def for_user(self, user: t.Any) -> t.Self:
        """Drafts owned by the user."""
        return self.filter(user=user)


class DraftManager(models.Manager["Draft"]):
    def get_queryset(self) -> DraftQueryset:
        """Get Draft queryset."""
        return DraftQueryset(self.model)

    def for_user(self, user: t.Any) -> DraftQueryset:
        """Drafts owned by the user."""
        return self.get_queryset().for_user(user)


class Draft(TimeStampedModel):
    """In-progress answers of one user for one category."""

    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="nomination_drafts")
    category = models.ForeignKey(FormConfiguration, on_delete=models.CASCADE, related_name="drafts")
    responses = models.JSONField(default=dict, blank=True)
    last_saved_at = models.DateTimeField(default=timezone.now)

    objects = DraftManager()

    class Meta:
        constraints = [
            models.UniqueConstraint(fields=["user", "category"], name="unique_draft_per_user_and_category"),
        ]

    def __str__(self) -> str:
        return f"Draft {self.category_id} ({self.user_id})"


# ---- Submission ----


class SubmissionQueryset(models.QuerySet["Submission"]):
    """Submission queryset."""

    def for_user(self, user: t.Any) -> t.Self:
        """Submissions made by the user."""
        return self.filter(user=user)

    def for_category(self, category_id: str) -> t.Self:
        """Submissions made for a category."""
        return self.filter(category_id=category_id)

    def counts_by_category(self) -> dict[str, int]:
        """Number of submissions per category id, computed in a single grouped query."""
        rows = self.order_by().values("category_id").annotate(total=Count("id"))
        return {row["category_id"]: row["total"] for row in rows}


class SubmissionManager(models.Manager["Submission"]):
    def get_queryset(self) -> SubmissionQueryset:
        """Get Submission queryset."""
        return SubmissionQueryset(self.model)

    def for_user(self, user: t.Any) -> SubmissionQueryset:
        """Submissions made by the user."""
        return self.get_queryset().for_user(user)

    def for_category(self, category_id: str) -> SubmissionQueryset:
        """Submissions made for a category."""
        return self.get_queryset().for_category(category_id)

    def counts_by_category(self) -> dict[str, int]:
        """Number of submissions per category id."""
        return self.get_queryset().counts_by_category()


class Submission(TimeStampedModel):
    """A submitted nomination. Only the review fields change after creation."""

    class Status(models.TextChoices):
        PENDING = "pending"
        APPROVED = "approved"
        REJECTED = "rejected"

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="nomination_submissions"
    )
    category = models.ForeignKey(FormConfiguration, on_delete=models.PROTECT, related_name="submissions")
    submitted_at = models.DateTimeField(default=timezone.now, db_index=True)
    responses = models.JSONField(default=dict, blank=True)
    attachments = models.JSONField(default=dict, blank=True, help_text="Question id to attachment URL.")
    status = models.CharField(choices=Status.choices, max_length=10, default=Status.PENDING, db_index=True)
    reviewed_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="reviewed_nominations",
    )
    reviewed_at = models.DateTimeField(null=True, blank=True)

    objects = SubmissionManager()

    class Meta:
        ordering = ["-submitted_at"]

    def __str__(self) -> str:
        return f"Submission {self.id} ({self.category_id}, {self.status})"
