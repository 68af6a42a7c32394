"""Read side for the admin review area and the nominator dashboard, plus review status changes."""

import typing as t
from dataclasses import dataclass, field
from uuid import UUID

import structlog
from django.db.models import QuerySet
from django.shortcuts import get_object_or_404
from django.utils import timezone

from accounts.models import NominatorUser
from nominations import categories
from nominations.models import FormConfiguration, Submission
from nominations.schema import (
    AnswerValue,
    CategoryStatus,
    FileUrlAnswer,
    FormConfigSchema,
    QuestionType,
    ResolvedAnswerSchema,
    StringListAnswer,
    TextAnswer,
)
from nominations.utils import slugify_category

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class StatusRow:
    id: str
    segment_name: str
    category_name: str
    status: CategoryStatus
    submission_count: int


@dataclass
class SegmentGroup:
    segment_name: str
    categories: list[FormConfiguration] = field(default_factory=list)


def submission_counts() -> dict[str, int]:
    """Number of submissions per category id."""
    return Submission.objects.counts_by_category()


def _status(config: FormConfiguration | None) -> CategoryStatus:
    return CategoryStatus.ADDED if config is not None and not config.is_empty else CategoryStatus.EMPTY


def build_status_rows(
    configs: t.Iterable[FormConfiguration],
    counts: t.Mapping[str, int],
    segment_order: t.Sequence[str],
    category_order: t.Mapping[str, t.Sequence[str]],
) -> list[StatusRow]:
    """Rows for the admin status view.

    Configured categories come first, in segment order then in-segment order, and appear
    even without a form configuration (status ``EMPTY``). Stored configurations that are not
    part of the configured order are appended, sorted by category name.
    """
    by_id = {config.id: config for config in configs}
    rows: list[StatusRow] = []
    emitted: set[str] = set()

    ordered_segments = list(segment_order) + sorted(set(category_order) - set(segment_order))
    for segment_name in ordered_segments:
        for category_name in category_order.get(segment_name, []):
            category_id = slugify_category(category_name)
            if category_id in emitted:
                continue
            config = by_id.get(category_id)
            rows.append(
                StatusRow(
                    id=category_id,
                    segment_name=segment_name,
                    category_name=category_name,
                    status=_status(config),
                    submission_count=counts.get(category_id, 0),
                )
            )
            emitted.add(category_id)

    remaining = sorted((c for c in by_id.values() if c.id not in emitted), key=lambda c: c.category_name)
    for config in remaining:
        rows.append(
            StatusRow(
                id=config.id,
                segment_name=config.segment_name,
                category_name=config.category_name,
                status=_status(config),
                submission_count=counts.get(config.id, 0),
            )
        )
    return rows


def get_status_rows() -> list[StatusRow]:
    """Status rows for every category, using the configured display order."""
    return build_status_rows(
        FormConfiguration.objects.all(),
        submission_counts(),
        categories.segment_order(),
        categories.category_order(),
    )


def order_categories_by_segment(
    configs: t.Iterable[FormConfiguration],
    segment_order: t.Sequence[str] | None = None,
    category_order: t.Mapping[str, t.Sequence[str]] | None = None,
) -> list[SegmentGroup]:
    """Group form configurations by segment for the nominator dashboard.

    Segments follow the configured order, unknown segments come after it alphabetically.
    Within a segment, configured categories keep their order and unknown ones follow by name.
    """
    segment_order = categories.segment_order() if segment_order is None else segment_order
    category_order = categories.category_order() if category_order is None else category_order

    groups: dict[str, SegmentGroup] = {}
    for config in configs:
        groups.setdefault(config.segment_name, SegmentGroup(config.segment_name)).categories.append(config)

    def segment_key(name: str) -> tuple[int, str]:
        return (segment_order.index(name), "") if name in segment_order else (len(segment_order), name)

    ordered = [groups[name] for name in sorted(groups, key=segment_key)]
    for group in ordered:
        positions = {slugify_category(name): i for i, name in enumerate(category_order.get(group.segment_name, []))}
        group.categories.sort(key=lambda c: (positions.get(c.id, len(positions)), c.category_name))
    return ordered


def list_submissions(category_id: str) -> QuerySet[Submission]:
    """Submissions of every user for a category, most recent first."""
    return Submission.objects.for_category(category_id).select_related("user")


def resolve_answers(
    form_config: FormConfigSchema,
    responses: t.Mapping[str, t.Any],
    attachments: t.Mapping[str, str],
) -> list[ResolvedAnswerSchema]:
    """Resolve the raw answer maps against the question types of the form.

    Questions are returned in form order. Answers to questions that are no longer part of the
    form are appended at the end, typed by their value.
    """
    resolved: list[ResolvedAnswerSchema] = []
    seen: set[str] = set()
    for section, question in form_config.iter_questions():
        seen.add(question.id)
        answer: AnswerValue | None
        if question.type == QuestionType.FILE_UPLOAD:
            url = attachments.get(question.id)
            answer = FileUrlAnswer(value=url) if url else None
        else:
            answer = _typed_value(responses.get(question.id))
        resolved.append(
            ResolvedAnswerSchema(
                question_id=question.id,
                question_title=question.title,
                section_title=section.title,
                question_type=question.type,
                answer=answer,
            )
        )
    for question_id, value in responses.items():
        if question_id not in seen:
            resolved.append(
                ResolvedAnswerSchema(question_id=question_id, question_title=question_id, answer=_typed_value(value))
            )
    for question_id, url in attachments.items():
        if question_id not in seen:
            resolved.append(
                ResolvedAnswerSchema(
                    question_id=question_id, question_title=question_id, answer=FileUrlAnswer(value=url)
                )
            )
    return resolved


def _typed_value(value: t.Any) -> AnswerValue | None:
    if value is None:
        return None
    if isinstance(value, list):
        return StringListAnswer(value=[str(item) for item in value])
    return TextAnswer(value=str(value))


def get_submission(submission_id: UUID) -> Submission:
    """Get a submission with its user, reviewer and category. Always reads from the database."""
    return get_object_or_404(
        Submission.objects.select_related("user", "reviewed_by", "category"),
        pk=submission_id,
    )


def get_submission_detail(submission_id: UUID) -> dict[str, t.Any]:
    """Submission detail with answers resolved against the form configuration."""
    submission = get_submission(submission_id)
    answers = resolve_answers(submission.category.as_schema(), submission.responses, submission.attachments)
    return {
        "id": submission.id,
        "category_id": submission.category_id,
        "category_name": submission.category.category_name,
        "submitted_at": submission.submitted_at,
        "status": submission.status,
        "user": submission.user,
        "reviewed_at": submission.reviewed_at,
        "reviewed_by": submission.reviewed_by,
        "answers": answers,
    }


def set_submission_status(submission: Submission, status: str, reviewer: NominatorUser) -> bool:
    """Set the review status of a submission.

    Setting the status it already has is a no-op.

    Returns:
        Whether the status changed.
    """
    if submission.status == status:
        logger.info("submission_status_unchanged", submission_id=str(submission.id), status=status)
        return False
    previous = submission.status
    submission.status = status
    submission.reviewed_by = reviewer
    submission.reviewed_at = timezone.now()
    submission.save(update_fields=["status", "reviewed_by", "reviewed_at"])
    logger.info(
        "submission_status_changed",
        submission_id=str(submission.id),
        previous_status=previous,
        status=status,
        reviewer_id=str(reviewer.id),
    )
    return True
