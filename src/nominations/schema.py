"""Schemas for the nominations app.

The form configuration tree (FormConfig → Section → Question) is validated here. Its JSON
keys are camelCase (``segmentName``, ``categoryName``) while Python attributes stay snake_case.
"""

import enum
import json
import typing as t
from datetime import datetime

from ninja import Schema
from pydantic import UUID4, ConfigDict, Field, StringConstraints, ValidationInfo, field_validator, model_validator
from pydantic import ValidationError as PydanticValidationError
from pydantic.alias_generators import to_camel
from pydantic_core import PydanticCustomError

from accounts.schema import MinimalNominatorUserSchema
from common.schema import OneToOneFiftyString, StrippedString

from .exceptions import SchemaValidationError
from .utils import slugify_category

IdentifierString = t.Annotated[str, Field(min_length=1, max_length=100, pattern=r"^[A-Za-z0-9_-]+$")]
TitleString = t.Annotated[str, StringConstraints(min_length=1, max_length=500, strip_whitespace=True)]
ResponseValue = str | list[str]


class QuestionType(enum.StrEnum):
    TEXT = "TEXT"
    PARAGRAPH = "PARAGRAPH"
    MULTIPLE_CHOICE = "MULTIPLE_CHOICE"
    CHECKBOX = "CHECKBOX"
    FILE_UPLOAD = "FILE_UPLOAD"


CHOICE_TYPES = frozenset({QuestionType.MULTIPLE_CHOICE, QuestionType.CHECKBOX})


class CamelSchema(Schema):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ---- Form configuration ----


class QuestionSchema(Schema):
    id: IdentifierString
    title: TitleString
    type: QuestionType
    required: bool = False
    options: list[str] | None = Field(default=None, validate_default=True)

    @field_validator("options")
    @classmethod
    def options_match_type(cls, value: list[str] | None, info: ValidationInfo) -> list[str] | None:
        """Options are mandatory for choice questions and forbidden otherwise."""
        question_type = info.data.get("type")
        if question_type is None:
            return value
        if question_type in CHOICE_TYPES:
            if not value or not all(option.strip() for option in value):
                raise PydanticCustomError(
                    "options_required", "Choice questions need at least one non-empty option."
                )
            if len(set(value)) != len(value):
                raise PydanticCustomError("options_unique", "Options must be unique.")
            return value
        if value:
            raise PydanticCustomError(
                "options_not_allowed", "Only MULTIPLE_CHOICE and CHECKBOX questions can have options."
            )
        return None


class SectionSchema(Schema):
    id: IdentifierString
    title: TitleString
    questions: list[QuestionSchema]

    @field_validator("questions")
    @classmethod
    def unique_question_ids(cls, value: list[QuestionSchema]) -> list[QuestionSchema]:
        """Question ids are unique within a section."""
        _ensure_unique_ids([question.id for question in value], "question")
        return value


class FormConfigSchema(CamelSchema):
    id: str = ""
    segment_name: OneToOneFiftyString
    category_name: t.Annotated[str, Field(min_length=1, max_length=255)]
    description: StrippedString = ""
    sections: list[SectionSchema] = Field(default_factory=list)

    @field_validator("category_name")
    @classmethod
    def category_name_has_slug(cls, value: str) -> str:
        """The category name must produce a non-empty slug."""
        value = value.strip()
        if not slugify_category(value):
            raise PydanticCustomError(
                "category_slug", "Category name must contain at least one ASCII letter or digit."
            )
        return value

    @field_validator("sections")
    @classmethod
    def unique_section_ids(cls, value: list[SectionSchema]) -> list[SectionSchema]:
        """Section ids are unique within a form configuration.

        Question ids key one flat answer map, so they are unique across all sections too.
        """
        _ensure_unique_ids([section.id for section in value], "section")
        _ensure_unique_ids([question.id for section in value for question in section.questions], "question")
        return value

    @model_validator(mode="after")
    def derive_id(self) -> t.Self:
        """The id is always the slug of the category name."""
        self.id = slugify_category(self.category_name)
        return self

    def iter_questions(self) -> t.Iterator[tuple[SectionSchema, QuestionSchema]]:
        """Yield every question together with its section, in display order."""
        for section in self.sections:
            for question in section.questions:
                yield section, question

    def questions_by_id(self) -> dict[str, QuestionSchema]:
        """Map question ids to questions across all sections."""
        return {question.id: question for _, question in self.iter_questions()}


def _ensure_unique_ids(ids: list[str], what: str) -> None:
    seen: set[str] = set()
    for identifier in ids:
        if identifier in seen:
            raise PydanticCustomError(
                "duplicate_id", "Duplicate {what} id '{identifier}'.", {"what": what, "identifier": identifier}
            )
        seen.add(identifier)


def _error_path(loc: tuple[int | str, ...]) -> str:
    return ".".join(str(part) for part in loc)


def validate_form_config(data: t.Any) -> FormConfigSchema:
    """Validate a candidate form configuration.

    Raises:
        SchemaValidationError: carrying the dotted path of the first violated field,
            e.g. ``sections.0.questions.1.options``.
    """
    if isinstance(data, FormConfigSchema):
        data = data.model_dump(by_alias=True)
    try:
        return FormConfigSchema.model_validate(data)
    except PydanticValidationError as e:
        first = e.errors()[0]
        raise SchemaValidationError(_error_path(tuple(first["loc"])), first["msg"])


def parse_sections_json(raw: str) -> list[t.Any]:
    """Parse the sections entered manually by an admin as a JSON array string."""
    try:
        parsed = json.loads(raw)
    except json.JSONDecodeError:
        raise SchemaValidationError("sections", "The sections field contains invalid JSON.")
    if not isinstance(parsed, list):
        raise SchemaValidationError("sections", "Please provide a valid JSON array for sections.")
    return parsed


class FormConfigInputSchema(CamelSchema):
    """Loosely typed form configuration; the tree is checked by ``validate_form_config``."""

    segment_name: str
    category_name: str
    description: str = ""
    sections: list[dict[str, t.Any]] = Field(default_factory=list)


class FormConfigUploadSchema(CamelSchema):
    """Manual entry of a form configuration from the admin area."""

    segment_name: OneToOneFiftyString
    category_name: t.Annotated[str, Field(min_length=1, max_length=255)]
    description: t.Annotated[str, Field(min_length=10)]
    sections_json: str = "[]"


class GenerateFormConfigSchema(Schema):
    description: t.Annotated[str, Field(min_length=10, max_length=20_000)]


class SaveFormConfigResponse(Schema):
    id: str


# ---- Categories and status ----


class CategoryInListSchema(CamelSchema):
    id: str
    segment_name: str
    category_name: str
    description: str
    question_count: int


class SegmentGroupSchema(CamelSchema):
    segment_name: str
    categories: list[CategoryInListSchema]


class CategoryStatus(enum.StrEnum):
    ADDED = "ADDED"
    EMPTY = "EMPTY"


class StatusRowSchema(Schema):
    id: str
    segment_name: str
    category_name: str
    status: CategoryStatus
    submission_count: int


# ---- Drafts ----


class DraftSchema(Schema):
    category_id: str
    responses: dict[str, ResponseValue]
    last_saved_at: datetime


class DraftUpdateSchema(Schema):
    responses: dict[str, ResponseValue]


# ---- Submissions ----


class SubmissionPayloadSchema(Schema):
    """JSON part of the multipart submit request."""

    responses: dict[str, ResponseValue] = Field(default_factory=dict)
    declaration_accepted: bool = False


class TextAnswer(Schema):
    kind: t.Literal["text"] = "text"
    value: str


class StringListAnswer(Schema):
    kind: t.Literal["string_list"] = "string_list"
    value: list[str]


class FileUrlAnswer(Schema):
    kind: t.Literal["file_url"] = "file_url"
    value: str


AnswerValue = t.Annotated[TextAnswer | StringListAnswer | FileUrlAnswer, Field(discriminator="kind")]


class ResolvedAnswerSchema(Schema):
    question_id: str
    question_title: str
    section_title: str | None = None
    question_type: QuestionType | None = None
    answer: AnswerValue | None = None


class SubmissionSchema(Schema):
    id: UUID4
    category_id: str
    submitted_at: datetime
    status: str
    responses: dict[str, ResponseValue]
    attachments: dict[str, str]


class AdminSubmissionInListSchema(Schema):
    id: UUID4
    category_id: str
    submitted_at: datetime
    status: str
    user: MinimalNominatorUserSchema


class SubmissionDetailSchema(AdminSubmissionInListSchema):
    category_name: str
    reviewed_at: datetime | None = None
    reviewed_by: MinimalNominatorUserSchema | None = None
    answers: list[ResolvedAnswerSchema]


class SubmissionStatusUpdateSchema(Schema):
    status: t.Literal["pending", "approved", "rejected"]


class SubmissionStatusChangedSchema(Schema):
    id: UUID4
    status: str
    changed: bool


# ---- Text assist ----


class TextAssistRequestSchema(Schema):
    text: t.Annotated[str, Field(min_length=1, max_length=10_000)]
    action: t.Literal["suggest_phrasing", "expand_bullet_points", "summarize"]
    context: str | None = Field(default=None, max_length=2_000)


class TextAssistResponseSchema(CamelSchema):
    suggested_text: str
