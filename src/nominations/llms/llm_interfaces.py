import typing as t
from typing import Protocol

from pydantic import BaseModel, Field

# ---- Pydantic Models for Data Structures ----

QuestionTypeLiteral = t.Literal["TEXT", "PARAGRAPH", "MULTIPLE_CHOICE", "CHECKBOX", "FILE_UPLOAD"]
TextAssistAction = t.Literal["suggest_phrasing", "expand_bullet_points", "summarize"]


class GeneratedQuestion(BaseModel):
    """A question as produced by the schema generator."""

    id: str = Field(..., description="Unique kebab-case identifier for the question, derived from its title.")
    title: str = Field(..., description="The display title of the question.")
    type: QuestionTypeLiteral = Field(..., description="The type of input field.")
    required: bool = Field(..., description="Whether this question is mandatory.")
    options: list[str] | None = Field(
        ..., description="Options for MULTIPLE_CHOICE or CHECKBOX questions, null for every other type."
    )


class GeneratedSection(BaseModel):
    id: str = Field(..., description="Unique kebab-case identifier for the section, derived from its title.")
    title: str = Field(..., description="The display title of the section.")
    questions: list[GeneratedQuestion]


class GeneratedFormConfig(BaseModel):
    """The expected response from the schema generator. The id is derived by the caller."""

    segment_name: str = Field(..., description="The segment the award category belongs to, e.g. Individual.")
    category_name: str = Field(..., description="The name of the award category, e.g. Obstetrician of the Year.")
    description: str = Field(..., description="A brief description of the award category.")
    sections: list[GeneratedSection]


class TextAssistResult(BaseModel):
    suggested_text: str = Field(..., description="The processed text, without any conversational filler.")


# ---- The Protocols ----


class FormSchemaGenerator(Protocol):
    """Turns a natural-language description of an award category into a form configuration."""

    def generate(self, *, description: str) -> GeneratedFormConfig:
        """Generate a form configuration candidate.

        Raises:
            GenerationFailed: if no structured output was produced.
        """


class NominationTextAssistant(Protocol):
    """Helps nominators refine free-text answers."""

    def assist(self, *, text: str, action: TextAssistAction, context: str | None) -> TextAssistResult:
        """Process the text according to the action.

        Raises:
            GenerationFailed: if no text was produced.
        """
