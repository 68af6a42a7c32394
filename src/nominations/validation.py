"""Validation rules derived from a form configuration.

Every required question that is not a file upload gets one rule. File uploads are checked
against the staged files at submit time because file objects are not part of the answer map.
"""

import typing as t
from dataclasses import dataclass, field

from .schema import FormConfigSchema, QuestionType

REQUIRED_MESSAGE = "This field is required."
SELECTION_REQUIRED_MESSAGE = "Please select at least one option."


class Rule(t.Protocol):
    question_id: str
    message: str

    def passes(self, value: t.Any) -> bool:
        """Whether the answer satisfies the rule."""


@dataclass(frozen=True)
class NonBlankTextRule:
    """The answer must be a non-empty string after trimming."""

    question_id: str
    message: str = REQUIRED_MESSAGE

    def passes(self, value: t.Any) -> bool:
        """Check the answer."""
        return isinstance(value, str) and bool(value.strip())


@dataclass(frozen=True)
class NonEmptySelectionRule:
    """At least one option must be selected."""

    question_id: str
    message: str = SELECTION_REQUIRED_MESSAGE

    def passes(self, value: t.Any) -> bool:
        """Check the answer."""
        return isinstance(value, list) and any(isinstance(item, str) and item.strip() for item in value)


def _fingerprint(form_config: FormConfigSchema) -> str:
    return form_config.model_dump_json()


@dataclass(frozen=True)
class RuleSet:
    """The rules of one form configuration."""

    form_config: FormConfigSchema
    rules: tuple[Rule, ...]
    fingerprint: str = field(repr=False)

    def validate(self, responses: t.Mapping[str, t.Any]) -> dict[str, str]:
        """Return a question id to message map of failing rules. Empty means valid."""
        return {
            rule.question_id: rule.message
            for rule in self.rules
            if not rule.passes(responses.get(rule.question_id))
        }

    def is_derived_from(self, form_config: FormConfigSchema) -> bool:
        """True if this rule set was derived from this exact form configuration, unchanged."""
        return self.form_config is form_config and self.fingerprint == _fingerprint(form_config)


def derive_rules(form_config: FormConfigSchema) -> RuleSet:
    """Build one rule per required non-file question."""
    rules: list[Rule] = []
    for _, question in form_config.iter_questions():
        if not question.required or question.type == QuestionType.FILE_UPLOAD:
            continue
        if question.type == QuestionType.CHECKBOX:
            rules.append(NonEmptySelectionRule(question_id=question.id))
        else:
            rules.append(NonBlankTextRule(question_id=question.id))
    return RuleSet(form_config=form_config, rules=tuple(rules), fingerprint=_fingerprint(form_config))


class RuleCache:
    """Holds the rule set of the form configuration currently in use.

    Passing a different form configuration, or the same one after it changed, derives a
    fresh rule set.
    """

    def __init__(self) -> None:
        self._current: RuleSet | None = None

    def for_config(self, form_config: FormConfigSchema) -> RuleSet:
        """Get the rules for a form configuration."""
        if self._current is None or not self._current.is_derived_from(form_config):
            self._current = derive_rules(form_config)
        return self._current


def check_answer_shapes(form_config: FormConfigSchema, responses: t.Mapping[str, t.Any]) -> dict[str, str]:
    """Check that every answer belongs to a known question and has the right shape.

    Checkbox answers are lists of offered options, multiple choice answers are one offered
    option, text answers are strings. File questions never carry an answer in the map.
    """
    questions = form_config.questions_by_id()
    errors: dict[str, str] = {}
    for question_id, value in responses.items():
        question = questions.get(question_id)
        if question is None:
            errors[question_id] = "Unknown question."
        elif question.type == QuestionType.FILE_UPLOAD:
            errors[question_id] = "Files must be uploaded, not sent as answers."
        elif question.type == QuestionType.CHECKBOX:
            if not isinstance(value, list):
                errors[question_id] = "Expected a list of options."
            elif not set(value) <= set(question.options or []):
                errors[question_id] = "Invalid option."
        elif not isinstance(value, str):
            errors[question_id] = "Expected a text answer."
        elif question.type == QuestionType.MULTIPLE_CHOICE and value and value not in (question.options or []):
            errors[question_id] = "Invalid option."
    return errors
