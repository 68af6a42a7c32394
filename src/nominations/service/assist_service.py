import structlog
from django.conf import settings

from nominations.llms.llm_helpers import load_backend
from nominations.llms.llm_interfaces import NominationTextAssistant, TextAssistResult
from nominations.schema import TextAssistRequestSchema

logger = structlog.get_logger(__name__)


def get_text_assistant() -> NominationTextAssistant:
    """Get the configured text assistant backend."""
    return load_backend(settings.NOMINATIONS_TEXT_ASSISTANT)  # type: ignore[no-any-return]


def assist(payload: TextAssistRequestSchema, assistant: NominationTextAssistant | None = None) -> TextAssistResult:
    """Rephrase, expand or summarize a free-text answer."""
    assistant = assistant or get_text_assistant()
    logger.info("text_assist_requested", action=payload.action, text_length=len(payload.text))
    return assistant.assist(text=payload.text, action=payload.action, context=payload.context)
