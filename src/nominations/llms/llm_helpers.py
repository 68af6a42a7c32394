import importlib
import typing as t
from functools import lru_cache

import openai
import structlog
from django.conf import settings
from pydantic import BaseModel
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_random_exponential

from nominations.exceptions import GenerationFailed

logger = structlog.get_logger(__name__)

RETRYABLE_ERRORS = (
    openai.APIConnectionError,
    openai.APITimeoutError,
    openai.RateLimitError,
    openai.InternalServerError,
)


@lru_cache(maxsize=None)
def get_openai_client() -> openai.OpenAI:
    """Get a standard OpenAI client."""
    return openai.OpenAI(api_key=settings.OPENAI_API_KEY, base_url=settings.LLM_BASE_URL)


def load_backend(dotted_path: str) -> t.Any:
    """Instantiate an LLM backend from its dotted path."""
    module_path, _, class_name = dotted_path.rpartition(".")
    if not module_path:
        raise ImportError(f"No module part in '{dotted_path}'")
    module = importlib.import_module(module_path)
    return getattr(module, class_name)()


T = t.TypeVar("T", bound=BaseModel)


@retry(
    retry=retry_if_exception_type(RETRYABLE_ERRORS),
    wait=wait_random_exponential(multiplier=1, max=40),
    stop=stop_after_attempt(settings.LLM_MAX_RETRIES),
    reraise=True,
)
def _parse(model: str, system_prompt: str, user_prompt: str, output_schema: t.Type[T]) -> t.Any:
    client = get_openai_client()
    return client.responses.parse(
        model=model,
        input=[
            {"role": "system", "content": system_prompt},
            {"role": "user", "content": user_prompt},
        ],
        text_format=output_schema,
    )


def call_openai(model: str, system_prompt: str, user_prompt: str, output_schema: t.Type[T]) -> T:
    """Thin wrapper around openai.responses.parse with retries.

    Raises:
        GenerationFailed: if the API keeps failing or returns no structured output.
    """
    try:
        response = _parse(model, system_prompt, user_prompt, output_schema)
    except openai.OpenAIError as e:
        logger.error("llm_call_failed", model=model, output_schema=output_schema.__name__, error=str(e))
        raise GenerationFailed("The AI service is unavailable. Please try again later.") from e

    parsed_response = response.output_parsed
    if parsed_response is None:
        logger.warning("llm_no_structured_output", model=model, output_schema=output_schema.__name__)
        raise GenerationFailed("The AI service did not return a usable result.")
    return t.cast(T, parsed_response)
