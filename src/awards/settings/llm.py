from decouple import config

# LLM configuration for the AI-assisted form generator and the nomination text assistant.
#
# Backends are selected by dotted path so tests and local development can run without
# network access:
#   NOMINATIONS_SCHEMA_GENERATOR=nominations.llms.MockFormSchemaGenerator
#   NOMINATIONS_TEXT_ASSISTANT=nominations.llms.MockNominationTextAssistant
#
# Production (OpenAI):
#   NOMINATIONS_SCHEMA_GENERATOR=nominations.llms.ChatGPTFormSchemaGenerator
#   NOMINATIONS_TEXT_ASSISTANT=nominations.llms.ChatGPTNominationTextAssistant
#   OPENAI_API_KEY=sk-...

OPENAI_API_KEY: str | None = config("OPENAI_API_KEY", default=None) or None

# Override the provider's default base URL (e.g. an OpenAI-compatible gateway).
LLM_BASE_URL: str | None = config("LLM_BASE_URL", default=None) or None

LLM_DEFAULT_MODEL: str = config("LLM_DEFAULT_MODEL", default="gpt-4.1-mini")

# Maximum attempts for a single structured-output call (handled by tenacity).
LLM_MAX_RETRIES: int = config("LLM_MAX_RETRIES", default=3, cast=int)

NOMINATIONS_SCHEMA_GENERATOR: str = config(
    "NOMINATIONS_SCHEMA_GENERATOR", default="nominations.llms.MockFormSchemaGenerator"
)
NOMINATIONS_TEXT_ASSISTANT: str = config(
    "NOMINATIONS_TEXT_ASSISTANT", default="nominations.llms.MockNominationTextAssistant"
)
