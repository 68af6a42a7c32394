from .llm_backends import (
    ChatGPTFormSchemaGenerator,
    ChatGPTNominationTextAssistant,
    MockFormSchemaGenerator,
    MockNominationTextAssistant,
)

__all__ = [
    "MockFormSchemaGenerator",
    "ChatGPTFormSchemaGenerator",
    "MockNominationTextAssistant",
    "ChatGPTNominationTextAssistant",
]
