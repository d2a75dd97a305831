"""LLM providers for action classification."""

from actionscout.llm.provider import (
    ClaudeProvider,
    LLMProvider,
    LLMResponse,
    Message,
    get_provider,
)

__all__ = [
    "ClaudeProvider",
    "LLMProvider",
    "LLMResponse",
    "Message",
    "get_provider",
]
