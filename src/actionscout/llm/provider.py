"""LLM provider abstraction for action classification."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Literal

import anthropic
import logfire

from actionscout.core.config import get_settings


@dataclass
class Message:
    """A chat message."""

    role: Literal["user", "assistant"]
    content: str = ""


@dataclass
class LLMResponse:
    """Response from an LLM provider."""

    content: str
    model: str
    input_tokens: int
    output_tokens: int
    stop_reason: str | None = None


class LLMProvider(ABC):
    """Abstract base class for LLM providers."""

    @abstractmethod
    async def generate_messages(
        self,
        messages: list[Message],
        system: str | None = None,
        max_tokens: int = 4096,
        temperature: float = 0.7,
    ) -> LLMResponse:
        """Generate a response from a conversation."""

    async def generate(
        self,
        prompt: str,
        system: str | None = None,
        max_tokens: int = 4096,
        temperature: float = 0.7,
    ) -> LLMResponse:
        """Generate a response from a single user prompt."""
        messages = [Message(role="user", content=prompt)]
        return await self.generate_messages(messages, system, max_tokens, temperature)

    @abstractmethod
    async def close(self) -> None:
        """Close any open connections."""


class ClaudeProvider(LLMProvider):
    """Anthropic Claude provider."""

    def __init__(
        self,
        api_key: str | None = None,
        model: str | None = None,
    ) -> None:
        settings = get_settings()
        self.api_key = api_key or settings.anthropic_api_key

        if not self.api_key:
            raise ValueError(
                "Anthropic API key not configured. Set ANTHROPIC_API_KEY environment variable."
            )

        self.model = model or settings.llm_model
        self._client = anthropic.AsyncAnthropic(api_key=self.api_key)

    async def generate_messages(
        self,
        messages: list[Message],
        system: str | None = None,
        max_tokens: int = 4096,
        temperature: float = 0.7,
    ) -> LLMResponse:
        logfire.info(
            "Calling Claude API",
            model=self.model,
            max_tokens=max_tokens,
            message_count=len(messages),
        )

        kwargs: dict[str, Any] = {
            "model": self.model,
            "max_tokens": max_tokens,
            "temperature": temperature,
            "messages": [{"role": m.role, "content": m.content} for m in messages],
        }
        if system:
            kwargs["system"] = system

        response = await self._client.messages.create(**kwargs)

        content = "".join(block.text for block in response.content if block.type == "text")

        logfire.info(
            "Claude API response",
            model=response.model,
            input_tokens=response.usage.input_tokens,
            output_tokens=response.usage.output_tokens,
            stop_reason=response.stop_reason,
        )

        return LLMResponse(
            content=content,
            model=response.model,
            input_tokens=response.usage.input_tokens,
            output_tokens=response.usage.output_tokens,
            stop_reason=response.stop_reason,
        )

    async def close(self) -> None:
        """Close the Anthropic client."""
        await self._client.close()


def get_provider(provider_name: str | None = None) -> LLMProvider:
    """Get an LLM provider instance."""
    settings = get_settings()
    name = provider_name or settings.llm_provider

    match name:
        case "claude":
            return ClaudeProvider()
        case _:
            raise ValueError(f"Unknown LLM provider: {name}")
