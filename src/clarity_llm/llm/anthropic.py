"""Anthropic adapter over the Messages API."""

from __future__ import annotations

import logging
from typing import Any

from clarity_llm.config import get_anthropic_api_key, get_anthropic_model, get_llm_timeout
from clarity_llm.errors import ConfigurationError
from clarity_llm.llm.base import TEXT_AND_CHAT, BaseAdapter, split_system, usage_from_counts
from clarity_llm.models import (
    AdapterDescriptor,
    GenerationOptions,
    GenerationResult,
    Message,
    ProviderKind,
)

logger = logging.getLogger(__name__)

_DEFAULT_MAX_TOKENS = 4096


class AnthropicAdapter(BaseAdapter):
    """Generates text and chat replies via Claude models. No embeddings."""

    def __init__(self, priority: int = 3) -> None:
        """Initialize with lazy client creation."""
        super().__init__(
            AdapterDescriptor(
                name=ProviderKind.ANTHROPIC.value,
                priority=priority,
                capabilities=TEXT_AND_CHAT,
            )
        )
        self._client: Any = None

    async def is_available(self) -> bool:
        """Check the SDK is importable and a key is configured.

        Optimistic: no request is sent, the first generation confirms it.
        """
        if not get_anthropic_api_key():
            raise ConfigurationError(self.name, "ANTHROPIC_API_KEY not set")
        return self._get_client() is not None

    async def generate_chat(
        self, messages: list[Message], options: GenerationOptions | None = None
    ) -> GenerationResult:
        """Generate a chat reply; system messages are lifted into ``system``."""
        client = self._require_client()
        system, turns = split_system(messages)

        kwargs: dict[str, Any] = {
            "model": options.model if options and options.model else get_anthropic_model(),
            "max_tokens": (options.max_tokens if options else None) or _DEFAULT_MAX_TOKENS,
            "messages": [{"role": m.role.value, "content": m.content} for m in turns],
        }
        if system is not None:
            kwargs["system"] = system
        if options is not None:
            if options.temperature is not None:
                kwargs["temperature"] = options.temperature
            if options.top_p is not None:
                kwargs["top_p"] = options.top_p
            if options.stop_sequences:
                kwargs["stop_sequences"] = options.stop_sequences

        try:
            response = await client.messages.create(**kwargs, timeout=get_llm_timeout())
            content = "".join(
                block.text for block in response.content if getattr(block, "type", "") == "text"
            )
        except Exception as exc:
            raise self._transport_error("generation", exc) from exc

        usage = None
        if getattr(response, "usage", None) is not None:
            usage = usage_from_counts(response.usage.input_tokens, response.usage.output_tokens)
        return self._result(content, options, get_anthropic_model(), usage)

    def _require_client(self) -> Any:
        client = self._get_client()
        if client is None:
            raise ConfigurationError(self.name, "anthropic package not installed")
        return client

    def _get_client(self) -> Any:
        """Lazily create the AsyncAnthropic client. Returns None if SDK missing."""
        if self._client is None:
            try:
                from anthropic import AsyncAnthropic

                self._client = AsyncAnthropic(api_key=get_anthropic_api_key())
            except ImportError:
                logger.warning("anthropic package not installed; Anthropic adapter disabled")
                return None
        return self._client

    async def close(self) -> None:
        """Close the Anthropic client if open."""
        if self._client is not None:
            await self._client.close()
            self._client = None
