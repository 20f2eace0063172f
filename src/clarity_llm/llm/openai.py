"""OpenAI adapter over the Chat Completions and Embeddings APIs."""

from __future__ import annotations

import logging
from typing import Any

from clarity_llm.config import (
    get_llm_timeout,
    get_openai_api_key,
    get_openai_base_url,
    get_openai_embedding_model,
    get_openai_model,
    get_probe_timeout,
)
from clarity_llm.errors import ConfigurationError
from clarity_llm.llm.base import ALL_CAPABILITIES, BaseAdapter, usage_from_counts
from clarity_llm.models import (
    AdapterDescriptor,
    EmbeddingOptions,
    EmbeddingResult,
    GenerationOptions,
    GenerationResult,
    Message,
    ProviderKind,
)

logger = logging.getLogger(__name__)


def _completion_kwargs(options: GenerationOptions | None) -> dict[str, Any]:
    if options is None:
        return {}
    mapped: dict[str, Any] = {
        "temperature": options.temperature,
        "max_tokens": options.max_tokens,
        "top_p": options.top_p,
        "frequency_penalty": options.frequency_penalty,
        "presence_penalty": options.presence_penalty,
        "stop": options.stop_sequences,
    }
    return {k: v for k, v in mapped.items() if v is not None}


class OpenAIAdapter(BaseAdapter):
    """Generates text, chat replies and embeddings via OpenAI models."""

    def __init__(self, priority: int = 1) -> None:
        """Initialize with lazy client creation."""
        super().__init__(
            AdapterDescriptor(
                name=ProviderKind.OPENAI.value,
                priority=priority,
                capabilities=ALL_CAPABILITIES,
            )
        )
        self._client: Any = None

    async def is_available(self) -> bool:
        """Check the key is set and the models endpoint answers."""
        if not get_openai_api_key():
            raise ConfigurationError(self.name, "OPENAI_API_KEY not set")
        client = self._require_client()
        try:
            await client.models.list(timeout=get_probe_timeout())
        except Exception as exc:
            logger.warning("OpenAI provider is not available: %s", exc)
            return False
        return True

    async def generate_chat(
        self, messages: list[Message], options: GenerationOptions | None = None
    ) -> GenerationResult:
        """Generate a chat reply via chat.completions."""
        client = self._require_client()
        try:
            response = await client.chat.completions.create(
                model=options.model if options and options.model else get_openai_model(),
                messages=[{"role": m.role.value, "content": m.content} for m in messages],
                timeout=get_llm_timeout(),
                **_completion_kwargs(options),
            )
            content = response.choices[0].message.content or ""
        except Exception as exc:
            raise self._transport_error("generation", exc) from exc

        usage = None
        if response.usage is not None:
            usage = usage_from_counts(
                response.usage.prompt_tokens, response.usage.completion_tokens
            )
        return self._result(content, options, get_openai_model(), usage)

    async def generate_embedding(
        self, text: str, options: EmbeddingOptions | None = None
    ) -> EmbeddingResult:
        """Embed a single text."""
        vectors = await self._embed([text], options)
        return self._embedding(vectors[0], options, get_openai_embedding_model())

    async def generate_embeddings(
        self, texts: list[str], options: EmbeddingOptions | None = None
    ) -> list[EmbeddingResult]:
        """Embed several texts in one request, preserving input order."""
        vectors = await self._embed(texts, options)
        return [self._embedding(v, options, get_openai_embedding_model()) for v in vectors]

    async def _embed(self, texts: list[str], options: EmbeddingOptions | None) -> list[list[float]]:
        client = self._require_client()
        model = options.model if options and options.model else get_openai_embedding_model()
        try:
            response = await client.embeddings.create(
                model=model, input=texts, timeout=get_llm_timeout()
            )
            # Items carry their input index; don't rely on response order
            ordered = sorted(response.data, key=lambda item: item.index)
            return [list(item.embedding) for item in ordered]
        except Exception as exc:
            raise self._transport_error("embedding", exc) from exc

    def _require_client(self) -> Any:
        client = self._get_client()
        if client is None:
            raise ConfigurationError(self.name, "openai package not installed")
        return client

    def _get_client(self) -> Any:
        """Lazily create the AsyncOpenAI client. Returns None if SDK missing."""
        if self._client is None:
            try:
                from openai import AsyncOpenAI

                self._client = AsyncOpenAI(
                    api_key=get_openai_api_key(), base_url=get_openai_base_url()
                )
            except ImportError:
                logger.warning("openai package not installed; OpenAI adapter disabled")
                return None
        return self._client

    async def close(self) -> None:
        """Close the OpenAI client if open."""
        if self._client is not None:
            await self._client.close()
            self._client = None
