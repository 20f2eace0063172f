"""Provider selection and single-hop fallback for generation requests."""

import logging
from collections.abc import Awaitable, Callable
from functools import partial

from clarity_llm.errors import NoProviderAvailableError, TransportError
from clarity_llm.llm.provider import EmbeddingAdapter, LLMAdapter
from clarity_llm.models import (
    Capability,
    EmbeddingOptions,
    EmbeddingResult,
    GenerationOptions,
    GenerationResult,
    Message,
    PromptTemplate,
)
from clarity_llm.outcome import Failure, Success, attempt
from clarity_llm.registry import ProviderRegistry
from clarity_llm.template import build_messages

logger = logging.getLogger(__name__)

# The selected adapter plus at most one fallback.
_MAX_ATTEMPTS = 2


def _select(
    registry: ProviderRegistry,
    candidates: list[LLMAdapter],
    preferred: str | None,
) -> LLMAdapter | None:
    """Pick ``preferred`` if it is a registered, available candidate, else the first available.

    A preference naming an unknown or unavailable adapter is not an error:
    selection silently falls through to priority order.
    """
    if preferred:
        for adapter in candidates:
            if adapter.name == preferred and registry.is_available(adapter.name):
                return adapter
        logger.debug("Preferred provider %r not available, using priority order", preferred)
    for adapter in candidates:
        if registry.is_available(adapter.name):
            return adapter
    return None


class Dispatcher:
    """Routes text and chat requests to the preferred available adapter.

    On failure the request is retried once on the first other available
    adapter by priority. Runtime failures never change availability.
    """

    def __init__(self, registry: ProviderRegistry) -> None:
        """Initialize with the registry to dispatch over."""
        self._registry = registry

    def select_provider(self, preferred: str | None = None) -> LLMAdapter | None:
        """Resolve the adapter a request would use, or None if nothing is available."""
        return _select(self._registry, self._registry.adapters(), preferred)

    def fallback_for(self, failed: str) -> LLMAdapter | None:
        """Return the first available adapter by priority whose name is not ``failed``."""
        for adapter in self._registry.adapters():
            if adapter.name != failed and self._registry.is_available(adapter.name):
                return adapter
        return None

    def available_provider_names(self) -> list[str]:
        """Return the currently available adapter names for diagnostics."""
        return self._registry.available_names()

    async def generate_text(
        self, prompt: str, options: GenerationOptions | None = None
    ) -> GenerationResult:
        """Generate text from a single prompt."""
        return await self._dispatch(
            "text generation", options, lambda a: a.generate_text(prompt, options)
        )

    async def generate_chat(
        self, messages: list[Message], options: GenerationOptions | None = None
    ) -> GenerationResult:
        """Generate a chat reply; message order is passed through unchanged."""
        return await self._dispatch(
            "chat generation", options, lambda a: a.generate_chat(messages, options)
        )

    async def generate_from_template(
        self, template: PromptTemplate, options: GenerationOptions | None = None
    ) -> GenerationResult:
        """Fill a prompt template and send it as a chat request."""
        return await self.generate_chat(build_messages(template), options)

    async def _dispatch(
        self,
        operation: str,
        options: GenerationOptions | None,
        call: Callable[[LLMAdapter], Awaitable[GenerationResult]],
    ) -> GenerationResult:
        selected = self.select_provider(options.provider if options else None)
        if selected is None:
            raise NoProviderAvailableError("generation")

        adapter = selected
        last: Failure | None = None
        for hop in range(_MAX_ATTEMPTS):
            logger.debug("Using %s for %s", adapter.name, operation)
            outcome = await attempt(adapter.name, partial(call, adapter))
            if isinstance(outcome, Success):
                return outcome.value

            last = outcome
            logger.error("%s failed with %s: %s", operation, adapter.name, outcome.error)
            if hop + 1 == _MAX_ATTEMPTS:
                break
            fallback = self.fallback_for(selected.name)
            if fallback is None:
                break
            logger.warning("Falling back to %s", fallback.name)
            adapter = fallback

        if last is None:
            raise RuntimeError("dispatch made no attempt")
        raise last.error


class EmbeddingDispatcher:
    """Routes embedding requests to adapters advertising the embedding capability.

    Unlike text and chat dispatch there is no fallback: an embedding
    failure propagates immediately.
    """

    def __init__(self, registry: ProviderRegistry) -> None:
        """Initialize with the registry to dispatch over."""
        self._registry = registry

    def select_provider(self, preferred: str | None = None) -> EmbeddingAdapter | None:
        """Resolve the embedding adapter a request would use."""
        candidates = self._registry.adapters(Capability.EMBEDDING)
        adapter = _select(self._registry, candidates, preferred)
        if adapter is None or not isinstance(adapter, EmbeddingAdapter):
            return None
        return adapter

    def available_provider_names(self) -> list[str]:
        """Return available adapter names that advertise embeddings."""
        return [
            a.name
            for a in self._registry.adapters(Capability.EMBEDDING)
            if self._registry.is_available(a.name)
        ]

    async def generate_embedding(
        self, text: str, options: EmbeddingOptions | None = None
    ) -> EmbeddingResult:
        """Embed a single text."""
        adapter = self._require(options)
        logger.debug("Using %s for embedding", adapter.name)
        return await adapter.generate_embedding(text, options)

    async def generate_embeddings(
        self, texts: list[str], options: EmbeddingOptions | None = None
    ) -> list[EmbeddingResult]:
        """Embed several texts, returning one result per input in input order."""
        adapter = self._require(options)
        if not texts:
            return []
        logger.debug("Using %s for %d embeddings", adapter.name, len(texts))
        results = await adapter.generate_embeddings(texts, options)
        if len(results) != len(texts):
            raise TransportError(
                adapter.name,
                f"returned {len(results)} embeddings for {len(texts)} inputs",
            )
        return results

    def _require(self, options: EmbeddingOptions | None) -> EmbeddingAdapter:
        adapter = self.select_provider(options.provider if options else None)
        if adapter is None:
            raise NoProviderAvailableError("embedding")
        return adapter
