"""Startup wiring, lifecycle and health for the generation core."""

import logging
import sys
from collections.abc import AsyncIterator, Iterable
from contextlib import asynccontextmanager

from pydantic import BaseModel

from clarity_llm.config import get_enabled_providers, get_log_level
from clarity_llm.dispatch import Dispatcher, EmbeddingDispatcher
from clarity_llm.llm import AnthropicAdapter, GoogleGenAIAdapter, OllamaAdapter, OpenAIAdapter
from clarity_llm.llm.provider import LLMAdapter
from clarity_llm.models import (
    EmbeddingOptions,
    EmbeddingResult,
    GenerationOptions,
    GenerationResult,
    Message,
    PromptTemplate,
    ProviderKind,
)
from clarity_llm.registry import ProviderRegistry

logger = logging.getLogger(__name__)

_ADAPTERS: dict[ProviderKind, type[LLMAdapter]] = {
    ProviderKind.OPENAI: OpenAIAdapter,
    ProviderKind.GOOGLE_GENAI: GoogleGenAIAdapter,
    ProviderKind.ANTHROPIC: AnthropicAdapter,
    ProviderKind.OLLAMA: OllamaAdapter,
}


def configure_logging() -> None:
    """Send log records to stderr at the configured level."""
    logging.basicConfig(
        level=getattr(logging, get_log_level().upper(), logging.WARNING),
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
        stream=sys.stderr,
    )


def create_adapter(kind: ProviderKind) -> LLMAdapter:
    """Create the adapter for a provider kind."""
    return _ADAPTERS[kind]()


def configured_kinds() -> list[ProviderKind]:
    """Parse CLARITY_LLM_PROVIDERS into provider kinds, skipping unknown names."""
    kinds: list[ProviderKind] = []
    for name in get_enabled_providers():
        try:
            kind = ProviderKind(name)
        except ValueError:
            logger.warning("Ignoring unknown provider %r in CLARITY_LLM_PROVIDERS", name)
            continue
        if kind not in kinds:
            kinds.append(kind)
    return kinds


def build_registry(kinds: Iterable[ProviderKind] | None = None) -> ProviderRegistry:
    """Register one adapter per provider kind (all configured kinds by default)."""
    registry = ProviderRegistry()
    for kind in configured_kinds() if kinds is None else kinds:
        registry.register(create_adapter(kind))
    return registry


class HealthStatus(BaseModel):
    """Provider availability summary for health endpoints."""

    healthy: bool
    available_providers: list[str]
    count: int


class LLMCore:
    """Caller-facing surface over one registry.

    Built once at startup and passed to whatever needs generation; there is
    no module-level instance.
    """

    def __init__(self, registry: ProviderRegistry) -> None:
        """Initialize dispatchers over the given registry."""
        self.registry = registry
        self.dispatcher = Dispatcher(registry)
        self.embeddings = EmbeddingDispatcher(registry)

    async def probe(self) -> list[str]:
        """Re-probe every adapter and return the available names."""
        return await self.registry.probe_all()

    async def generate_text(
        self, prompt: str, options: GenerationOptions | None = None
    ) -> GenerationResult:
        """Generate text from a prompt."""
        return await self.dispatcher.generate_text(prompt, options)

    async def generate_chat(
        self, messages: list[Message], options: GenerationOptions | None = None
    ) -> GenerationResult:
        """Generate a chat reply."""
        return await self.dispatcher.generate_chat(messages, options)

    async def generate_from_template(
        self, template: PromptTemplate, options: GenerationOptions | None = None
    ) -> GenerationResult:
        """Fill a prompt template and generate a chat reply."""
        return await self.dispatcher.generate_from_template(template, options)

    async def generate_embedding(
        self, text: str, options: EmbeddingOptions | None = None
    ) -> EmbeddingResult:
        """Embed a single text."""
        return await self.embeddings.generate_embedding(text, options)

    async def generate_embeddings(
        self, texts: list[str], options: EmbeddingOptions | None = None
    ) -> list[EmbeddingResult]:
        """Embed several texts in input order."""
        return await self.embeddings.generate_embeddings(texts, options)

    def available_provider_names(self) -> list[str]:
        """Return the currently available provider names."""
        return self.registry.available_names()

    def health(self) -> HealthStatus:
        """Healthy when at least one provider is available."""
        names = self.available_provider_names()
        return HealthStatus(healthy=bool(names), available_providers=names, count=len(names))

    async def close(self) -> None:
        """Close every registered adapter."""
        for adapter in self.registry.adapters():
            try:
                await adapter.close()
            except Exception:
                logger.warning("Failed to close %s", adapter.name, exc_info=True)


@asynccontextmanager
async def open_core(
    kinds: Iterable[ProviderKind] | None = None,
    *,
    registry: ProviderRegistry | None = None,
) -> AsyncIterator[LLMCore]:
    """Build and probe the core, yield it, and close all adapters on exit."""
    configure_logging()
    core = LLMCore(registry if registry is not None else build_registry(kinds))
    try:
        available = await core.probe()
        logger.info("LLM providers available: %s", ", ".join(available) or "none")
        yield core
    finally:
        await core.close()
