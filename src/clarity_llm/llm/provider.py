"""Adapter protocols for pluggable generation backends."""

from typing import Protocol, runtime_checkable

from clarity_llm.models import (
    AdapterDescriptor,
    EmbeddingOptions,
    EmbeddingResult,
    GenerationOptions,
    GenerationResult,
    Message,
)


@runtime_checkable
class LLMAdapter(Protocol):
    """Uniform surface over one text/chat generation backend.

    Generation methods raise on failure (``TransportError`` for backend
    errors) rather than returning a sentinel, so the dispatcher can fall
    back to another adapter.
    """

    @property
    def descriptor(self) -> AdapterDescriptor:
        """Name, priority and capabilities of this adapter."""
        ...

    @property
    def name(self) -> str:
        """Unique, stable adapter name."""
        ...

    @property
    def priority(self) -> int:
        """Selection preference; lower sorts first."""
        ...

    async def is_available(self) -> bool:
        """Check if the backend is configured and reachable."""
        ...

    async def generate_text(
        self, prompt: str, options: GenerationOptions | None = None
    ) -> GenerationResult:
        """Generate a completion for a single prompt."""
        ...

    async def generate_chat(
        self, messages: list[Message], options: GenerationOptions | None = None
    ) -> GenerationResult:
        """Generate a reply to an ordered sequence of chat messages."""
        ...

    async def close(self) -> None:
        """Release resources."""
        ...


@runtime_checkable
class EmbeddingAdapter(LLMAdapter, Protocol):
    """An adapter that also advertises the embedding capability."""

    async def generate_embedding(
        self, text: str, options: EmbeddingOptions | None = None
    ) -> EmbeddingResult:
        """Embed a single text."""
        ...

    async def generate_embeddings(
        self, texts: list[str], options: EmbeddingOptions | None = None
    ) -> list[EmbeddingResult]:
        """Embed several texts, one result per input in input order."""
        ...
