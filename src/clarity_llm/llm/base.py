"""Shared normalization helpers for concrete adapters."""

import logging

from clarity_llm.errors import TransportError
from clarity_llm.models import (
    AdapterDescriptor,
    Capability,
    EmbeddingOptions,
    EmbeddingResult,
    GenerationOptions,
    GenerationResult,
    Message,
    Role,
    TokenUsage,
)

logger = logging.getLogger(__name__)

TEXT_AND_CHAT = frozenset({Capability.TEXT, Capability.CHAT})
ALL_CAPABILITIES = frozenset({Capability.TEXT, Capability.CHAT, Capability.EMBEDDING})


class BaseAdapter:
    """Descriptor plumbing and result shaping common to every backend."""

    def __init__(self, descriptor: AdapterDescriptor) -> None:
        """Initialize with the adapter's fixed descriptor."""
        self._descriptor = descriptor

    @property
    def descriptor(self) -> AdapterDescriptor:
        """Name, priority and capabilities of this adapter."""
        return self._descriptor

    @property
    def name(self) -> str:
        """Unique adapter name."""
        return self._descriptor.name

    @property
    def priority(self) -> int:
        """Selection preference; lower sorts first."""
        return self._descriptor.priority

    async def generate_text(
        self, prompt: str, options: GenerationOptions | None = None
    ) -> GenerationResult:
        """Generate text by sending the prompt as a single user message."""
        return await self.generate_chat([Message(role=Role.USER, content=prompt)], options)

    async def generate_chat(
        self, messages: list[Message], options: GenerationOptions | None = None
    ) -> GenerationResult:
        """Generate a chat reply. Implemented by each backend."""
        raise NotImplementedError

    def _result(
        self,
        content: str,
        options: GenerationOptions | None,
        default_model: str,
        usage: TokenUsage | None = None,
    ) -> GenerationResult:
        return GenerationResult(
            content=content,
            usage=usage,
            model=_model(options, default_model),
            provider=self.name,
        )

    def _embedding(
        self, vector: list[float], options: EmbeddingOptions | None, default_model: str
    ) -> EmbeddingResult:
        return EmbeddingResult(
            embedding=[float(v) for v in vector],
            model=_model(options, default_model),
            provider=self.name,
        )

    def _transport_error(self, operation: str, exc: Exception) -> TransportError:
        """Log a backend failure and wrap it for the dispatcher."""
        logger.error("%s %s failed: %s", self.name, operation, exc)
        return TransportError(self.name, f"{operation} failed: {exc}")


def _model(options: GenerationOptions | EmbeddingOptions | None, default: str) -> str:
    if options is not None and options.model:
        return options.model
    return default


def split_system(messages: list[Message]) -> tuple[str | None, list[Message]]:
    """Separate system messages (joined by blank lines) from the conversation turns."""
    system = [m.content for m in messages if m.role == Role.SYSTEM]
    turns = [m for m in messages if m.role != Role.SYSTEM]
    return ("\n\n".join(system) if system else None), turns


def usage_from_counts(prompt: int | None, completion: int | None) -> TokenUsage | None:
    """Build usage from reported counts, or None when the backend reported neither."""
    if prompt is None and completion is None:
        return None
    prompt = prompt or 0
    completion = completion or 0
    return TokenUsage(
        prompt_tokens=prompt,
        completion_tokens=completion,
        total_tokens=prompt + completion,
    )
