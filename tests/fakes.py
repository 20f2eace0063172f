"""Controllable fake adapters for dispatch tests."""

from clarity_llm.models import (
    AdapterDescriptor,
    Capability,
    EmbeddingOptions,
    EmbeddingResult,
    GenerationOptions,
    GenerationResult,
    Message,
)
from clarity_llm.registry import ProviderRegistry


class FakeAdapter:
    """Text/chat adapter that records calls and can be told to fail."""

    def __init__(
        self,
        name: str,
        priority: int,
        *,
        available: bool | Exception = True,
        error: Exception | None = None,
        capabilities: frozenset[Capability] | None = None,
    ):
        self.descriptor = AdapterDescriptor(
            name=name,
            priority=priority,
            capabilities=capabilities or frozenset({Capability.TEXT, Capability.CHAT}),
        )
        self.name = name
        self.priority = priority
        self.available = available
        self.error = error
        self.calls: list[tuple[str, object, GenerationOptions | None]] = []
        self.probe_count = 0
        self.closed = False

    async def is_available(self) -> bool:
        self.probe_count += 1
        if isinstance(self.available, Exception):
            raise self.available
        return self.available

    async def generate_text(
        self, prompt: str, options: GenerationOptions | None = None
    ) -> GenerationResult:
        self.calls.append(("text", prompt, options))
        if self.error is not None:
            raise self.error
        return GenerationResult(
            content=f"{self.name} says: {prompt}", model=f"{self.name}-model", provider=self.name
        )

    async def generate_chat(
        self, messages: list[Message], options: GenerationOptions | None = None
    ) -> GenerationResult:
        self.calls.append(("chat", list(messages), options))
        if self.error is not None:
            raise self.error
        return GenerationResult(
            content=f"{self.name} replied to {len(messages)} messages",
            model=f"{self.name}-model",
            provider=self.name,
        )

    async def close(self) -> None:
        self.closed = True


class FakeEmbeddingAdapter(FakeAdapter):
    """Adapter that also embeds; vectors encode the input text length."""

    def __init__(self, name: str, priority: int, **kwargs):
        kwargs.setdefault(
            "capabilities",
            frozenset({Capability.TEXT, Capability.CHAT, Capability.EMBEDDING}),
        )
        super().__init__(name, priority, **kwargs)
        self.drop_last = False

    async def generate_embedding(
        self, text: str, options: EmbeddingOptions | None = None
    ) -> EmbeddingResult:
        self.calls.append(("embedding", text, None))
        if self.error is not None:
            raise self.error
        return EmbeddingResult(embedding=[float(len(text))], model="fake-embed", provider=self.name)

    async def generate_embeddings(
        self, texts: list[str], options: EmbeddingOptions | None = None
    ) -> list[EmbeddingResult]:
        self.calls.append(("embeddings", list(texts), None))
        if self.error is not None:
            raise self.error
        results = [
            EmbeddingResult(
                embedding=[float(len(t)), float(i)], model="fake-embed", provider=self.name
            )
            for i, t in enumerate(texts)
        ]
        return results[:-1] if self.drop_last else results


async def probed_registry(*adapters: FakeAdapter) -> ProviderRegistry:
    """Register the adapters and run one probe pass."""
    registry = ProviderRegistry()
    for adapter in adapters:
        registry.register(adapter)
    await registry.probe_all()
    return registry
