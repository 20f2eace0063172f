"""Request, result and adapter descriptor models."""

from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class Capability(StrEnum):
    """An ability an adapter advertises."""

    TEXT = "text"
    CHAT = "chat"
    EMBEDDING = "embedding"


class ProviderKind(StrEnum):
    """Built-in generation backends."""

    OPENAI = "openai"
    GOOGLE_GENAI = "google-genai"
    ANTHROPIC = "anthropic"
    OLLAMA = "ollama"


class Role(StrEnum):
    """Speaker of a chat message."""

    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"


class Message(BaseModel):
    """A single chat turn."""

    role: Role
    content: str


class GenerationOptions(BaseModel):
    """Per-request generation parameters. Unset fields mean adapter default."""

    temperature: float | None = Field(default=None, ge=0.0)
    max_tokens: int | None = Field(default=None, ge=1)
    top_p: float | None = Field(default=None, ge=0.0, le=1.0)
    frequency_penalty: float | None = None
    presence_penalty: float | None = None
    stop_sequences: list[str] | None = None
    model: str | None = None
    provider: str | None = None


class EmbeddingOptions(BaseModel):
    """Per-request embedding parameters."""

    model: str | None = None
    provider: str | None = None


class TokenUsage(BaseModel):
    """Token counts as reported by the backend."""

    prompt_tokens: int = 0
    completion_tokens: int = 0
    total_tokens: int = 0


class GenerationResult(BaseModel):
    """Normalized text or chat generation output."""

    content: str
    usage: TokenUsage | None = None
    model: str
    provider: str


class EmbeddingResult(BaseModel):
    """A single embedding vector."""

    embedding: list[float]
    model: str
    provider: str


class PromptTemplate(BaseModel):
    """A system/user prompt pair with ``{{name}}`` placeholders."""

    system: str | None = None
    user: str
    variables: dict[str, Any] | None = None


class AdapterDescriptor(BaseModel):
    """Identity, preference and capabilities of a registered adapter."""

    model_config = ConfigDict(frozen=True)

    name: str
    priority: int
    capabilities: frozenset[Capability] = Field(
        default_factory=lambda: frozenset({Capability.TEXT, Capability.CHAT})
    )

    def supports(self, capability: Capability) -> bool:
        """Return True if the adapter advertises the capability."""
        return capability in self.capabilities
