"""Generation-provider orchestration with priority selection and fallback."""

from clarity_llm.core import HealthStatus, LLMCore, build_registry, open_core
from clarity_llm.dispatch import Dispatcher, EmbeddingDispatcher
from clarity_llm.errors import (
    ConfigurationError,
    LLMError,
    NoProviderAvailableError,
    TransportError,
)
from clarity_llm.models import (
    AdapterDescriptor,
    Capability,
    EmbeddingOptions,
    EmbeddingResult,
    GenerationOptions,
    GenerationResult,
    Message,
    PromptTemplate,
    ProviderKind,
    Role,
    TokenUsage,
)
from clarity_llm.registry import ProviderRegistry
from clarity_llm.template import fill

__all__ = [
    "AdapterDescriptor",
    "Capability",
    "ConfigurationError",
    "Dispatcher",
    "EmbeddingDispatcher",
    "EmbeddingOptions",
    "EmbeddingResult",
    "GenerationOptions",
    "GenerationResult",
    "HealthStatus",
    "LLMCore",
    "LLMError",
    "Message",
    "NoProviderAvailableError",
    "PromptTemplate",
    "ProviderKind",
    "ProviderRegistry",
    "Role",
    "TokenUsage",
    "TransportError",
    "build_registry",
    "fill",
    "open_core",
]
