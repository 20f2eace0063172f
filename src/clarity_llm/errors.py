"""Error taxonomy for provider dispatch."""


class LLMError(Exception):
    """Base class for all errors raised by clarity_llm."""


class ConfigurationError(LLMError):
    """An adapter cannot be constructed or probed (missing credentials or SDK)."""

    def __init__(self, provider: str, reason: str) -> None:
        super().__init__(f"{provider}: {reason}")
        self.provider = provider
        self.reason = reason


class TransportError(LLMError):
    """A generation or embedding call failed at runtime."""

    def __init__(self, provider: str, message: str) -> None:
        super().__init__(f"{provider}: {message}")
        self.provider = provider


class NoProviderAvailableError(LLMError):
    """Selection found no available adapter for the requested operation."""

    def __init__(self, operation: str = "generation") -> None:
        super().__init__(f"No {operation} provider available")
        self.operation = operation
