"""Provider registry with priority ordering and availability probing."""

import asyncio
import logging

from clarity_llm.errors import ConfigurationError
from clarity_llm.llm.provider import LLMAdapter
from clarity_llm.models import Capability

logger = logging.getLogger(__name__)


class ProviderRegistry:
    """Ordered set of adapters and the snapshot of those currently reachable.

    The availability snapshot is an immutable ``frozenset`` replaced
    wholesale by ``probe_all()``. Request handling only reads it, so
    in-flight requests keep a consistent view while a probe runs.
    """

    def __init__(self) -> None:
        """Initialize an empty registry."""
        self._adapters: list[LLMAdapter] = []
        self._available: frozenset[str] = frozenset()

    def register(self, adapter: LLMAdapter) -> None:
        """Add an adapter, keeping ascending priority (ties keep insertion order)."""
        if self.get(adapter.name) is not None:
            raise ValueError(f"Adapter already registered: {adapter.name}")
        self._adapters.append(adapter)
        self._adapters.sort(key=lambda a: a.priority)
        logger.debug("Registered adapter %s (priority %d)", adapter.name, adapter.priority)

    def get(self, name: str) -> LLMAdapter | None:
        """Return the registered adapter with this name, if any."""
        for adapter in self._adapters:
            if adapter.name == name:
                return adapter
        return None

    def adapters(self, capability: Capability | None = None) -> list[LLMAdapter]:
        """Return registered adapters in priority order, optionally by capability."""
        if capability is None:
            return list(self._adapters)
        return [a for a in self._adapters if a.descriptor.supports(capability)]

    def is_available(self, name: str) -> bool:
        """Return True if the named adapter is in the current availability snapshot."""
        return name in self._available

    def available_names(self) -> list[str]:
        """Return the names in the current snapshot, in priority order."""
        snapshot = self._available
        return [a.name for a in self._adapters if a.name in snapshot]

    async def probe_all(self) -> list[str]:
        """Probe every adapter concurrently and publish the new availability set.

        Adapters that report False or raise are left out and the reason is
        logged. Returns the newly available names in priority order.
        """
        logger.info("Checking LLM provider availability...")
        adapters = list(self._adapters)
        outcomes = await asyncio.gather(
            *(a.is_available() for a in adapters), return_exceptions=True
        )

        available: set[str] = set()
        for adapter, outcome in zip(adapters, outcomes, strict=True):
            if outcome is True:
                available.add(adapter.name)
                logger.info("%s is available", adapter.name)
            elif isinstance(outcome, ConfigurationError):
                logger.warning("%s is not available: %s", adapter.name, outcome.reason)
            elif isinstance(outcome, asyncio.CancelledError):
                raise outcome
            elif isinstance(outcome, BaseException):
                logger.warning("%s is not available: probe raised %r", adapter.name, outcome)
            else:
                logger.warning("%s is not available: probe returned %r", adapter.name, outcome)

        self._available = frozenset(available)

        if not available:
            logger.error("No LLM providers are available!")
        return self.available_names()
