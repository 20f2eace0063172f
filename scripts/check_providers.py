"""Quick check of which generation providers are configured and reachable."""

import asyncio
import sys

from clarity_llm.core import build_registry, configured_kinds


async def _check() -> int:
    kinds = configured_kinds()
    print(f"Probing providers: {', '.join(kinds) or '(none)'}")

    registry = build_registry(kinds)
    try:
        available = await registry.probe_all()
    finally:
        for adapter in registry.adapters():
            await adapter.close()

    for adapter in registry.adapters():
        mark = "ok" if adapter.name in available else "unavailable"
        caps = ", ".join(sorted(adapter.descriptor.capabilities))
        print(f"  [{adapter.priority}] {adapter.name:<14} {mark:<12} ({caps})")

    if not available:
        print("  No provider is available. Set an API key or start Ollama with: ollama serve")
        return 1
    print(f"Default provider: {available[0]}")
    return 0


def main() -> None:
    """Probe every configured provider and report availability."""
    sys.exit(asyncio.run(_check()))


if __name__ == "__main__":
    main()
