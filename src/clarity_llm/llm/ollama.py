"""Ollama adapter for a local model server."""

import logging
from typing import Any

import httpx

from clarity_llm.config import (
    get_llm_timeout,
    get_ollama_embedding_model,
    get_ollama_model,
    get_ollama_url,
    get_probe_timeout,
)
from clarity_llm.llm.base import ALL_CAPABILITIES, BaseAdapter, usage_from_counts
from clarity_llm.models import (
    AdapterDescriptor,
    EmbeddingOptions,
    EmbeddingResult,
    GenerationOptions,
    GenerationResult,
    Message,
    ProviderKind,
    TokenUsage,
)

logger = logging.getLogger(__name__)

# Network failures plus malformed or unexpected response bodies.
_BACKEND_ERRORS = (httpx.HTTPError, ValueError, KeyError, IndexError, TypeError)


def _ollama_options(options: GenerationOptions | None) -> dict[str, Any]:
    """Map generation options onto Ollama's ``options`` block."""
    if options is None:
        return {}
    mapped: dict[str, Any] = {
        "temperature": options.temperature,
        "num_predict": options.max_tokens,
        "top_p": options.top_p,
        "frequency_penalty": options.frequency_penalty,
        "presence_penalty": options.presence_penalty,
        "stop": options.stop_sequences,
    }
    return {k: v for k, v in mapped.items() if v is not None}


def _usage(data: dict[str, Any]) -> TokenUsage | None:
    return usage_from_counts(data.get("prompt_eval_count"), data.get("eval_count"))


class OllamaAdapter(BaseAdapter):
    """Generates text, chat replies and embeddings via Ollama's HTTP API."""

    def __init__(self, http_client: httpx.AsyncClient | None = None, priority: int = 4) -> None:
        """Initialize with an optional HTTP client."""
        super().__init__(
            AdapterDescriptor(
                name=ProviderKind.OLLAMA.value,
                priority=priority,
                capabilities=ALL_CAPABILITIES,
            )
        )
        self._http = http_client

    async def is_available(self) -> bool:
        """Check if Ollama is reachable via /api/tags."""
        try:
            client = self._get_client()
            resp = await client.get(f"{get_ollama_url()}/api/tags", timeout=get_probe_timeout())
            resp.raise_for_status()
        except httpx.HTTPError as exc:
            logger.warning("Ollama not reachable at %s: %s", get_ollama_url(), exc)
            return False
        return True

    async def generate_text(
        self, prompt: str, options: GenerationOptions | None = None
    ) -> GenerationResult:
        """Generate text via /api/generate."""
        payload = self._payload(options, prompt=prompt)
        try:
            data = await self._post("/api/generate", payload)
            content: str = data["response"]
        except _BACKEND_ERRORS as exc:
            raise self._transport_error("generation", exc) from exc
        return self._result(content, options, get_ollama_model(), _usage(data))

    async def generate_chat(
        self, messages: list[Message], options: GenerationOptions | None = None
    ) -> GenerationResult:
        """Generate a chat reply via /api/chat."""
        payload = self._payload(
            options,
            messages=[{"role": m.role.value, "content": m.content} for m in messages],
        )
        try:
            data = await self._post("/api/chat", payload)
            content: str = data["message"]["content"]
        except _BACKEND_ERRORS as exc:
            raise self._transport_error("chat generation", exc) from exc
        return self._result(content, options, get_ollama_model(), _usage(data))

    async def generate_embedding(
        self, text: str, options: EmbeddingOptions | None = None
    ) -> EmbeddingResult:
        """Embed a single text via /api/embed."""
        results = await self._embed(text, options)
        return results[0]

    async def generate_embeddings(
        self, texts: list[str], options: EmbeddingOptions | None = None
    ) -> list[EmbeddingResult]:
        """Embed several texts in one /api/embed call."""
        return await self._embed(texts, options)

    async def _embed(
        self, inputs: str | list[str], options: EmbeddingOptions | None
    ) -> list[EmbeddingResult]:
        default_model = get_ollama_embedding_model()
        model = options.model if options and options.model else default_model
        try:
            data = await self._post("/api/embed", {"model": model, "input": inputs})
            # /api/embed returns {"embeddings": [[...], ...]} even for a single input
            vectors: list[list[float]] = data["embeddings"]
            if not vectors:
                raise ValueError("empty embeddings list")
        except _BACKEND_ERRORS as exc:
            raise self._transport_error("embedding", exc) from exc
        return [self._embedding(vector, options, default_model) for vector in vectors]

    def _payload(self, options: GenerationOptions | None, **body: Any) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "model": options.model if options and options.model else get_ollama_model(),
            "stream": False,
            **body,
        }
        if ollama_options := _ollama_options(options):
            payload["options"] = ollama_options
        return payload

    async def _post(self, path: str, payload: dict[str, Any]) -> dict[str, Any]:
        client = self._get_client()
        resp = await client.post(
            f"{get_ollama_url()}{path}", json=payload, timeout=get_llm_timeout()
        )
        resp.raise_for_status()
        data: dict[str, Any] = resp.json()
        return data

    def _get_client(self) -> httpx.AsyncClient:
        if self._http is None:
            self._http = httpx.AsyncClient()
        return self._http

    async def close(self) -> None:
        """Close the HTTP client if open."""
        if self._http is not None:
            await self._http.aclose()
            self._http = None
