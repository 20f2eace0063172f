"""Google Generative AI (Gemini) adapter over the Generative Language REST API."""

import logging
from typing import Any

import httpx

from clarity_llm.config import (
    get_google_api_key,
    get_google_embedding_model,
    get_google_model,
    get_google_url,
    get_llm_timeout,
    get_probe_timeout,
)
from clarity_llm.errors import ConfigurationError
from clarity_llm.llm.base import ALL_CAPABILITIES, BaseAdapter, split_system, usage_from_counts
from clarity_llm.models import (
    AdapterDescriptor,
    EmbeddingOptions,
    EmbeddingResult,
    GenerationOptions,
    GenerationResult,
    Message,
    ProviderKind,
    Role,
)

logger = logging.getLogger(__name__)

_BACKEND_ERRORS = (httpx.HTTPError, ValueError, KeyError, IndexError, TypeError)

# Gemini calls the assistant side of a conversation "model".
_ROLES = {Role.USER: "user", Role.ASSISTANT: "model"}


def _generation_config(options: GenerationOptions | None) -> dict[str, Any]:
    if options is None:
        return {}
    mapped: dict[str, Any] = {
        "temperature": options.temperature,
        "maxOutputTokens": options.max_tokens,
        "topP": options.top_p,
        "frequencyPenalty": options.frequency_penalty,
        "presencePenalty": options.presence_penalty,
        "stopSequences": options.stop_sequences,
    }
    return {k: v for k, v in mapped.items() if v is not None}


def _text_of(data: dict[str, Any]) -> str:
    """Concatenate the text parts of the first candidate."""
    parts = data["candidates"][0]["content"]["parts"]
    return "".join(part.get("text", "") for part in parts)


class GoogleGenAIAdapter(BaseAdapter):
    """Generates text, chat replies and embeddings via Gemini models."""

    def __init__(self, http_client: httpx.AsyncClient | None = None, priority: int = 2) -> None:
        """Initialize with an optional HTTP client."""
        super().__init__(
            AdapterDescriptor(
                name=ProviderKind.GOOGLE_GENAI.value,
                priority=priority,
                capabilities=ALL_CAPABILITIES,
            )
        )
        self._http = http_client

    async def is_available(self) -> bool:
        """Check the key is set and the configured model can be fetched."""
        if not get_google_api_key():
            raise ConfigurationError(self.name, "GOOGLE_AI_API_KEY not set")
        try:
            client = self._get_client()
            resp = await client.get(
                f"{get_google_url()}/models/{get_google_model()}",
                headers=self._headers(),
                timeout=get_probe_timeout(),
            )
            resp.raise_for_status()
        except httpx.HTTPError as exc:
            logger.warning("Google GenAI provider is not available: %s", exc)
            return False
        return True

    async def generate_chat(
        self, messages: list[Message], options: GenerationOptions | None = None
    ) -> GenerationResult:
        """Generate a chat reply via :generateContent."""
        system, turns = split_system(messages)
        body: dict[str, Any] = {
            "contents": [
                {"role": _ROLES[m.role], "parts": [{"text": m.content}]} for m in turns
            ],
        }
        if system is not None:
            body["systemInstruction"] = {"parts": [{"text": system}]}
        if config := _generation_config(options):
            body["generationConfig"] = config

        model = options.model if options and options.model else get_google_model()
        try:
            data = await self._post(f"/models/{model}:generateContent", body)
            content = _text_of(data)
        except _BACKEND_ERRORS as exc:
            raise self._transport_error("generation", exc) from exc

        meta = data.get("usageMetadata")
        usage = None
        if meta:
            usage = usage_from_counts(
                meta.get("promptTokenCount"), meta.get("candidatesTokenCount")
            )
        return self._result(content, options, get_google_model(), usage)

    async def generate_embedding(
        self, text: str, options: EmbeddingOptions | None = None
    ) -> EmbeddingResult:
        """Embed a single text via :embedContent."""
        model = self._embedding_model(options)
        body = {"model": f"models/{model}", "content": {"parts": [{"text": text}]}}
        try:
            data = await self._post(f"/models/{model}:embedContent", body)
            vector: list[float] = data["embedding"]["values"]
        except _BACKEND_ERRORS as exc:
            raise self._transport_error("embedding", exc) from exc
        return self._embedding(vector, options, get_google_embedding_model())

    async def generate_embeddings(
        self, texts: list[str], options: EmbeddingOptions | None = None
    ) -> list[EmbeddingResult]:
        """Embed several texts via :batchEmbedContents, preserving input order."""
        model = self._embedding_model(options)
        body = {
            "requests": [
                {"model": f"models/{model}", "content": {"parts": [{"text": text}]}}
                for text in texts
            ]
        }
        try:
            data = await self._post(f"/models/{model}:batchEmbedContents", body)
            vectors: list[list[float]] = [e["values"] for e in data["embeddings"]]
        except _BACKEND_ERRORS as exc:
            raise self._transport_error("batch embedding", exc) from exc
        return [self._embedding(v, options, get_google_embedding_model()) for v in vectors]

    @staticmethod
    def _embedding_model(options: EmbeddingOptions | None) -> str:
        return options.model if options and options.model else get_google_embedding_model()

    @staticmethod
    def _headers() -> dict[str, str]:
        return {"x-goog-api-key": get_google_api_key()}

    async def _post(self, path: str, body: dict[str, Any]) -> dict[str, Any]:
        client = self._get_client()
        resp = await client.post(
            f"{get_google_url()}{path}",
            json=body,
            headers=self._headers(),
            timeout=get_llm_timeout(),
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
