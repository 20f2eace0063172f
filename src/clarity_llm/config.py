"""Environment-variable-based configuration."""

import os

_DEFAULT_PROVIDERS = "openai,google-genai,anthropic,ollama"


def get_log_level() -> str:
    """Return the logging level from CLARITY_LOG_LEVEL."""
    return os.environ.get("CLARITY_LOG_LEVEL", "WARNING")


def get_enabled_providers() -> list[str]:
    """Return provider names from CLARITY_LLM_PROVIDERS, in the order given."""
    raw = os.environ.get("CLARITY_LLM_PROVIDERS", _DEFAULT_PROVIDERS)
    return [name.strip() for name in raw.split(",") if name.strip()]


def get_llm_timeout() -> float:
    """Return the generation timeout in seconds from CLARITY_LLM_TIMEOUT."""
    return float(os.environ.get("CLARITY_LLM_TIMEOUT", "60.0"))


def get_probe_timeout() -> float:
    """Return the availability probe timeout in seconds from CLARITY_PROBE_TIMEOUT."""
    return float(os.environ.get("CLARITY_PROBE_TIMEOUT", "10.0"))


def get_openai_api_key() -> str:
    """Return the OpenAI API key from OPENAI_API_KEY (empty if unset)."""
    return os.environ.get("OPENAI_API_KEY", "")


def get_openai_model() -> str:
    """Return the OpenAI chat model from OPENAI_MODEL."""
    return os.environ.get("OPENAI_MODEL", "gpt-4-turbo-preview")


def get_openai_embedding_model() -> str:
    """Return the OpenAI embedding model from OPENAI_EMBEDDING_MODEL."""
    return os.environ.get("OPENAI_EMBEDDING_MODEL", "text-embedding-ada-002")


def get_openai_base_url() -> str | None:
    """Return an OpenAI-compatible base URL from OPENAI_BASE_URL, if set."""
    return os.environ.get("OPENAI_BASE_URL") or None


def get_google_api_key() -> str:
    """Return the Google AI API key from GOOGLE_AI_API_KEY (empty if unset)."""
    return os.environ.get("GOOGLE_AI_API_KEY", "")


def get_google_model() -> str:
    """Return the Gemini chat model from GOOGLE_AI_MODEL."""
    return os.environ.get("GOOGLE_AI_MODEL", "gemini-pro")


def get_google_embedding_model() -> str:
    """Return the Gemini embedding model from GOOGLE_AI_EMBEDDING_MODEL."""
    return os.environ.get("GOOGLE_AI_EMBEDDING_MODEL", "embedding-001")


def get_google_url() -> str:
    """Return the Generative Language API base URL from GOOGLE_AI_URL."""
    return os.environ.get("GOOGLE_AI_URL", "https://generativelanguage.googleapis.com/v1beta")


def get_anthropic_api_key() -> str:
    """Return the Anthropic API key from ANTHROPIC_API_KEY (empty if unset)."""
    return os.environ.get("ANTHROPIC_API_KEY", "")


def get_anthropic_model() -> str:
    """Return the Anthropic model from ANTHROPIC_MODEL."""
    return os.environ.get("ANTHROPIC_MODEL", "claude-3-opus-20240229")


def get_ollama_url() -> str:
    """Return the Ollama API URL from OLLAMA_URL."""
    return os.environ.get("OLLAMA_URL", "http://localhost:11434")


def get_ollama_model() -> str:
    """Return the Ollama generation model from OLLAMA_MODEL."""
    return os.environ.get("OLLAMA_MODEL", "qwen3:4b")


def get_ollama_embedding_model() -> str:
    """Return the Ollama embedding model from OLLAMA_EMBEDDING_MODEL."""
    return os.environ.get("OLLAMA_EMBEDDING_MODEL", "qwen3-embedding:0.6b")
