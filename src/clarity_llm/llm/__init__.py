"""Generation backend adapters."""

from clarity_llm.llm.anthropic import AnthropicAdapter
from clarity_llm.llm.google import GoogleGenAIAdapter
from clarity_llm.llm.ollama import OllamaAdapter
from clarity_llm.llm.openai import OpenAIAdapter
from clarity_llm.llm.provider import EmbeddingAdapter, LLMAdapter

__all__ = [
    "AnthropicAdapter",
    "EmbeddingAdapter",
    "GoogleGenAIAdapter",
    "LLMAdapter",
    "OllamaAdapter",
    "OpenAIAdapter",
]
