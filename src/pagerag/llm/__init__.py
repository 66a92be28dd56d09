"""Answer generators — Ollama, OpenAI, Anthropic."""

from pagerag.llm.base import LLMProvider
from pagerag.llm.factory import available_providers, get_llm_provider

__all__ = ["LLMProvider", "available_providers", "get_llm_provider"]
