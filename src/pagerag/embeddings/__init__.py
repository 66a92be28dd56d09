"""Embedding providers — Ollama, OpenAI."""

from pagerag.embeddings.base import EmbeddingProvider
from pagerag.embeddings.factory import available_providers, get_embedding_provider

__all__ = [
    "EmbeddingProvider",
    "available_providers",
    "get_embedding_provider",
]
