"""Ollama embedding provider — local-first, no API keys needed.

Talks to the Ollama REST API (http://localhost:11434) with models such as
``nomic-embed-text`` or ``mxbai-embed-large``.
"""

from __future__ import annotations

import logging

import httpx

from pagerag.embeddings.base import EmbeddingProvider

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "nomic-embed-text"
DEFAULT_BASE_URL = "http://localhost:11434"
DEFAULT_DIM = 768


class OllamaEmbeddingProvider(EmbeddingProvider):
    """Embed text via a local Ollama server."""

    def __init__(
        self,
        model: str = DEFAULT_MODEL,
        base_url: str = DEFAULT_BASE_URL,
        dimension: int = DEFAULT_DIM,
        timeout: float = 60.0,
        client: httpx.Client | None = None,
    ):
        self.model = model
        self._dimension = dimension
        self._client = client or httpx.Client(base_url=base_url.rstrip("/"), timeout=timeout)

    def _embed(self, texts: list[str]) -> list[list[float]]:
        resp = self._client.post("/api/embed", json={"model": self.model, "input": texts})
        # Servers older than v0.5 lack the batch endpoint
        if resp.status_code != 404:
            resp.raise_for_status()
            return resp.json()["embeddings"]

        logger.debug("Ollama batch endpoint unavailable; embedding %d texts one by one", len(texts))
        return [self._embed_single(text) for text in texts]

    @property
    def dimension(self) -> int:
        return self._dimension

    def _embed_single(self, text: str) -> list[float]:
        resp = self._client.post("/api/embeddings", json={"model": self.model, "prompt": text})
        resp.raise_for_status()
        return resp.json()["embedding"]
