"""OpenAI Embeddings API provider (``openai`` extra)."""

from __future__ import annotations

import logging
from typing import Any

from pagerag.embeddings.base import EmbeddingProvider

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "text-embedding-3-small"

_NATIVE_DIMENSIONS = {
    "text-embedding-3-small": 1536,
    "text-embedding-3-large": 3072,
}

# Per-request input limit of the embeddings endpoint
MAX_INPUTS_PER_REQUEST = 2048


class OpenAIEmbeddingProvider(EmbeddingProvider):
    """``dimension`` below the model's native size is requested as shortened vectors."""

    def __init__(
        self,
        model: str = DEFAULT_MODEL,
        api_key: str | None = None,
        dimension: int | None = None,
        client: Any | None = None,
    ):
        if client is None:
            try:
                import openai
            except ImportError as exc:
                raise ImportError(
                    "openai package required: pip install page-aware-rag[openai]"
                ) from exc
            client = openai.OpenAI(api_key=api_key)

        native = _NATIVE_DIMENSIONS.get(model, 1536)
        self.model = model
        self._dimension = dimension or native
        self._shorten = dimension is not None and dimension < native
        self._client = client

    def _embed(self, texts: list[str]) -> list[list[float]]:
        extra: dict[str, Any] = {"dimensions": self._dimension} if self._shorten else {}
        vectors: list[list[float]] = []
        for start in range(0, len(texts), MAX_INPUTS_PER_REQUEST):
            batch = texts[start : start + MAX_INPUTS_PER_REQUEST]
            resp = self._client.embeddings.create(model=self.model, input=batch, **extra)
            vectors.extend(d.embedding for d in sorted(resp.data, key=lambda d: d.index))
            logger.debug("Embedded %d texts with %s", len(batch), self.model)
        return vectors

    @property
    def dimension(self) -> int:
        return self._dimension
