"""Base class for embedding providers.

``embed_texts`` is the single entry point used by ingestion and retrieval.
It checks that one vector comes back per input text and reports any
client or transport failure as ``EmbeddingError``; subclasses only
implement ``_embed``.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod

from pagerag.errors import EmbeddingError

logger = logging.getLogger(__name__)


class EmbeddingProvider(ABC):
    """Embeds chunk texts at ingest time and questions at query time."""

    def embed_texts(self, texts: list[str]) -> list[list[float]]:
        """Embed a batch of texts, preserving input order.

        Raises:
            EmbeddingError: The backend failed or returned the wrong
                number of vectors.
        """
        if not texts:
            return []

        try:
            vectors = self._embed(texts)
        except EmbeddingError:
            raise
        except Exception as exc:
            raise EmbeddingError(
                f"{self.provider_name()} could not embed {len(texts)} texts: {exc}", cause=exc,
            ) from exc

        if len(vectors) != len(texts):
            raise EmbeddingError(
                f"{self.provider_name()} returned {len(vectors)} vectors for {len(texts)} texts"
            )
        return vectors

    def embed_query(self, query: str) -> list[float]:
        return self.embed_texts([query])[0]

    @abstractmethod
    def _embed(self, texts: list[str]) -> list[list[float]]:
        """Call the backend for a non-empty batch."""

    @property
    @abstractmethod
    def dimension(self) -> int:
        """Vector length; sizes the FAISS index."""

    @classmethod
    def provider_name(cls) -> str:
        return cls.__name__
