"""Retriever — embed query, search the collection, rank by similarity."""

from __future__ import annotations

import logging

from pagerag.embeddings.base import EmbeddingProvider
from pagerag.errors import VectorStoreError
from pagerag.retrieval.schemas import RetrievalConfig, RetrievalResult
from pagerag.vectorstore.base import VectorStore

logger = logging.getLogger(__name__)


class Retriever:
    """Orchestrates query embedding → similarity search → score filtering."""

    def __init__(
        self,
        embedding_provider: EmbeddingProvider,
        vector_store: VectorStore,
    ):
        self.embedding_provider = embedding_provider
        self.vector_store = vector_store

    def retrieve(
        self,
        query: str,
        config: RetrievalConfig | None = None,
    ) -> RetrievalResult:
        """Return up to ``top_k`` chunks ordered by descending similarity.

        An empty collection gives an empty result. A failing store raises
        ``VectorStoreError`` rather than returning nothing; a failing
        embedder raises ``EmbeddingError``.

        Args:
            query: Free-text search query.
            config: Retrieval settings (top_k, filters, min score).

        Returns:
            A ``RetrievalResult`` with ranked search results.
        """
        cfg = config or RetrievalConfig()

        query_embedding = self.embedding_provider.embed_query(query)

        try:
            raw_results = self.vector_store.search(
                query_embedding=query_embedding,
                top_k=cfg.top_k,
                metadata_filter=cfg.metadata_filter,
            )
        except VectorStoreError:
            raise
        except Exception as exc:
            raise VectorStoreError(f"Search failed: {exc}", cause=exc) from exc

        total_candidates = len(raw_results)
        results = sorted(raw_results, key=lambda r: r.score, reverse=True)
        if cfg.min_score > 0:
            results = [r for r in results if r.score >= cfg.min_score]
        results = results[: cfg.top_k]

        result = RetrievalResult(
            query=query,
            results=results,
            total_candidates=total_candidates,
        )
        logger.info(
            "Retrieved %d chunks from pages %s (tables=%d, images=%d)",
            len(results),
            result.pages,
            result.table_count,
            result.image_count,
        )
        return result
