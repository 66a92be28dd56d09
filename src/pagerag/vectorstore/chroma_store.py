"""Chroma vector store — local persistent, remote HTTP, or Chroma Cloud.

Requires the ``chroma`` extra. The collection uses cosine distance, which
is converted to a similarity in ``[0, 1]`` on search.
"""

from __future__ import annotations

import logging
from typing import Any

from pagerag.errors import VectorStoreError
from pagerag.vectorstore.base import VectorStore
from pagerag.vectorstore.schemas import (
    DEFAULT_SCORE,
    MetadataFilter,
    SearchResult,
    VectorRecord,
    metadata_from_dict,
    metadata_to_dict,
    similarity_from_distance,
)

logger = logging.getLogger(__name__)

DEFAULT_COLLECTION = "pdf_documents"


class ChromaStore(VectorStore):
    """Chroma-backed vector store bound to a single collection."""

    def __init__(
        self,
        collection_name: str = DEFAULT_COLLECTION,
        path: str | None = None,
        host: str | None = None,
        port: int = 8000,
        tenant: str | None = None,
        database: str | None = None,
        api_key: str | None = None,
        client: Any | None = None,
        default_score: float = DEFAULT_SCORE,
    ):
        try:
            import chromadb
        except ImportError as exc:
            raise ImportError(
                "chromadb required: pip install page-aware-rag[chroma]"
            ) from exc

        self._collection_name = collection_name
        self._default_score = default_score

        try:
            if client is not None:
                self._client = client
            elif api_key:
                self._client = chromadb.CloudClient(
                    tenant=tenant, database=database, api_key=api_key,
                )
            elif host:
                self._client = chromadb.HttpClient(host=host, port=port)
            elif path:
                self._client = chromadb.PersistentClient(path=path)
            else:
                # In-memory for testing
                self._client = chromadb.EphemeralClient()
            self._collection = self._get_or_create()
        except Exception as exc:
            raise VectorStoreError(f"ChromaDB setup failed: {exc}", cause=exc) from exc

        logger.info("ChromaStore ready (collection '%s')", collection_name)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def add(self, records: list[VectorRecord]) -> int:
        if not records:
            return 0

        try:
            self._collection.add(
                ids=[r.id for r in records],
                embeddings=[[float(x) for x in r.embedding] for r in records],
                documents=[r.text for r in records],
                metadatas=[metadata_to_dict(r.metadata) for r in records],
            )
        except Exception as exc:
            raise VectorStoreError(f"Storage failed: {exc}", cause=exc) from exc

        logger.info("ChromaStore added %d records", len(records))
        return len(records)

    def search(
        self,
        query_embedding: list[float],
        top_k: int = 5,
        metadata_filter: MetadataFilter | None = None,
    ) -> list[SearchResult]:
        if top_k <= 0:
            return []

        try:
            total = self._collection.count()
            if total == 0:
                return []

            kwargs: dict[str, Any] = {
                "query_embeddings": [[float(x) for x in query_embedding]],
                "n_results": min(top_k, total),
                "include": ["documents", "metadatas", "distances"],
            }
            where = self._where(metadata_filter)
            if where:
                kwargs["where"] = where
            response = self._collection.query(**kwargs)
        except Exception as exc:
            raise VectorStoreError(f"Search failed: {exc}", cause=exc) from exc

        ids = (response.get("ids") or [[]])[0]
        documents = (response.get("documents") or [[]])[0]
        metadatas = (response.get("metadatas") or [[]])[0]
        distances = response.get("distances")
        distance_row = distances[0] if distances else [None] * len(ids)

        results = [
            SearchResult(
                id=str(chunk_id),
                text=document or "",
                score=similarity_from_distance(distance, self._default_score),
                metadata=metadata_from_dict(metadata),
            )
            for chunk_id, document, metadata, distance in zip(
                ids, documents, metadatas, distance_row, strict=True,
            )
        ]
        results.sort(key=lambda r: r.score, reverse=True)
        return results

    def count(self) -> int:
        try:
            return self._collection.count()
        except Exception as exc:
            raise VectorStoreError(f"Count failed: {exc}", cause=exc) from exc

    def delete(self, ids: list[str]) -> int:
        if not ids:
            return 0
        try:
            self._collection.delete(ids=ids)
        except Exception as exc:
            raise VectorStoreError(f"Delete failed: {exc}", cause=exc) from exc
        return len(ids)

    def clear(self) -> None:
        try:
            self._client.delete_collection(self._collection_name)
            self._collection = self._get_or_create()
        except Exception as exc:
            raise VectorStoreError(f"Clear failed: {exc}", cause=exc) from exc

    # ------------------------------------------------------------------
    # Private
    # ------------------------------------------------------------------

    def _get_or_create(self) -> Any:
        return self._client.get_or_create_collection(
            name=self._collection_name,
            metadata={"hnsw:space": "cosine"},
        )

    @staticmethod
    def _where(metadata_filter: MetadataFilter | None) -> dict[str, Any] | None:
        if metadata_filter is None:
            return None
        conditions = [{k: v} for k, v in metadata_filter.to_dict().items()]
        if not conditions:
            return None
        if len(conditions) == 1:
            return conditions[0]
        return {"$and": conditions}
