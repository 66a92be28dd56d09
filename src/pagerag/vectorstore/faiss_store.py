"""FAISS vector store — local, zero infrastructure.

Uses an inner-product index over L2-normalized vectors (cosine
similarity) with a parallel record table for metadata filtering. Raw
vectors are kept so deletes can rebuild the index.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

import numpy as np

from pagerag.chunking.schemas import ChunkMetadata
from pagerag.vectorstore.base import VectorStore
from pagerag.vectorstore.schemas import (
    MetadataFilter,
    SearchResult,
    VectorRecord,
    clamp_score,
    metadata_from_dict,
    metadata_to_dict,
)

logger = logging.getLogger(__name__)


class FAISSStore(VectorStore):
    """FAISS-backed vector store with metadata filtering."""

    def __init__(self, dimension: int = 768):
        try:
            import faiss
        except ImportError as exc:
            raise ImportError(
                "faiss-cpu required: pip install page-aware-rag[faiss]"
            ) from exc

        self._faiss = faiss
        self._dimension = dimension
        self._index = faiss.IndexFlatIP(dimension)
        # Position in the index -> {id, text, metadata, vector}
        self._records: list[dict] = []

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def add(self, records: list[VectorRecord]) -> int:
        if not records:
            return 0

        vectors = np.array([r.embedding for r in records], dtype=np.float32)
        self._faiss.normalize_L2(vectors)
        self._index.add(vectors)

        for record, vector in zip(records, vectors, strict=True):
            self._records.append({
                "id": record.id,
                "text": record.text,
                "metadata": record.metadata,
                "vector": vector,
            })

        logger.info("FAISSStore added %d records (total: %d)", len(records), self.count())
        return len(records)

    def search(
        self,
        query_embedding: list[float],
        top_k: int = 5,
        metadata_filter: MetadataFilter | None = None,
    ) -> list[SearchResult]:
        if self._index.ntotal == 0 or top_k <= 0:
            return []

        query_vec = np.array([query_embedding], dtype=np.float32)
        self._faiss.normalize_L2(query_vec)

        # Over-fetch if filtering to ensure enough results after filtering
        fetch_k = top_k * 4 if metadata_filter else top_k
        fetch_k = min(fetch_k, self._index.ntotal)

        scores, indices = self._index.search(query_vec, fetch_k)

        results: list[SearchResult] = []
        for score, idx in zip(scores[0], indices[0], strict=True):
            if idx < 0 or idx >= len(self._records):
                continue
            record = self._records[idx]
            if metadata_filter and not metadata_filter.matches(record["metadata"]):
                continue

            results.append(SearchResult(
                id=record["id"],
                text=record["text"],
                score=clamp_score(score),
                metadata=record["metadata"],
            ))
            if len(results) >= top_k:
                break

        return results

    def count(self) -> int:
        return self._index.ntotal

    def delete(self, ids: list[str]) -> int:
        id_set = set(ids)
        kept = [r for r in self._records if r["id"] not in id_set]
        deleted = len(self._records) - len(kept)
        if deleted == 0:
            return 0

        self._index = self._faiss.IndexFlatIP(self._dimension)
        if kept:
            self._index.add(np.stack([r["vector"] for r in kept]))
        self._records = kept
        return deleted

    def clear(self) -> None:
        self._index = self._faiss.IndexFlatIP(self._dimension)
        self._records = []

    def save(self, path: str) -> None:
        """Save FAISS index and chunk metadata to disk."""
        p = Path(path)
        p.mkdir(parents=True, exist_ok=True)

        self._faiss.write_index(self._index, str(p / "index.faiss"))

        serializable = [
            {"id": r["id"], "text": r["text"], "metadata": metadata_to_dict(r["metadata"])}
            for r in self._records
        ]
        with open(p / "metadata.json", "w", encoding="utf-8") as f:
            json.dump({"dimension": self._dimension, "records": serializable}, f)

        logger.info("FAISSStore saved to %s (%d records)", path, self.count())

    def load(self, path: str) -> None:
        """Load FAISS index and chunk metadata from disk."""
        p = Path(path)

        self._index = self._faiss.read_index(str(p / "index.faiss"))
        with open(p / "metadata.json", encoding="utf-8") as f:
            data = json.load(f)

        self._records = []
        for i, record in enumerate(data["records"]):
            meta: ChunkMetadata = metadata_from_dict(record["metadata"])
            self._records.append({
                "id": record["id"],
                "text": record["text"],
                "metadata": meta,
                "vector": self._index.reconstruct(i),
            })

        logger.info("FAISSStore loaded from %s (%d records)", path, self.count())
