"""Abstract base class for vector stores."""

from __future__ import annotations

from abc import ABC, abstractmethod

from pagerag.vectorstore.schemas import MetadataFilter, SearchResult, VectorRecord


class VectorStore(ABC):
    """Interface for vector store backends.

    A store instance is bound to one collection; construct it once and
    pass it to the ingest and query pipelines.
    """

    @abstractmethod
    def add(self, records: list[VectorRecord]) -> int:
        """Insert records into the store.

        Args:
            records: Chunks with embeddings and unique ids.

        Returns:
            Number of records successfully inserted.
        """

    @abstractmethod
    def search(
        self,
        query_embedding: list[float],
        top_k: int = 5,
        metadata_filter: MetadataFilter | None = None,
    ) -> list[SearchResult]:
        """Search for similar chunks.

        Args:
            query_embedding: The query vector.
            top_k: Maximum results to return.
            metadata_filter: Optional metadata filter.

        Returns:
            List of ``SearchResult`` sorted by similarity (highest first).
            An empty collection yields an empty list.
        """

    @abstractmethod
    def count(self) -> int:
        """Return the number of records in the store."""

    @abstractmethod
    def delete(self, ids: list[str]) -> int:
        """Delete records by ID.

        Returns:
            Number of records deleted.
        """

    @abstractmethod
    def clear(self) -> None:
        """Delete all records."""

    def save(self, path: str) -> None:
        """Persist the store to disk (optional)."""
        raise NotImplementedError(f"{self.__class__.__name__} does not support save()")

    def load(self, path: str) -> None:
        """Load the store from disk (optional)."""
        raise NotImplementedError(f"{self.__class__.__name__} does not support load()")

    @classmethod
    def store_name(cls) -> str:
        """Return human-readable store name."""
        return cls.__name__
