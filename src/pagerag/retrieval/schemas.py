"""Data models for retrieval operations."""

from __future__ import annotations

from dataclasses import dataclass, field

from pagerag.vectorstore.schemas import MetadataFilter, SearchResult


@dataclass
class RetrievalConfig:
    """Configuration for a retrieval operation."""

    top_k: int = 5
    metadata_filter: MetadataFilter | None = None
    min_score: float = 0.0


@dataclass
class RetrievalResult:
    """Result of a retrieval operation."""

    query: str
    results: list[SearchResult] = field(default_factory=list)
    total_candidates: int = 0

    @property
    def pages(self) -> list[int]:
        """Distinct pages of the results, in rank order."""
        seen: dict[int, None] = {}
        for r in self.results:
            if r.page is not None:
                seen.setdefault(r.page, None)
        return list(seen)

    @property
    def table_count(self) -> int:
        return sum(1 for r in self.results if r.metadata.has_table)

    @property
    def image_count(self) -> int:
        return sum(1 for r in self.results if r.metadata.has_image)
