"""Data models for vector store operations."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from pagerag.chunking.schemas import ChunkMetadata, ContentKind

DEFAULT_SCORE = 0.5


@dataclass
class VectorRecord:
    """A chunk with its embedding, ready for storage."""

    id: str
    text: str
    embedding: list[float]
    metadata: ChunkMetadata = field(default_factory=ChunkMetadata)


@dataclass(frozen=True)
class SearchResult:
    """A retrieved chunk with its similarity score in ``[0, 1]``."""

    id: str
    text: str
    score: float
    metadata: ChunkMetadata = field(default_factory=ChunkMetadata)

    @property
    def page(self) -> int | None:
        return self.metadata.page

    @property
    def filename(self) -> str | None:
        return self.metadata.filename


@dataclass
class MetadataFilter:
    """Filter search results by metadata fields.

    All specified fields must match (AND logic).
    """

    filename: str | None = None
    content_type: str | None = None

    def matches(self, meta: ChunkMetadata) -> bool:
        """Check if a chunk's metadata matches this filter."""
        if self.filename and meta.filename != self.filename:
            return False
        return not (self.content_type and meta.content_type != self.content_type)

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {}
        if self.filename:
            d["filename"] = self.filename
        if self.content_type:
            d["content_type"] = str(self.content_type)
        return d


# ---------------------------------------------------------------------------
# Metadata serialization and score normalization
# ---------------------------------------------------------------------------


def metadata_to_dict(meta: ChunkMetadata) -> dict[str, Any]:
    """Flatten chunk metadata into store-friendly scalars, omitting ``None``."""
    d: dict[str, Any] = {
        "content_type": str(meta.content_type),
        "has_table": meta.has_table,
        "has_image": meta.has_image,
        "page_estimated": meta.page_estimated,
    }
    optional = {
        "page": meta.page,
        "chunk_id": meta.chunk_id,
        "chunk_index": meta.chunk_index,
        "filename": meta.filename,
    }
    d.update({k: v for k, v in optional.items() if v is not None})
    return d


def metadata_from_dict(d: dict[str, Any] | None) -> ChunkMetadata:
    d = d or {}
    page = d.get("page")
    chunk_index = d.get("chunk_index")
    return ChunkMetadata(
        page=int(page) if page is not None else None,
        content_type=ContentKind(d.get("content_type", "text")),
        has_table=bool(d.get("has_table", False)),
        has_image=bool(d.get("has_image", False)),
        chunk_id=d.get("chunk_id"),
        chunk_index=int(chunk_index) if chunk_index is not None else None,
        filename=d.get("filename"),
        page_estimated=bool(d.get("page_estimated", False)),
    )


def clamp_score(score: float) -> float:
    return min(1.0, max(0.0, float(score)))


def similarity_from_distance(distance: float | None, default: float = DEFAULT_SCORE) -> float:
    """Convert a store distance to a similarity in ``[0, 1]``."""
    if distance is None:
        return default
    return clamp_score(1.0 - float(distance))
