"""Data models for segments and chunks."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum


class ContentKind(StrEnum):
    """Structural kind of a segment or chunk."""

    TABLE = "table"
    IMAGE = "image"
    TEXT = "text"


@dataclass(frozen=True)
class Segment:
    """A structural unit of the flat text, before size-bounded assembly."""

    text: str
    kind: ContentKind = ContentKind.TEXT

    @property
    def is_structural(self) -> bool:
        return self.kind is not ContentKind.TEXT


@dataclass(frozen=True)
class ChunkMetadata:
    """Metadata carried by each chunk — stored alongside embeddings."""

    page: int | None = None
    content_type: ContentKind = ContentKind.TEXT
    has_table: bool = False
    has_image: bool = False
    chunk_id: str | None = None
    chunk_index: int | None = None
    filename: str | None = None
    page_estimated: bool = False


@dataclass
class Chunk:
    """A single retrievable piece of a document."""

    text: str
    metadata: ChunkMetadata
    chunk_index: int = 0
    total_chunks: int = 0

    @property
    def id(self) -> str | None:
        return self.metadata.chunk_id

    @property
    def page(self) -> int | None:
        return self.metadata.page
