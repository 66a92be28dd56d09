"""Data models for the ingest and query pipelines."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class RAGQuery:
    """Input to the query pipeline."""

    question: str
    top_k: int = 5
    filename: str | None = None
    content_type: str | None = None
    min_score: float = 0.0


@dataclass
class RAGResponse:
    """Output of the query pipeline.

    ``citations`` holds the ascending page numbers of the chunks that were
    given to the model as context.
    """

    question: str
    answer: str
    citations: list[int] = field(default_factory=list)
    context_texts: list[str] = field(default_factory=list)
    model: str = ""
    sources_used: int = 0
    contained_tables: bool = False
    contained_images: bool = False
    tokens_used: int = 0


@dataclass
class IngestResult:
    """Result of document ingestion."""

    source: str
    chunks_created: int
    chunks_embedded: int
    chunks_stored: int
    tables_count: int = 0
    images_count: int = 0
    pages_estimated: int = 0
    page_count: int = 0
    warnings: list[str] = field(default_factory=list)
