"""End-to-end pipeline — ingest, query, prompts, page citations."""

from pagerag.pipeline.citations import format_citations, resolve_citation_pages
from pagerag.pipeline.ingest import IngestPipeline
from pagerag.pipeline.query import QueryPipeline
from pagerag.pipeline.schemas import IngestResult, RAGQuery, RAGResponse

__all__ = [
    "IngestPipeline",
    "IngestResult",
    "QueryPipeline",
    "RAGQuery",
    "RAGResponse",
    "format_citations",
    "resolve_citation_pages",
]
