"""Ingestion pipeline — file → parse → segment/assemble → embed → store.

This is the main entry point for adding documents to a collection.
"""

from __future__ import annotations

import logging
from pathlib import Path

from pagerag.chunking.assembler import ChunkAssembler
from pagerag.chunking.schemas import Chunk
from pagerag.documents.base import DocumentParser
from pagerag.documents.factory import get_parser
from pagerag.documents.schemas import PageRecord, ParsedDocument
from pagerag.embeddings.base import EmbeddingProvider
from pagerag.errors import VectorStoreError
from pagerag.pipeline.schemas import IngestResult
from pagerag.vectorstore.base import VectorStore
from pagerag.vectorstore.schemas import VectorRecord

logger = logging.getLogger(__name__)


class IngestPipeline:
    """Orchestrates document ingestion: parse → chunk → embed → store."""

    def __init__(
        self,
        embedding_provider: EmbeddingProvider,
        vector_store: VectorStore,
        parser: DocumentParser | None = None,
        assembler: ChunkAssembler | None = None,
        batch_size: int = 32,
    ):
        self.embedding_provider = embedding_provider
        self.vector_store = vector_store
        self.parser = parser or get_parser("local")
        self.assembler = assembler or ChunkAssembler()
        self.batch_size = batch_size

    def ingest_file(self, path: str | Path) -> IngestResult:
        """Parse a document file and ingest it.

        Raises:
            ExtractionError: The document has no extractable content.
            ParseTimeoutError: Remote parsing did not finish in time.
            RemoteProcessingError: Remote parsing failed.
            EmbeddingError: The chunks could not be embedded.
            VectorStoreError: Storing the chunks failed.
        """
        path = Path(path)
        document = self.parser.parse(path)
        return self.ingest_parsed(document, source_name=document.source or path.name)

    def ingest_text(
        self,
        text: str,
        pages: list[PageRecord] | None = None,
        source_name: str = "inline",
    ) -> IngestResult:
        """Ingest already-parsed text directly (no parsing step).

        Useful for testing or when parser output was cached.
        """
        document = ParsedDocument(markdown=text, pages=list(pages or []), source=source_name)
        return self.ingest_parsed(document, source_name=source_name)

    def ingest_parsed(self, document: ParsedDocument, source_name: str | None = None) -> IngestResult:
        """Chunk, embed and store a parsed document."""
        source = source_name or document.source or "inline"
        warnings = list(document.warnings)

        chunks = self.assembler.assemble(document.markdown, document.pages, filename=source)

        estimated = sum(1 for c in chunks if c.metadata.page_estimated)
        if estimated:
            warnings.append(f"{estimated} of {len(chunks)} chunks have estimated page numbers")

        embeddings = self._embed(chunks)
        stored = self._store(chunks, embeddings)

        result = IngestResult(
            source=source,
            chunks_created=len(chunks),
            chunks_embedded=len(embeddings),
            chunks_stored=stored,
            tables_count=sum(1 for c in chunks if c.metadata.has_table),
            images_count=sum(1 for c in chunks if c.metadata.has_image),
            pages_estimated=estimated,
            page_count=document.page_count,
            warnings=warnings,
        )
        logger.info(
            "Ingested %s: %d chunks → %d embedded → %d stored (tables=%d, images=%d)",
            source,
            result.chunks_created,
            result.chunks_embedded,
            result.chunks_stored,
            result.tables_count,
            result.images_count,
        )
        return result

    # ------------------------------------------------------------------
    # Private
    # ------------------------------------------------------------------

    def _embed(self, chunks: list[Chunk]) -> list[list[float]]:
        texts = [c.text for c in chunks]
        embeddings: list[list[float]] = []
        for i in range(0, len(texts), self.batch_size):
            embeddings.extend(self.embedding_provider.embed_texts(texts[i : i + self.batch_size]))
        return embeddings

    def _store(self, chunks: list[Chunk], embeddings: list[list[float]]) -> int:
        records = [
            VectorRecord(
                id=chunk.metadata.chunk_id or f"chunk-{chunk.chunk_index}",
                text=chunk.text,
                embedding=embedding,
                metadata=chunk.metadata,
            )
            for chunk, embedding in zip(chunks, embeddings, strict=True)
        ]
        try:
            return self.vector_store.add(records)
        except VectorStoreError:
            raise
        except Exception as exc:
            raise VectorStoreError(f"Storage failed: {exc}", cause=exc) from exc
