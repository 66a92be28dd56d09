"""Chunk assembly — merge text segments up to a size bound, attribute pages.

Tables and image descriptions become standalone chunks. Adjacent text
segments are joined with blank lines until adding the next one would
exceed ``max_chars``. Each chunk's page is the page containing the
midpoint of its span in the flat text; when no page covers that offset
the page is estimated from the chunk index.
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import Sequence
from pathlib import Path

from pagerag.chunking.page_index import OffsetPageIndex, build_page_index
from pagerag.chunking.schemas import Chunk, ChunkMetadata, ContentKind, Segment
from pagerag.chunking.segmenter import MIN_SEGMENT_CHARS, StructuralSegmenter
from pagerag.documents.schemas import PageRecord
from pagerag.errors import ExtractionError

logger = logging.getLogger(__name__)

MAX_CHARS = 1000
CHUNKS_PER_PAGE = 3

_SEPARATOR = "\n\n"


class ChunkAssembler:
    """Turn flat parser text (and optional page records) into chunks."""

    def __init__(
        self,
        max_chars: int = MAX_CHARS,
        chunks_per_page: int = CHUNKS_PER_PAGE,
        min_segment_chars: int = MIN_SEGMENT_CHARS,
    ):
        if chunks_per_page < 1:
            raise ValueError("chunks_per_page must be at least 1")
        self.max_chars = max_chars
        self.chunks_per_page = chunks_per_page
        self.segmenter = StructuralSegmenter(min_segment_chars=min_segment_chars)

    def assemble(
        self,
        text: str,
        pages: Sequence[PageRecord] | None = None,
        filename: str | None = None,
    ) -> list[Chunk]:
        """Segment ``text`` and assemble the segments into chunks.

        Args:
            text: Flat document text.
            pages: Per-page breakdown whose texts concatenate to ``text``.
                Without it every page number is estimated.
            filename: Source name recorded on each chunk.

        Returns:
            Chunks in document order.

        Raises:
            ExtractionError: If ``text`` is empty or yields no chunks.
        """
        if not text or not text.strip():
            raise ExtractionError("No text content found in parsed document")

        index = build_page_index(pages or [])
        segments = self.segmenter.segment(text)
        stem = Path(filename).stem if filename else "doc"

        chunks: list[Chunk] = []
        pending: list[Segment] = []
        pending_len = 0
        span_start: int | None = None
        span_end: int | None = None
        cursor = 0

        def emit(parts: list[Segment], start: int | None, end: int | None) -> None:
            chunks.append(self._make_chunk(parts, len(chunks), start, end, index, stem, filename))

        for segment in segments:
            start = text.find(segment.text, cursor)
            if start == -1:
                logger.debug("Segment not located in flat text at offset >= %d", cursor)
                seg_start = seg_end = None
            else:
                seg_start, seg_end = start, start + len(segment.text)
                cursor = seg_end

            if segment.is_structural:
                if pending:
                    emit(pending, span_start, span_end)
                    pending, pending_len = [], 0
                    span_start = span_end = None
                emit([segment], seg_start, seg_end)
                continue

            added = len(segment.text) + (len(_SEPARATOR) if pending else 0)
            if pending and pending_len + added > self.max_chars:
                emit(pending, span_start, span_end)
                pending, pending_len = [], 0
                span_start = span_end = None
                added = len(segment.text)

            pending.append(segment)
            pending_len += added
            if seg_start is not None:
                span_start = seg_start if span_start is None else span_start
                span_end = seg_end

        if pending:
            emit(pending, span_start, span_end)

        if not chunks:
            raise ExtractionError("Parsed document produced no chunks")

        total = len(chunks)
        for chunk in chunks:
            chunk.total_chunks = total

        logger.info(
            "Assembled %d chunks from %d chars (tables=%d, images=%d, estimated pages=%d)",
            total,
            len(text),
            sum(1 for c in chunks if c.metadata.has_table),
            sum(1 for c in chunks if c.metadata.has_image),
            sum(1 for c in chunks if c.metadata.page_estimated),
        )
        return chunks

    # ------------------------------------------------------------------
    # Private
    # ------------------------------------------------------------------

    def _resolve_page(
        self,
        chunk_index: int,
        start: int | None,
        end: int | None,
        index: OffsetPageIndex,
    ) -> tuple[int, bool]:
        if start is not None and end is not None:
            page = index.page_at((start + end) // 2)
            if page is not None:
                return page, False
        estimate = chunk_index // self.chunks_per_page + 1
        logger.debug("Chunk %d has no positional page; estimated page %d", chunk_index, estimate)
        return estimate, True

    def _make_chunk(
        self,
        parts: list[Segment],
        chunk_index: int,
        start: int | None,
        end: int | None,
        index: OffsetPageIndex,
        stem: str,
        filename: str | None,
    ) -> Chunk:
        page, estimated = self._resolve_page(chunk_index, start, end, index)
        kinds = {p.kind for p in parts}
        if len(parts) == 1:
            content_type = parts[0].kind
        else:
            content_type = ContentKind.TEXT

        metadata = ChunkMetadata(
            page=page,
            content_type=content_type,
            has_table=ContentKind.TABLE in kinds,
            has_image=ContentKind.IMAGE in kinds,
            chunk_id=f"{stem}-{chunk_index}-{uuid.uuid4().hex[:12]}",
            chunk_index=chunk_index,
            filename=filename,
            page_estimated=estimated,
        )
        return Chunk(
            text=_SEPARATOR.join(p.text for p in parts),
            metadata=metadata,
            chunk_index=chunk_index,
        )
