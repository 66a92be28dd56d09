"""Structure-preserving splitter for parser markdown.

Splits flat text into ordered ``table``, ``image`` and ``text`` segments in
a single line-oriented pass. Markdown table rows and bracketed
image/diagram/chart descriptions are kept whole; plain text is broken at
paragraph boundaries so assembly can re-merge paragraphs up to a size
bound.
"""

from __future__ import annotations

import logging
import re

from pagerag.chunking.schemas import ContentKind, Segment

logger = logging.getLogger(__name__)

MIN_SEGMENT_CHARS = 20

# "[Image: ...", "[Diagram: ...", "[Chart: ..." at the start of a line
_VISUAL_MARKER = re.compile(r"^\s*\[(?:image|diagram|chart):", re.IGNORECASE)


def is_table_line(line: str) -> bool:
    """Markdown table row: starts with ``|`` and contains another ``|``."""
    stripped = line.strip()
    return stripped.startswith("|") and stripped.count("|") >= 2


def is_visual_marker(line: str) -> bool:
    return _VISUAL_MARKER.match(line) is not None


class StructuralSegmenter:
    """Split text into segments without crossing table or image boundaries."""

    def __init__(self, min_segment_chars: int = MIN_SEGMENT_CHARS):
        self.min_segment_chars = min_segment_chars

    def segment(self, text: str) -> list[Segment]:
        """Return the ordered segments covering ``text``.

        Args:
            text: Flat markdown text from the parser.

        Returns:
            Segments in encounter order, each trimmed and non-empty.
        """
        lines = text.split("\n")
        segments: list[Segment] = []
        buffer: list[str] = []
        in_table = False

        i = 0
        while i < len(lines):
            line = lines[i]
            stripped = line.strip()

            if is_table_line(line):
                if not in_table:
                    self._flush(buffer, ContentKind.TEXT, segments)
                    in_table = True
                buffer.append(line)
                i += 1
                continue

            if in_table:
                # Any non-row line closes the table
                self._flush(buffer, ContentKind.TABLE, segments)
                in_table = False
                if not stripped:
                    i += 1
                continue

            if is_visual_marker(line):
                self._flush(buffer, ContentKind.TEXT, segments)
                block = [line]
                j = i + 1
                while j < len(lines):
                    follower = lines[j].strip()
                    if not follower or follower.startswith("["):
                        break
                    block.append(lines[j])
                    j += 1
                self._flush(block, ContentKind.IMAGE, segments)
                i = j
                continue

            buffer.append(line)
            if not stripped and len("\n".join(buffer).strip()) > self.min_segment_chars:
                self._flush(buffer, ContentKind.TEXT, segments)
            i += 1

        self._flush(buffer, ContentKind.TABLE if in_table else ContentKind.TEXT, segments)

        kept = [s for s in segments if not self._is_noise(s)]
        if len(kept) != len(segments):
            logger.debug("Dropped %d noise fragments", len(segments) - len(kept))
        return kept

    @staticmethod
    def _flush(buffer: list[str], kind: ContentKind, segments: list[Segment]) -> None:
        text = "\n".join(buffer).strip()
        buffer.clear()
        if text:
            segments.append(Segment(text=text, kind=kind))

    def _is_noise(self, segment: Segment) -> bool:
        # Tables and visual descriptions are never noise
        if segment.is_structural:
            return False
        if len(segment.text) >= self.min_segment_chars:
            return False
        return not any(ch.isalnum() for ch in segment.text)
