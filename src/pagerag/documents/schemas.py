"""Data models for parser output."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class PageRecord:
    """Text of a single page as reported by the parser."""

    page_number: int
    text: str


@dataclass
class ParsedDocument:
    """Result of parsing a single document.

    Attributes:
        markdown: Flat markdown-like text of the whole document.
        pages: Per-page breakdown, in page order. May be empty, in which
            case page numbers are estimated downstream.
        source: Filename or identifier of the parsed document.
        job_id: Identifier of the remote parsing job, if any.
        warnings: Non-fatal issues encountered while parsing.
    """

    markdown: str
    pages: list[PageRecord] = field(default_factory=list)
    source: str | None = None
    job_id: str | None = None
    warnings: list[str] = field(default_factory=list)

    @property
    def page_count(self) -> int:
        return len(self.pages)
