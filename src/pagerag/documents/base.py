"""Abstract base class for document parsers."""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path

from pagerag.documents.schemas import ParsedDocument


class DocumentParser(ABC):
    """Interface for services that turn a document into markdown + pages."""

    @abstractmethod
    def parse(self, path: str | Path) -> ParsedDocument:
        """Parse a document file.

        Args:
            path: Filesystem path of the document.

        Returns:
            A ``ParsedDocument`` with flat text and, when available, pages.
        """

    @classmethod
    def parser_name(cls) -> str:
        """Return human-readable parser name."""
        return cls.__name__
