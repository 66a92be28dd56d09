"""Local parser — PDF via pdfplumber, plain text and markdown as-is.

No network calls. PDF pages are joined with blank lines and each page
record includes its trailing separator, so the page texts concatenate to
exactly the flat text.
"""

from __future__ import annotations

import logging
from pathlib import Path

from pagerag.documents.base import DocumentParser
from pagerag.documents.schemas import PageRecord, ParsedDocument
from pagerag.errors import ExtractionError

logger = logging.getLogger(__name__)

SUPPORTED_EXTENSIONS = {".pdf", ".txt", ".md"}

_PAGE_SEPARATOR = "\n\n"


class LocalParser(DocumentParser):
    """Parse documents in-process."""

    def parse(self, path: str | Path) -> ParsedDocument:
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"File not found: {path}")

        ext = path.suffix.lower()
        if ext not in SUPPORTED_EXTENSIONS:
            raise ValueError(
                f"Unsupported format '{ext}'. Supported: {sorted(SUPPORTED_EXTENSIONS)}"
            )

        if ext == ".pdf":
            page_texts = self._pdf_pages(path)
        else:
            page_texts = [self._decode(path.read_bytes())]

        pages = [
            PageRecord(page_number=i, text=text + _PAGE_SEPARATOR)
            for i, text in enumerate(page_texts, 1)
        ]
        markdown = "".join(p.text for p in pages)
        if not markdown.strip():
            raise ExtractionError(
                f"{path.name} contains no extractable text (may be scanned/image-only)"
            )

        logger.info("Parsed %s locally: %d pages, %d chars", path.name, len(pages), len(markdown))
        return ParsedDocument(markdown=markdown, pages=pages, source=path.name)

    @staticmethod
    def _pdf_pages(path: Path) -> list[str]:
        import pdfplumber

        with pdfplumber.open(str(path)) as pdf:
            return [page.extract_text() or "" for page in pdf.pages]

    @staticmethod
    def _decode(data: bytes) -> str:
        try:
            return data.decode("utf-8")
        except UnicodeDecodeError:
            return data.decode("latin-1")
