"""Document parsing — remote (LlamaParse) and local parsers."""

from pagerag.documents.base import DocumentParser
from pagerag.documents.factory import available_parsers, get_parser
from pagerag.documents.schemas import PageRecord, ParsedDocument

__all__ = [
    "DocumentParser",
    "PageRecord",
    "ParsedDocument",
    "available_parsers",
    "get_parser",
]
