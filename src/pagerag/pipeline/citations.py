"""Citation resolution — which source pages back a generated answer.

Citations are the pages of the chunks that were supplied to the answer
generator. The answer text is not inspected: a page is cited because its
content was in the context, not because the model mentioned it.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any


def _page_of(chunk: Any) -> int | None:
    meta = getattr(chunk, "metadata", None)
    if isinstance(meta, Mapping):
        page = meta.get("page")
    else:
        page = getattr(meta, "page", None)
    # bool is an int subclass; it is never a page number
    if isinstance(page, bool) or not isinstance(page, int):
        return None
    return page if page > 0 else None


def resolve_citation_pages(chunks: Iterable[Any]) -> list[int]:
    """Return the ascending, deduplicated pages of the context chunks.

    Args:
        chunks: Chunks or search results exposing ``metadata.page``
            (attribute or mapping key).

    Returns:
        Sorted page numbers. Chunks without a positive page are skipped.
    """
    return sorted({page for page in map(_page_of, chunks) if page is not None})


def format_citations(pages: list[int]) -> str:
    """Format cited pages for display.

    Returns a markdown source line, or an empty string when nothing is cited.
    """
    if not pages:
        return ""
    label = "page" if len(pages) == 1 else "pages"
    return f"\n---\n**Sources:** {label} {', '.join(str(p) for p in pages)}"
