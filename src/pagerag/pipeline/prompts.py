"""Prompt templates for answering questions over parsed documents."""

from __future__ import annotations

from collections.abc import Sequence

from pagerag.vectorstore.schemas import SearchResult

RAG_SYSTEM_PROMPT = """\
You are analyzing content from a PDF document. The content may include \
regular text, markdown tables, and image/chart descriptions.

Instructions:
- Answer clearly and directly based ONLY on the provided content.
- Content marked "TABLE DATA" is structured data in markdown table format: \
analyze rows and columns and extract specific values when asked.
- Content marked "IMAGE/VISUAL" describes charts, diagrams or images: \
explain what the visual shows using those descriptions.
- Always mention the page number when citing information.
- If you cannot fully answer, explain what information is missing.
"""

RAG_QUERY_TEMPLATE = """\
DOCUMENT CONTENT:
{context}

QUESTION: {question}

ANSWER:"""

NO_CONTEXT_ANSWER = (
    "I couldn't find relevant information in your document to answer this "
    "question. Please try asking about topics covered in the PDF."
)


def context_label(result: SearchResult) -> str:
    """Label a context chunk with its page and content markers."""
    meta = result.metadata
    label = f"[Page {meta.page if meta.page is not None else '?'}"
    if meta.has_table:
        label += " - TABLE DATA"
    if meta.has_image:
        label += " - IMAGE/VISUAL"
    return label + "]"


def format_context(results: Sequence[SearchResult]) -> str:
    """Concatenate context chunks in rank order, each prefixed by its label."""
    return "\n\n---\n\n".join(f"{context_label(r)}: {r.text}" for r in results)


def build_rag_prompt(question: str, results: Sequence[SearchResult]) -> str:
    """Build the complete prompt from retrieved chunks and the question."""
    return RAG_QUERY_TEMPLATE.format(context=format_context(results), question=question)
