"""Shared fixtures for tests — synthetic parser output, no network calls."""

from __future__ import annotations

import hashlib
import textwrap

import numpy as np
import pytest

from pagerag.documents.schemas import PageRecord
from pagerag.embeddings.base import EmbeddingProvider
from pagerag.llm.base import LLMProvider

DIM = 64

# ---------------------------------------------------------------------------
# Mock providers
# ---------------------------------------------------------------------------


class MockEmbedder(EmbeddingProvider):
    """Deterministic hash-based embeddings."""

    def __init__(self, dim: int = DIM):
        self._dim = dim
        self.calls: list[list[str]] = []

    def _embed(self, texts: list[str]) -> list[list[float]]:
        self.calls.append(list(texts))
        return [self._hash_embed(t) for t in texts]

    @property
    def dimension(self) -> int:
        return self._dim

    def _hash_embed(self, text: str) -> list[float]:
        h = hashlib.sha256(text.encode()).digest()
        vec = np.array([h[i % len(h)] / 255.0 for i in range(self._dim)], dtype=np.float32)
        vec /= np.linalg.norm(vec)
        return vec.tolist()


class MockLLM(LLMProvider):
    """Records the prompt and answers without mentioning any page."""

    def __init__(self, answer: str = "The revenue table shows growth in 2024."):
        self.model = "mock-llm"
        self.answer = answer
        self.last_prompt = ""
        self.last_system: str | None = None
        self.calls = 0

    def _complete(self, prompt: str, system: str | None) -> str:
        self.calls += 1
        self.last_prompt = prompt
        self.last_system = system
        return self.answer


@pytest.fixture
def embedder() -> MockEmbedder:
    return MockEmbedder()


@pytest.fixture
def llm() -> MockLLM:
    return MockLLM()


# ---------------------------------------------------------------------------
# Synthetic parser output
# ---------------------------------------------------------------------------


@pytest.fixture
def boundary_text() -> str:
    """Intro, a table straddling the page break at offset 40, conclusion."""
    return "Intro paragraph.\n\n| A | B |\n|---|---|\n| 1 | 2 |\n\nConclusion paragraph."


@pytest.fixture
def boundary_pages(boundary_text: str) -> list[PageRecord]:
    return [
        PageRecord(page_number=1, text=boundary_text[:40]),
        PageRecord(page_number=2, text=boundary_text[40:]),
    ]


@pytest.fixture
def report_pages() -> list[PageRecord]:
    """Three pages of parser markdown with a table and a chart description."""
    page_one = textwrap.dedent("""\
        # Annual Report 2024

        The company delivered record revenue this year, driven by strong demand
        across all regions and continued expansion of the services business.

        Operating costs were held flat while headcount grew modestly.

    """)
    page_two = textwrap.dedent("""\
        ## Financial Summary

        | Year | Revenue | Margin |
        |------|---------|--------|
        | 2023 | 120.5   | 31%    |
        | 2024 | 138.2   | 34%    |

        [Chart: Revenue by region, 2020-2024]
        North America remains the largest region at 52% of revenue.
        Asia-Pacific grew fastest, up 18% year over year.

    """)
    page_three = textwrap.dedent("""\
        ## Outlook

        Management expects mid-single-digit growth next year, with margins
        stable as investment in new products continues through the period.
    """)
    return [
        PageRecord(page_number=1, text=page_one),
        PageRecord(page_number=2, text=page_two),
        PageRecord(page_number=3, text=page_three),
    ]


@pytest.fixture
def report_text(report_pages: list[PageRecord]) -> str:
    return "".join(p.text for p in report_pages)


@pytest.fixture
def long_text() -> str:
    """Twelve plain paragraphs of ~200 chars each."""
    paragraphs = [
        f"Paragraph {i} discusses results in detail. " + "Growth was steady. " * 8
        for i in range(12)
    ]
    return "\n\n".join(p.strip() for p in paragraphs)
