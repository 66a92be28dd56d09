"""Retrieval — similarity search over a chunk collection."""

from pagerag.retrieval.retriever import Retriever
from pagerag.retrieval.schemas import RetrievalConfig, RetrievalResult

__all__ = ["Retriever", "RetrievalConfig", "RetrievalResult"]
