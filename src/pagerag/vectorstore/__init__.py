"""Vector store backends — Chroma (default) and FAISS (local)."""

from pagerag.vectorstore.base import VectorStore
from pagerag.vectorstore.factory import available_stores, get_vector_store
from pagerag.vectorstore.schemas import MetadataFilter, SearchResult, VectorRecord

__all__ = [
    "MetadataFilter",
    "SearchResult",
    "VectorRecord",
    "VectorStore",
    "available_stores",
    "get_vector_store",
]
