"""Vector store factory — registry, lazy import, singleton cache."""

from __future__ import annotations

import importlib
import logging
from pathlib import Path

from pagerag.config import VectorStoreSettings
from pagerag.vectorstore.base import VectorStore
from pagerag.vectorstore.schemas import DEFAULT_SCORE

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Store registry: (store_key, module_path, class_name)
# ---------------------------------------------------------------------------

_STORE_REGISTRY: list[tuple[str, str, str]] = [
    ("chroma", "pagerag.vectorstore.chroma_store", "ChromaStore"),
    ("faiss", "pagerag.vectorstore.faiss_store", "FAISSStore"),
]

# Singleton cache
_store_cache: dict[str, VectorStore] = {}


def get_vector_store(
    provider: str = "chroma",
    **kwargs,
) -> VectorStore:
    """Get a vector store by name.

    Args:
        provider: One of ``chroma``, ``faiss``.
        **kwargs: Passed to the store constructor.

    Returns:
        A ``VectorStore`` instance bound to one collection.
    """
    key = provider.lower()

    if not kwargs and key in _store_cache:
        return _store_cache[key]

    for reg_key, module_path, cls_name in _STORE_REGISTRY:
        if reg_key == key:
            mod = importlib.import_module(module_path)
            cls = getattr(mod, cls_name)
            instance = cls(**kwargs)
            if not kwargs:
                _store_cache[key] = instance
            return instance

    available = [k for k, _, _ in _STORE_REGISTRY]
    raise ValueError(f"Unknown vector store '{provider}'. Available: {available}")


def available_stores() -> list[str]:
    """Return names of registered vector stores."""
    return [k for k, _, _ in _STORE_REGISTRY]


def clear_cache() -> None:
    """Clear singleton cache (for testing)."""
    _store_cache.clear()


def vector_store_from_settings(
    settings: VectorStoreSettings,
    dimension: int,
    default_score: float = DEFAULT_SCORE,
) -> VectorStore:
    """Build the configured store, bound to the configured collection.

    Intended to be called once at process start; the returned handle is
    passed to the ingest and query pipelines.
    """
    key = settings.backend.lower()
    if key == "faiss":
        store = get_vector_store("faiss", dimension=dimension)
        index_path = Path(settings.path)
        if (index_path / "index.faiss").exists():
            store.load(str(index_path))
        return store
    if key == "chroma":
        return get_vector_store(
            "chroma",
            collection_name=settings.collection,
            path=settings.path,
            host=settings.host,
            port=settings.port,
            tenant=settings.tenant,
            database=settings.database,
            api_key=settings.api_key,
            default_score=default_score,
        )
    return get_vector_store(key)
