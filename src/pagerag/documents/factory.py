"""Document parser factory — registry, lazy import, singleton cache."""

from __future__ import annotations

import importlib
import logging

from pagerag.config import ParsingSettings
from pagerag.documents.base import DocumentParser

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Parser registry: (parser_key, module_path, class_name)
# ---------------------------------------------------------------------------

_PARSER_REGISTRY: list[tuple[str, str, str]] = [
    ("llamaparse", "pagerag.documents.llamaparse", "LlamaParseParser"),
    ("local", "pagerag.documents.local", "LocalParser"),
]

# Singleton cache
_parser_cache: dict[str, DocumentParser] = {}


def get_parser(provider: str = "local", **kwargs) -> DocumentParser:
    """Get a document parser by name.

    Args:
        provider: One of ``llamaparse``, ``local``.
        **kwargs: Passed to the parser constructor.

    Returns:
        A ``DocumentParser`` instance.
    """
    key = provider.lower()

    if not kwargs and key in _parser_cache:
        return _parser_cache[key]

    for reg_key, module_path, cls_name in _PARSER_REGISTRY:
        if reg_key == key:
            mod = importlib.import_module(module_path)
            cls = getattr(mod, cls_name)
            instance = cls(**kwargs)
            if not kwargs:
                _parser_cache[key] = instance
            return instance

    available = [k for k, _, _ in _PARSER_REGISTRY]
    raise ValueError(f"Unknown parser '{provider}'. Available: {available}")


def available_parsers() -> list[str]:
    """Return names of registered parsers."""
    return [k for k, _, _ in _PARSER_REGISTRY]


def clear_cache() -> None:
    """Clear singleton cache (for testing)."""
    _parser_cache.clear()


def parser_from_settings(settings: ParsingSettings) -> DocumentParser:
    """Build the configured document parser."""
    if settings.provider.lower() == "llamaparse":
        return get_parser(
            "llamaparse",
            api_key=settings.api_key,
            base_url=settings.base_url,
            instruction=settings.instruction,
            poll_interval=settings.poll_interval_seconds,
            max_attempts=settings.max_poll_attempts,
            timeout=settings.timeout_seconds,
        )
    return get_parser(settings.provider)
