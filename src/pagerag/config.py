"""Application settings loaded from YAML with environment variable overrides."""

from __future__ import annotations

import os
from pathlib import Path

import yaml
from pydantic import BaseModel, Field

DEFAULT_PARSING_INSTRUCTION = (
    "Extract all text, tables, and describe any images or charts. "
    "Preserve table structure in markdown format. "
    "For images, provide detailed descriptions of visual content."
)

# ---------------------------------------------------------------------------
# Settings sections
# ---------------------------------------------------------------------------


class ParsingSettings(BaseModel):
    provider: str = "llamaparse"
    base_url: str = "https://api.cloud.llamaindex.ai/api/parsing"
    api_key: str | None = None
    poll_interval_seconds: float = 10.0
    max_poll_attempts: int = 30
    timeout_seconds: float = 60.0
    instruction: str = DEFAULT_PARSING_INSTRUCTION


class ChunkingSettings(BaseModel):
    max_chars: int = 1000
    min_segment_chars: int = 20
    # Fallback page estimate when no positional data exists
    chunks_per_page: int = Field(default=3, ge=1)


class EmbeddingSettings(BaseModel):
    provider: str = "ollama"
    model: str = "nomic-embed-text"
    dimension: int = 768


class VectorStoreSettings(BaseModel):
    backend: str = "chroma"
    path: str = "local_data/chroma"
    collection: str = "pdf_documents"
    # Remote Chroma server or Chroma Cloud
    host: str | None = None
    port: int = 8000
    tenant: str | None = None
    database: str | None = None
    api_key: str | None = None


class LLMSettings(BaseModel):
    provider: str = "ollama"
    model: str = "llama3.1:8b"
    temperature: float = 0.2
    max_tokens: int = 2048


class RetrievalSettings(BaseModel):
    top_k: int = 5
    min_score: float = 0.0
    default_score: float = 0.5


# ---------------------------------------------------------------------------
# Root settings
# ---------------------------------------------------------------------------


class Settings(BaseModel):
    parsing: ParsingSettings = Field(default_factory=ParsingSettings)
    chunking: ChunkingSettings = Field(default_factory=ChunkingSettings)
    embedding: EmbeddingSettings = Field(default_factory=EmbeddingSettings)
    vectorstore: VectorStoreSettings = Field(default_factory=VectorStoreSettings)
    llm: LLMSettings = Field(default_factory=LLMSettings)
    retrieval: RetrievalSettings = Field(default_factory=RetrievalSettings)


_API_KEY_ENV_VARS = ("LLAMA_CLOUD_API_KEY", "LLAMA_PARSE_API_KEY")
_CHROMA_ENV_VARS = {
    "api_key": "CHROMA_API_KEY",
    "tenant": "CHROMA_TENANT",
    "database": "CHROMA_DATABASE",
}


def _find_settings_file() -> Path | None:
    """Walk up from cwd looking for settings.yaml."""
    profile = os.getenv("RAG_PROFILE", "")
    names = [f"settings-{profile}.yaml", "settings.yaml"] if profile else ["settings.yaml"]

    cwd = Path.cwd()
    for parent in [cwd, *cwd.parents]:
        for name in names:
            candidate = parent / name
            if candidate.exists():
                return candidate
    return None


def _apply_env_overrides(settings: Settings) -> Settings:
    """Fill credentials left unset in YAML from the environment."""
    if not settings.parsing.api_key:
        settings.parsing.api_key = next(
            (os.environ[var] for var in _API_KEY_ENV_VARS if os.getenv(var)), None
        )
    for field_name, var in _CHROMA_ENV_VARS.items():
        if getattr(settings.vectorstore, field_name) is None and os.getenv(var):
            setattr(settings.vectorstore, field_name, os.environ[var])
    return settings


def load_settings(path: str | Path | None = None) -> Settings:
    """Load settings from YAML file, falling back to defaults.

    Args:
        path: Explicit settings file. When omitted, ``settings.yaml`` (or
            ``settings-<RAG_PROFILE>.yaml``) is searched for upwards from cwd.
    """
    settings_path = Path(path) if path is not None else _find_settings_file()
    if settings_path is None:
        return _apply_env_overrides(Settings())

    with open(settings_path, encoding="utf-8") as fh:
        raw = yaml.safe_load(fh) or {}

    return _apply_env_overrides(Settings(**raw))
