"""Exception hierarchy for ingestion and query failures."""

from __future__ import annotations


class PageRagError(Exception):
    """Base class for all pagerag failures."""


class ExtractionError(PageRagError):
    """The parsed document has no extractable content."""


class ParseTimeoutError(PageRagError):
    """The parsing job did not reach success within the polling bound."""

    def __init__(self, job_id: str, attempts: int) -> None:
        super().__init__(f"Parsing job {job_id} did not finish after {attempts} attempts")
        self.job_id = job_id
        self.attempts = attempts


class RemoteProcessingError(PageRagError):
    """The parsing service reported a failure for the job."""

    def __init__(self, message: str, *, job_id: str | None = None) -> None:
        super().__init__(message)
        self.job_id = job_id


class EmbeddingError(PageRagError):
    """The embedding provider could not embed the texts."""

    def __init__(self, message: str, *, cause: Exception | None = None) -> None:
        super().__init__(message)
        self.__cause__ = cause


class VectorStoreError(PageRagError):
    """An add, search or count call against the vector store failed."""

    def __init__(self, message: str, *, cause: Exception | None = None) -> None:
        super().__init__(message)
        self.__cause__ = cause


class GenerationError(PageRagError):
    """The answer generator call failed."""

    def __init__(self, message: str, *, cause: Exception | None = None) -> None:
        super().__init__(message)
        self.__cause__ = cause
