"""LlamaParse client — upload, bounded polling, markdown + per-page results.

Uses the LlamaCloud parsing REST API. The job is polled at a fixed
interval for a fixed number of attempts; an explicit failure status ends
the loop immediately, and exhausting the attempts raises
``ParseTimeoutError``.
"""

from __future__ import annotations

import logging
import mimetypes
import time
from collections.abc import Callable
from pathlib import Path
from typing import Any

import httpx

from pagerag.config import DEFAULT_PARSING_INSTRUCTION
from pagerag.documents.base import DocumentParser
from pagerag.documents.schemas import PageRecord, ParsedDocument
from pagerag.errors import ExtractionError, ParseTimeoutError, RemoteProcessingError

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.cloud.llamaindex.ai/api/parsing"
POLL_INTERVAL_SECONDS = 10.0
MAX_POLL_ATTEMPTS = 30

_SUCCESS_STATES = {"SUCCESS", "PARTIAL_SUCCESS"}
_FAILED_STATES = {"ERROR", "CANCELED", "CANCELLED"}


class LlamaParseParser(DocumentParser):
    """Parse documents through the LlamaParse cloud service."""

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str = DEFAULT_BASE_URL,
        instruction: str = DEFAULT_PARSING_INSTRUCTION,
        poll_interval: float = POLL_INTERVAL_SECONDS,
        max_attempts: int = MAX_POLL_ATTEMPTS,
        timeout: float = 60.0,
        client: httpx.Client | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        if client is None and not api_key:
            raise ValueError("LlamaParse API key is required (set LLAMA_CLOUD_API_KEY)")
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")

        self.instruction = instruction
        self.poll_interval = poll_interval
        self.max_attempts = max_attempts
        self._sleep = sleep
        self._client = client or httpx.Client(
            base_url=base_url.rstrip("/"),
            headers={"Authorization": f"Bearer {api_key}"},
            timeout=timeout,
        )

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def parse(self, path: str | Path) -> ParsedDocument:
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"File not found: {path}")

        logger.info("Parsing %s with LlamaParse", path.name)
        job_id = self.upload(path)
        payload, markdown = self.wait_for_result(job_id)
        pages = pages_from_result(payload)

        warnings: list[str] = []
        if not markdown.strip() and pages:
            warnings.append("Markdown result was empty; using concatenated page text")
            markdown = "".join(p.text for p in pages)
        if not markdown.strip():
            raise ExtractionError(f"No text content found in LlamaParse response for {path.name}")
        if not pages:
            warnings.append("No per-page breakdown returned; page numbers will be estimated")

        logger.info(
            "Parsed %s: %d chars, %d pages (job %s)",
            path.name, len(markdown), len(pages), job_id,
        )
        return ParsedDocument(
            markdown=markdown,
            pages=pages,
            source=path.name,
            job_id=job_id,
            warnings=warnings,
        )

    def upload(self, path: Path) -> str:
        """Upload a document and return the parsing job id."""
        mime = mimetypes.guess_type(path.name)[0] or "application/octet-stream"
        try:
            with open(path, "rb") as fh:
                resp = self._client.post(
                    "/upload",
                    files={"file": (path.name, fh, mime)},
                    data={"parsing_instruction": self.instruction},
                )
            resp.raise_for_status()
            job_id = resp.json()["id"]
        except (httpx.HTTPError, KeyError, ValueError) as exc:
            raise RemoteProcessingError(f"LlamaParse upload failed: {exc}") from exc

        logger.info("Uploaded %s with job id %s", path.name, job_id)
        return str(job_id)

    def wait_for_result(self, job_id: str) -> tuple[Any, str]:
        """Poll the job until it succeeds, fails, or the attempts run out.

        Returns:
            The JSON result payload and the markdown text.

        Raises:
            RemoteProcessingError: The job reported a failure status.
            ParseTimeoutError: The job never succeeded within the bound.
        """
        for attempt in range(1, self.max_attempts + 1):
            try:
                status = self._job_status(job_id)
            except httpx.HTTPError as exc:
                logger.warning(
                    "Status check %d/%d for job %s failed: %s",
                    attempt, self.max_attempts, job_id, exc,
                )
            else:
                logger.info("Job %s attempt %d/%d: %s", job_id, attempt, self.max_attempts, status)
                if status in _SUCCESS_STATES:
                    return self._fetch_results(job_id)
                if status in _FAILED_STATES:
                    raise RemoteProcessingError(
                        f"LlamaParse job {job_id} reported status {status}",
                        job_id=job_id,
                    )

            if attempt < self.max_attempts:
                self._sleep(self.poll_interval)

        raise ParseTimeoutError(job_id, self.max_attempts)

    # ------------------------------------------------------------------
    # Private
    # ------------------------------------------------------------------

    def _job_status(self, job_id: str) -> str:
        resp = self._client.get(f"/job/{job_id}")
        resp.raise_for_status()
        return str(resp.json().get("status", "")).upper()

    def _fetch_results(self, job_id: str) -> tuple[Any, str]:
        try:
            json_resp = self._client.get(f"/job/{job_id}/result/json")
            json_resp.raise_for_status()
            md_resp = self._client.get(f"/job/{job_id}/result/markdown")
            md_resp.raise_for_status()
            payload = json_resp.json()
        except (httpx.HTTPError, ValueError) as exc:
            raise RemoteProcessingError(
                f"Failed to fetch results for LlamaParse job {job_id}: {exc}",
                job_id=job_id,
            ) from exc
        return payload, _markdown_text(md_resp)


def _markdown_text(resp: httpx.Response) -> str:
    try:
        data = resp.json()
    except ValueError:
        return resp.text

    if isinstance(data, str):
        return data
    if isinstance(data, dict):
        for key in ("markdown", "text", "content"):
            value = data.get(key)
            if isinstance(value, str):
                return value
    return ""


def pages_from_result(payload: Any) -> list[PageRecord]:
    """Extract ordered page records from a LlamaParse JSON result.

    Accepts either ``{"pages": [...]}`` or a list of such documents. Each
    page contributes ``page`` (or ``page_number``) and ``text`` (or ``md``).
    Missing page numbers default to the page's position.
    """
    if isinstance(payload, dict):
        documents = [payload]
    elif isinstance(payload, list):
        documents = [d for d in payload if isinstance(d, dict)]
    else:
        return []

    records: list[PageRecord] = []
    for document in documents:
        for page in document.get("pages") or []:
            number = page.get("page")
            if number is None:
                number = page.get("page_number")
            if number is None:
                number = len(records) + 1
            text = page.get("text") or page.get("md") or ""
            records.append(PageRecord(page_number=int(number), text=text))
    return records
