"""Tests for document parsers — LlamaParse over a mock transport, local files."""

from __future__ import annotations

import json
import logging
from pathlib import Path

import httpx
import pytest

from pagerag.config import ParsingSettings
from pagerag.documents.base import DocumentParser
from pagerag.documents.factory import (
    available_parsers,
    clear_cache,
    get_parser,
    parser_from_settings,
)
from pagerag.documents.llamaparse import LlamaParseParser, pages_from_result
from pagerag.documents.local import LocalParser
from pagerag.errors import ExtractionError, ParseTimeoutError, RemoteProcessingError

BASE_URL = "https://llamaparse.test"

PAGES_JSON = {
    "pages": [
        {"page": 1, "text": "Intro paragraph.\n\n| A | B |\n"},
        {"page": 2, "text": "|---|---|\n| 1 | 2 |\n\nConclusion paragraph."},
    ],
}
MARKDOWN = "Intro paragraph.\n\n| A | B |\n|---|---|\n| 1 | 2 |\n\nConclusion paragraph."


# ---------------------------------------------------------------------------
# Fake LlamaParse service
# ---------------------------------------------------------------------------


class FakeLlamaParse:
    """Scripted job statuses; records every request path."""

    def __init__(
        self,
        statuses: list[str | int],
        pages_json: dict | list | None = None,
        markdown: str = MARKDOWN,
        upload_status: int = 200,
    ):
        self.statuses = list(statuses)
        self.pages_json = PAGES_JSON if pages_json is None else pages_json
        self.markdown = markdown
        self.upload_status = upload_status
        self.paths: list[str] = []
        self.upload_body = b""

    def __call__(self, request: httpx.Request) -> httpx.Response:
        path = request.url.path
        self.paths.append(path)

        if request.method == "POST" and path == "/upload":
            self.upload_body = request.read()
            if self.upload_status != 200:
                return httpx.Response(self.upload_status, json={"detail": "bad upload"})
            return httpx.Response(200, json={"id": "job-1", "status": "PENDING"})
        if path == "/job/job-1":
            status = self.statuses.pop(0) if len(self.statuses) > 1 else self.statuses[0]
            if isinstance(status, int):
                return httpx.Response(status, json={"detail": "unavailable"})
            return httpx.Response(200, json={"id": "job-1", "status": status})
        if path == "/job/job-1/result/json":
            return httpx.Response(200, json=self.pages_json)
        if path == "/job/job-1/result/markdown":
            return httpx.Response(200, json={"markdown": self.markdown})
        return httpx.Response(404)

    @property
    def status_checks(self) -> int:
        return self.paths.count("/job/job-1")


def _parser(service: FakeLlamaParse, sleeps: list[float], max_attempts: int = 30) -> LlamaParseParser:
    client = httpx.Client(transport=httpx.MockTransport(service), base_url=BASE_URL)
    return LlamaParseParser(
        client=client,
        poll_interval=10.0,
        max_attempts=max_attempts,
        sleep=sleeps.append,
    )


@pytest.fixture
def pdf_path(tmp_path: Path) -> Path:
    path = tmp_path / "report.pdf"
    path.write_bytes(b"%PDF-1.4 placeholder")
    return path


# ---------------------------------------------------------------------------
# LlamaParse
# ---------------------------------------------------------------------------


class TestLlamaParseParser:
    def test_is_document_parser(self):
        service = FakeLlamaParse(["SUCCESS"])
        assert isinstance(_parser(service, []), DocumentParser)

    def test_success_after_pending(self, pdf_path):
        service = FakeLlamaParse(["PENDING", "PENDING", "SUCCESS"])
        sleeps: list[float] = []
        doc = _parser(service, sleeps).parse(pdf_path)

        assert doc.markdown == MARKDOWN
        assert doc.job_id == "job-1"
        assert doc.source == "report.pdf"
        assert [p.page_number for p in doc.pages] == [1, 2]
        assert "".join(p.text for p in doc.pages) == MARKDOWN
        assert service.status_checks == 3
        assert sleeps == [10.0, 10.0]
        assert doc.warnings == []

    def test_upload_sends_instruction(self, pdf_path):
        service = FakeLlamaParse(["SUCCESS"])
        _parser(service, []).parse(pdf_path)
        assert b"parsing_instruction" in service.upload_body
        assert b"report.pdf" in service.upload_body

    def test_error_status_fails_immediately(self, pdf_path):
        service = FakeLlamaParse(["ERROR"])
        sleeps: list[float] = []
        with pytest.raises(RemoteProcessingError) as exc_info:
            _parser(service, sleeps).parse(pdf_path)

        assert exc_info.value.job_id == "job-1"
        assert service.status_checks == 1
        assert sleeps == []
        assert "/job/job-1/result/json" not in service.paths

    def test_timeout_after_max_attempts(self, pdf_path):
        service = FakeLlamaParse(["PENDING"])
        sleeps: list[float] = []
        with pytest.raises(ParseTimeoutError) as exc_info:
            _parser(service, sleeps, max_attempts=4).parse(pdf_path)

        assert exc_info.value.attempts == 4
        assert exc_info.value.job_id == "job-1"
        assert service.status_checks == 4
        # No sleep after the final attempt
        assert len(sleeps) == 3

    def test_transient_status_error_keeps_polling(self, pdf_path, caplog):
        service = FakeLlamaParse([503, "PENDING", "SUCCESS"])
        with caplog.at_level(logging.WARNING, logger="pagerag.documents.llamaparse"):
            doc = _parser(service, []).parse(pdf_path)

        assert doc.markdown == MARKDOWN
        assert service.status_checks == 3
        assert any("failed" in r.getMessage() for r in caplog.records)

    def test_upload_failure(self, pdf_path):
        service = FakeLlamaParse(["SUCCESS"], upload_status=500)
        with pytest.raises(RemoteProcessingError, match="upload failed"):
            _parser(service, []).parse(pdf_path)

    def test_empty_markdown_uses_page_text(self, pdf_path):
        service = FakeLlamaParse(["SUCCESS"], markdown="")
        doc = _parser(service, []).parse(pdf_path)
        assert doc.markdown == MARKDOWN
        assert any("Markdown result was empty" in w for w in doc.warnings)

    def test_no_pages_warns(self, pdf_path):
        service = FakeLlamaParse(["SUCCESS"], pages_json={"pages": []})
        doc = _parser(service, []).parse(pdf_path)
        assert doc.pages == []
        assert any("estimated" in w for w in doc.warnings)

    def test_no_content(self, pdf_path):
        service = FakeLlamaParse(["SUCCESS"], pages_json={"pages": []}, markdown="  \n")
        with pytest.raises(ExtractionError):
            _parser(service, []).parse(pdf_path)

    def test_missing_file(self, tmp_path):
        service = FakeLlamaParse(["SUCCESS"])
        with pytest.raises(FileNotFoundError):
            _parser(service, []).parse(tmp_path / "missing.pdf")
        assert service.paths == []

    def test_requires_api_key(self):
        with pytest.raises(ValueError, match="API key"):
            LlamaParseParser(api_key=None)

    def test_markdown_as_plain_text(self, pdf_path):
        def handler(request: httpx.Request) -> httpx.Response:
            path = request.url.path
            if path == "/upload":
                return httpx.Response(200, json={"id": "job-1"})
            if path == "/job/job-1":
                return httpx.Response(200, json={"status": "success"})
            if path.endswith("/result/json"):
                return httpx.Response(200, json=PAGES_JSON)
            return httpx.Response(200, text="# Plain markdown body")

        client = httpx.Client(transport=httpx.MockTransport(handler), base_url=BASE_URL)
        doc = LlamaParseParser(client=client, sleep=lambda _: None).parse(pdf_path)
        assert doc.markdown == "# Plain markdown body"


class TestPagesFromResult:
    def test_dict_payload(self):
        pages = pages_from_result(PAGES_JSON)
        assert [p.page_number for p in pages] == [1, 2]

    def test_list_payload(self):
        pages = pages_from_result([PAGES_JSON, "ignored"])
        assert len(pages) == 2

    def test_missing_page_number_defaults_to_position(self):
        pages = pages_from_result({"pages": [{"text": "a"}, {"text": "b"}]})
        assert [p.page_number for p in pages] == [1, 2]

    def test_page_number_key_and_md_fallback(self):
        pages = pages_from_result({"pages": [{"page_number": 4, "md": "# Heading"}]})
        assert pages[0].page_number == 4
        assert pages[0].text == "# Heading"

    def test_unexpected_payload(self):
        assert pages_from_result(None) == []
        assert pages_from_result(json.dumps(PAGES_JSON)) == []


# ---------------------------------------------------------------------------
# Local
# ---------------------------------------------------------------------------


class TestLocalParser:
    def test_text_file(self, tmp_path):
        path = tmp_path / "notes.txt"
        path.write_text("First paragraph of notes.\n\nSecond paragraph.", encoding="utf-8")
        doc = LocalParser().parse(path)

        assert doc.source == "notes.txt"
        assert doc.page_count == 1
        assert doc.pages[0].page_number == 1
        assert doc.markdown == "".join(p.text for p in doc.pages)
        assert "Second paragraph." in doc.markdown

    def test_latin1_fallback(self, tmp_path):
        path = tmp_path / "legacy.md"
        path.write_bytes("Café revenue summary".encode("latin-1"))
        doc = LocalParser().parse(path)
        assert "Café" in doc.markdown

    def test_unsupported_extension(self, tmp_path):
        path = tmp_path / "sheet.xlsx"
        path.write_bytes(b"binary")
        with pytest.raises(ValueError, match="Unsupported format"):
            LocalParser().parse(path)

    def test_empty_file(self, tmp_path):
        path = tmp_path / "empty.txt"
        path.write_text("   \n", encoding="utf-8")
        with pytest.raises(ExtractionError):
            LocalParser().parse(path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            LocalParser().parse(tmp_path / "nope.txt")

    def test_pdf_pages(self, tmp_path):
        fpdf = pytest.importorskip("fpdf")
        pytest.importorskip("pdfplumber")

        pdf = fpdf.FPDF()
        for body in ("First page body text", "Second page body text"):
            pdf.add_page()
            pdf.set_font("Helvetica", size=12)
            pdf.cell(0, 10, body)
        path = tmp_path / "two_pages.pdf"
        pdf.output(str(path))

        doc = LocalParser().parse(path)
        assert [p.page_number for p in doc.pages] == [1, 2]
        assert "First page" in doc.pages[0].text
        assert "Second page" in doc.pages[1].text
        assert doc.markdown == "".join(p.text for p in doc.pages)


class TestParserFactory:
    def setup_method(self):
        clear_cache()

    def test_available(self):
        assert available_parsers() == ["llamaparse", "local"]

    def test_local_is_cached(self):
        assert get_parser("local") is get_parser("LOCAL")

    def test_unknown(self):
        with pytest.raises(ValueError, match="Unknown parser"):
            get_parser("ocr")

    def test_from_settings(self):
        parser = parser_from_settings(ParsingSettings(
            api_key="llx-test", poll_interval_seconds=2.0, max_poll_attempts=5,
        ))
        assert isinstance(parser, LlamaParseParser)
        assert parser.poll_interval == 2.0
        assert parser.max_attempts == 5

    def test_local_from_settings(self):
        parser = parser_from_settings(ParsingSettings(provider="local"))
        assert isinstance(parser, LocalParser)
