"""Tests for structural segmentation of parser markdown."""

from __future__ import annotations

import re

from pagerag.chunking.schemas import ContentKind
from pagerag.chunking.segmenter import StructuralSegmenter, is_table_line, is_visual_marker


def _kinds(segments) -> list[ContentKind]:
    return [s.kind for s in segments]


def _non_ws(text: str) -> str:
    return re.sub(r"\s+", "", text)


class TestLineClassifiers:
    def test_table_line(self):
        assert is_table_line("| A | B |")
        assert is_table_line("  |---|---|")
        assert not is_table_line("| lonely pipe")
        assert not is_table_line("A | B | C")

    def test_visual_marker(self):
        assert is_visual_marker("[Image: a bar chart]")
        assert is_visual_marker("[DIAGRAM: flow]")
        assert is_visual_marker("  [chart: revenue]")
        assert not is_visual_marker("See [image: below]")
        assert not is_visual_marker("[Figure 3] caption")


class TestStructuralSegmenter:
    def test_text_table_text(self, boundary_text):
        segments = StructuralSegmenter().segment(boundary_text)
        assert _kinds(segments) == [ContentKind.TEXT, ContentKind.TABLE, ContentKind.TEXT]
        assert segments[0].text == "Intro paragraph."
        assert segments[1].text == "| A | B |\n|---|---|\n| 1 | 2 |"
        assert segments[2].text == "Conclusion paragraph."

    def test_table_rows_never_split(self):
        rows = "\n".join(f"| row {i} | value {i} |" for i in range(50))
        text = f"Before the table there is some prose.\n\n{rows}\n\nAfter the table."
        segments = StructuralSegmenter().segment(text)
        tables = [s for s in segments if s.kind is ContentKind.TABLE]
        assert len(tables) == 1
        assert tables[0].text == rows

    def test_non_table_line_closes_table(self):
        text = "| a | b |\n| 1 | 2 |\nTrailing note under the table."
        segments = StructuralSegmenter().segment(text)
        assert _kinds(segments) == [ContentKind.TABLE, ContentKind.TEXT]
        assert segments[1].text == "Trailing note under the table."

    def test_table_at_end_of_text(self):
        text = "Summary of quarterly figures follows.\n\n| Q | Rev |\n| 1 | 10 |"
        segments = StructuralSegmenter().segment(text)
        assert segments[-1].kind is ContentKind.TABLE
        assert segments[-1].text == "| Q | Rev |\n| 1 | 10 |"

    def test_image_block_runs_to_blank_line(self):
        text = (
            "Opening paragraph of the section.\n\n"
            "[Chart: Revenue by region]\n"
            "North America leads.\n"
            "Asia grows fastest.\n\n"
            "Closing paragraph of the section."
        )
        segments = StructuralSegmenter().segment(text)
        assert _kinds(segments) == [ContentKind.TEXT, ContentKind.IMAGE, ContentKind.TEXT]
        assert segments[1].text == (
            "[Chart: Revenue by region]\nNorth America leads.\nAsia grows fastest."
        )

    def test_image_block_ends_at_next_bracket(self):
        text = "[Image: logo]\nCompany crest.\n[Diagram: org chart]\nThree levels."
        segments = StructuralSegmenter().segment(text)
        assert _kinds(segments) == [ContentKind.IMAGE, ContentKind.IMAGE]
        assert segments[0].text == "[Image: logo]\nCompany crest."
        assert segments[1].text == "[Diagram: org chart]\nThree levels."

    def test_short_structural_segments_kept(self):
        text = "| a | b |\n\n[Image: x]"
        segments = StructuralSegmenter().segment(text)
        assert _kinds(segments) == [ContentKind.TABLE, ContentKind.IMAGE]

    def test_noise_fragments_dropped(self):
        text = "A real paragraph with enough words.\n\n***\n\n| a | b |\n| 1 | 2 |"
        segments = StructuralSegmenter().segment(text)
        assert _kinds(segments) == [ContentKind.TEXT, ContentKind.TABLE]
        assert "***" not in " ".join(s.text for s in segments)

    def test_short_paragraph_with_words_kept(self):
        segments = StructuralSegmenter().segment("Intro.\n\n| a | b |")
        assert segments[0].text == "Intro."
        assert segments[0].kind is ContentKind.TEXT

    def test_paragraphs_split_at_blank_lines(self, long_text):
        segments = StructuralSegmenter().segment(long_text)
        assert len(segments) == 12
        assert all(s.kind is ContentKind.TEXT for s in segments)

    def test_segments_trimmed_and_non_empty(self, report_text):
        for segment in StructuralSegmenter().segment(report_text):
            assert segment.text
            assert segment.text == segment.text.strip()

    def test_plain_text_lossless(self, long_text):
        segments = StructuralSegmenter().segment(long_text)
        assert "\n\n".join(s.text for s in segments) == long_text

    def test_content_preserved(self, report_text):
        segments = StructuralSegmenter().segment(report_text)
        assert _non_ws("".join(s.text for s in segments)) == _non_ws(report_text)

    def test_empty_text(self):
        assert StructuralSegmenter().segment("") == []
        assert StructuralSegmenter().segment("\n\n   \n") == []
