"""
Unit tests for the text extraction stage.

PDF and Word fixtures are generated in memory with PyMuPDF and
python-docx so the real parsers are exercised.
"""

import pytest

from trainforge.enums.training import FileKind
from trainforge.services.processing.stages.text_extraction import (
    EXTRACTION_FALLBACK_MARKER,
    NON_TEXT_CONTENT_MARKER,
    clean_title_from_filename,
    extract_text,
)

from tests.helpers import make_docx, make_pdf


# =============================================================================
# clean_title_from_filename
# =============================================================================


class TestCleanTitleFromFilename:
    @pytest.mark.parametrize(
        "file_name,expected",
        [
            ("Workplace_Safety-101.pdf", "Workplace Safety 101"),
            ("onboarding.docx", "onboarding"),
            ("  spaced   name .mp4", "spaced name"),
            ("archive.tar.gz", "archive.tar"),
            ("uploads/Fire__Drill.pdf", "Fire Drill"),
        ],
    )
    def test_cleans_names(self, file_name, expected):
        assert clean_title_from_filename(file_name) == expected

    def test_falls_back_to_original_name(self):
        assert clean_title_from_filename("___.pdf") == "___.pdf"

    @pytest.mark.parametrize("file_name", ["", "   "])
    def test_blank_name_falls_back_to_upload(self, file_name):
        assert clean_title_from_filename(file_name) == "upload"


# =============================================================================
# extract_text
# =============================================================================


class TestExtractPdf:
    def test_extracts_page_text(self):
        data = make_pdf("Fire exits must stay clear.", "Report every hazard.")

        text = extract_text(data, FileKind.PDF, "safety.pdf")

        assert "Fire exits must stay clear." in text
        assert "Report every hazard." in text
        assert EXTRACTION_FALLBACK_MARKER not in text

    def test_blank_pdf_yields_placeholder(self):
        text = extract_text(make_pdf(""), FileKind.PDF, "Scanned_Policy.pdf")

        assert text.startswith(EXTRACTION_FALLBACK_MARKER)
        assert "Scanned Policy" in text

    def test_corrupt_pdf_yields_placeholder(self):
        text = extract_text(b"not a pdf at all", FileKind.PDF, "broken.pdf")

        assert text.startswith(EXTRACTION_FALLBACK_MARKER)
        assert "broken.pdf" in text


class TestExtractDocx:
    def test_extracts_paragraphs_and_tables(self):
        data = make_docx(
            ["Welcome to the team.", "", "Badges are collected on day one."],
            table_rows=[["Day", "Task"], ["Monday", "Orientation"]],
        )

        text = extract_text(data, FileKind.DOCX, "welcome.docx")

        assert "Welcome to the team." in text
        assert "Badges are collected on day one." in text
        assert "Monday | Orientation" in text

    def test_empty_docx_yields_placeholder(self):
        text = extract_text(make_docx([]), FileKind.DOCX, "empty.docx")

        assert text.startswith(EXTRACTION_FALLBACK_MARKER)

    def test_corrupt_docx_yields_placeholder(self):
        text = extract_text(b"PK\x03\x04garbage", FileKind.DOCX, "bad.docx")

        assert text.startswith(EXTRACTION_FALLBACK_MARKER)


class TestExtractVideo:
    def test_video_yields_non_text_placeholder(self):
        text = extract_text(b"\x00" * 64, FileKind.VIDEO, "Forklift_Training.mp4")

        assert text.startswith(NON_TEXT_CONTENT_MARKER)
        assert "Forklift Training" in text
        assert "64 bytes" in text

    def test_extraction_never_returns_empty(self):
        for kind in FileKind:
            assert extract_text(b"", kind, "x.bin")
