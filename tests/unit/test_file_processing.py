"""
Unit tests for quizme/utils/file_processing.py and quizme/services/document_service.py
Tests: normalization, format detection, PDF/DOCX extraction, sufficiency gate.
No network required.
"""

import os
from unittest.mock import MagicMock

import pytest

from quizme.errors import ExtractionFailure, UnsupportedFormat
from quizme.schemas import DocumentFormat
from quizme.services.document_service import DocumentService
from quizme.utils import file_processing
from quizme.utils.file_processing import clean_text, detect_format


# ────────────────────────────────────────────────────────────────────────────
# Normalization
# ────────────────────────────────────────────────────────────────────────────

class TestCleanText:

    def test_collapses_whitespace_runs(self):
        assert clean_text("one   two\t\tthree") == "one two three"

    def test_collapses_newline_runs(self):
        assert clean_text("line one\n\n\nline two") == "line one line two"

    def test_strips_disallowed_characters(self):
        assert clean_text("Price: $5 @ store #3 & more") == "Price: 5 store 3 more"

    def test_keeps_basic_punctuation(self):
        text = "Wait, what? Yes; really: (maybe) - fine!"
        assert clean_text(text) == text

    def test_trims_ends(self):
        assert clean_text("   padded text \n") == "padded text"

    def test_non_string_returns_empty(self):
        assert clean_text(None) == ""
        assert clean_text(42) == ""

    @pytest.mark.parametrize("text", [
        "a @ b",
        "  mixed\n\n\t whitespace  **and** symbols ##  ",
        "Résumé — naïve café ✓ done",
        "already clean text.",
        "",
    ])
    def test_idempotent(self, text):
        once = clean_text(text)
        assert clean_text(once) == once


# ────────────────────────────────────────────────────────────────────────────
# Format detection
# ────────────────────────────────────────────────────────────────────────────

class TestDetectFormat:

    def test_pdf(self):
        assert detect_format("notes.pdf") == DocumentFormat.PDF

    def test_docx_uppercase_extension(self):
        assert detect_format("NOTES.DOCX") == DocumentFormat.DOCX

    def test_pptx_has_dedicated_message(self):
        with pytest.raises(UnsupportedFormat, match="PPTX"):
            detect_format("slides.pptx")

    def test_other_extension_rejected(self):
        with pytest.raises(UnsupportedFormat) as exc_info:
            detect_format("notes.txt")
        assert ".txt" in exc_info.value.details

    def test_no_extension_rejected(self):
        with pytest.raises(UnsupportedFormat):
            detect_format("README")

    def test_dispatch_ignores_content(self, pdf_bytes, sun_text):
        """A PDF payload declared as .txt is still rejected."""
        service = DocumentService()
        with pytest.raises(UnsupportedFormat):
            service.extract_text(pdf_bytes(sun_text), "notes.txt")


# ────────────────────────────────────────────────────────────────────────────
# Extraction
# ────────────────────────────────────────────────────────────────────────────

class TestExtraction:

    def test_pdf_text_extracted_and_normalized(self, test_settings, pdf_bytes, sun_text):
        text = DocumentService(test_settings).extract_text(pdf_bytes(sun_text), "sun.pdf")
        assert "The sun is a star." in text
        assert "once every year." in text
        assert "\n" not in text

    def test_docx_text_extracted_and_normalized(self, test_settings, docx_bytes):
        data = docx_bytes("Photosynthesis converts light into energy.", "", "Plants  need  water & sunlight.")
        text = DocumentService(test_settings).extract_text(data, "biology.docx")
        assert text == "Photosynthesis converts light into energy. Plants need water sunlight."

    def test_pymupdf_fallback_when_pypdf_fails(self, monkeypatch, test_settings, pdf_bytes, sun_text):
        loader = MagicMock(name="PyPDFLoader")
        loader.return_value.load.side_effect = ValueError("EOF marker not found")
        monkeypatch.setattr(file_processing, "PyPDFLoader", loader)

        text = DocumentService(test_settings).extract_text(pdf_bytes(sun_text), "sun.pdf")
        assert "The sun is a star." in text

    def test_corrupt_pdf_raises_extraction_failure(self, monkeypatch, test_settings):
        import fitz

        loader = MagicMock(name="PyPDFLoader")
        loader.return_value.load.side_effect = ValueError("EOF marker not found")
        monkeypatch.setattr(file_processing, "PyPDFLoader", loader)
        monkeypatch.setattr(fitz, "open", MagicMock(side_effect=RuntimeError("cannot open broken document")))

        with pytest.raises(ExtractionFailure) as exc_info:
            DocumentService(test_settings).extract_text(b"not really a pdf", "broken.pdf")
        assert "PDF extraction failed: EOF marker not found" in exc_info.value.details

    def test_corrupt_docx_raises_extraction_failure(self, test_settings):
        with pytest.raises(ExtractionFailure) as exc_info:
            DocumentService(test_settings).extract_text(b"not a zip archive", "broken.docx")
        assert "DOCX extraction failed" in exc_info.value.details

    def test_temp_file_removed(self, monkeypatch, docx_bytes):
        created = []
        original = file_processing._write_temp

        def tracking_write(file_bytes, suffix):
            path = original(file_bytes, suffix)
            created.append(path)
            return path

        monkeypatch.setattr(file_processing, "_write_temp", tracking_write)
        file_processing.process_docx(docx_bytes("Some paragraph."))
        with pytest.raises(ExtractionFailure):
            file_processing.process_docx(b"garbage")

        assert len(created) == 2
        assert not any(os.path.exists(path) for path in created)


# ────────────────────────────────────────────────────────────────────────────
# Sufficiency gate
# ────────────────────────────────────────────────────────────────────────────

class TestIsSufficient:

    def test_exactly_minimum_passes(self, test_settings):
        assert DocumentService(test_settings).is_sufficient("a" * 100)

    def test_one_below_minimum_fails(self, test_settings):
        assert not DocumentService(test_settings).is_sufficient("a" * 99)

    def test_length_measured_after_normalization(self, test_settings):
        # 99 letters padded with symbols and whitespace still normalizes to 99
        assert not DocumentService(test_settings).is_sufficient("a" * 99 + "   $$$ \n\n")

    def test_sample_text_passes(self, test_settings, sun_text):
        assert len(clean_text(sun_text)) >= 100
        assert DocumentService(test_settings).is_sufficient(sun_text)

    def test_empty_fails(self, test_settings):
        assert not DocumentService(test_settings).is_sufficient("")
