"""Tests for the PDF extractor."""

from collections.abc import Callable
from unittest.mock import patch

import pytest

from docsense.errors import InsufficientText, InvalidInput
from docsense.extractors.pdf import extract_pdf, title_from_filename


class TestTitleFromFilename:
    @pytest.mark.parametrize(
        ("filename", "expected"),
        [
            ("q3-report.pdf", "q3-report"),
            ("/uploads/2024/Annual Plan.PDF", "Annual Plan"),
            ("archive.tar.pdf", "archive.tar"),
            (None, "Untitled document"),
            ("", "Untitled document"),
        ],
    )
    def test_title(self, filename: str | None, expected: str) -> None:
        assert title_from_filename(filename) == expected


class TestExtractPdf:
    """Test text-layer extraction and its fallback."""

    def test_extracts_text_layer(self, finance_pdf: bytes) -> None:
        result = extract_pdf(finance_pdf, "q3-report.pdf", "application/pdf")

        assert result.title == "q3-report"
        assert "financial budget report" in result.raw_text
        assert result.original_url is None

    def test_content_type_parameters_ignored(self, finance_pdf: bytes) -> None:
        result = extract_pdf(finance_pdf, "q3.pdf", "application/pdf; charset=binary")
        assert "accounting" in result.raw_text

    def test_empty_upload(self) -> None:
        with pytest.raises(InvalidInput, match="No file provided"):
            extract_pdf(b"", "a.pdf", "application/pdf")

    def test_wrong_content_type(self, finance_pdf: bytes) -> None:
        with pytest.raises(InvalidInput, match="File must be a PDF"):
            extract_pdf(finance_pdf, "a.txt", "text/plain")

    def test_no_text_layer(self, blank_pdf: bytes) -> None:
        with pytest.raises(InsufficientText):
            extract_pdf(blank_pdf, "scan.pdf", "application/pdf")

    def test_corrupted_file(self) -> None:
        with pytest.raises(InsufficientText) as exc_info:
            extract_pdf(b"%PDF-1.4 this is not really a pdf", "bad.pdf", "application/pdf")

        assert exc_info.value.suggestion

    def test_falls_back_to_generic_mode(self, finance_pdf: bytes) -> None:
        """When the text layer read fails, the generic mode's text is used."""
        with patch(
            "docsense.extractors.pdf._extract_text_layer", side_effect=ValueError("broken xref")
        ), patch(
            "docsense.extractors.pdf._extract_generic", return_value="generic text"
        ) as generic:
            result = extract_pdf(finance_pdf, "q3.pdf", "application/pdf")

        generic.assert_called_once()
        assert result.raw_text == "generic text"

    def test_falls_back_on_empty_text_layer(
        self, pdf_builder: Callable[[list[str]], bytes]
    ) -> None:
        payload = pdf_builder([])
        with patch(
            "docsense.extractors.pdf._extract_generic", return_value="recovered by layout analysis"
        ):
            result = extract_pdf(payload, "scan.pdf", "application/pdf")

        assert result.raw_text == "recovered by layout analysis"
