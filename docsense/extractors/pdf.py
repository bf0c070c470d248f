"""PDF text extractor (pypdf text layer, pdfminer fallback)."""

import io
import logging
from pathlib import PurePath

from pdfminer.high_level import extract_text as pdfminer_extract_text
from pypdf import PdfReader

from docsense.errors import InsufficientText, InvalidInput
from docsense.models.documents import ExtractionResult

logger = logging.getLogger(__name__)

PDF_CONTENT_TYPE = "application/pdf"
UNTITLED = "Untitled document"


def title_from_filename(filename: str | None) -> str:
    """Strip directory and extension from an uploaded filename."""
    if not filename:
        return UNTITLED
    stem = PurePath(filename).stem.strip()
    return stem or UNTITLED


def _extract_text_layer(payload: bytes) -> str:
    """Text-focused mode: pull only the text layer of each page."""
    reader = PdfReader(io.BytesIO(payload))
    pages = [page.extract_text() or "" for page in reader.pages]
    return "\n\n".join(pages)


def _extract_generic(payload: bytes) -> str:
    """Generic mode: whole-document layout analysis."""
    return pdfminer_extract_text(io.BytesIO(payload)) or ""


def extract_pdf(
    payload: bytes,
    filename: str | None,
    content_type: str | None,
) -> ExtractionResult:
    """Extract text from an uploaded PDF.

    Tries the text-layer mode first and falls back to the generic mode when it
    raises or yields nothing.

    Args:
        payload: Raw uploaded bytes
        filename: Original filename (used for the title)
        content_type: Declared MIME type of the upload

    Returns:
        ExtractionResult with raw (unnormalized) text

    Raises:
        InvalidInput: If the upload is empty or not a PDF
        InsufficientText: If neither mode produces any text
    """
    if not payload:
        raise InvalidInput("No file provided")

    if (content_type or "").split(";")[0].strip().lower() != PDF_CONTENT_TYPE:
        raise InvalidInput("File must be a PDF")

    text = ""
    try:
        text = _extract_text_layer(payload)
    except Exception as e:
        logger.info(f"Text-layer extraction failed ({type(e).__name__}), trying generic mode")

    if not text.strip():
        try:
            text = _extract_generic(payload)
        except Exception as e:
            logger.warning(f"Generic PDF extraction failed: {type(e).__name__}: {e}")
            raise InsufficientText(
                "Failed to parse PDF. The file might be corrupted, password-protected, "
                "or contain only images.",
                suggestion="Please try a PDF with selectable text content.",
            ) from e

    if not text.strip():
        raise InsufficientText(
            "Could not extract readable text from PDF. This PDF appears to contain only "
            "images, scanned content, or graphics.",
            suggestion="Please try a PDF with selectable text content.",
        )

    logger.debug(f"Extracted {len(text)} raw characters from {filename!r}")
    return ExtractionResult(title=title_from_filename(filename), raw_text=text)
