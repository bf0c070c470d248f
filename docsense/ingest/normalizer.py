"""Text normalizer - cleanup, truncation and meaningful-text gating.

Pure functions with no I/O. Every extractor's raw text flows through
``prepare_text`` before classification.
"""

import re
from dataclasses import dataclass

from docsense.errors import InsufficientText
from docsense.models.documents import STORAGE_CONTENT_CAP

PROCESSING_CAP = 8000
HEAD_CHARS = 4000
TAIL_CHARS = 2000
TRUNCATION_MARKER = "\n\n[... content truncated for processing ...]\n\n"
MIN_MEANINGFUL_WORDS = 10

_WHITESPACE = re.compile(r"\s+")
_ARTIFACT_MARKERS = re.compile(
    r"\[(?:image|img|figure|chart|graph|photo|picture)\]", re.IGNORECASE
)
_DISALLOWED_CHARS = re.compile(r"[^\w\s.,!?;:\-()\[\]\"']")
_LETTER = re.compile(r"[^\W\d_]")


@dataclass(frozen=True)
class PreparedText:
    """Normalized, bounded text ready for classification."""

    text: str
    meaningful_words: int
    truncated: bool


def collapse_whitespace(text: str) -> str:
    """Collapse every whitespace run to a single space and trim."""
    return _WHITESPACE.sub(" ", text).strip()


def normalize_text(raw: str) -> str:
    """Clean raw extracted text.

    Steps, in order:
        1. Collapse whitespace runs to one space
        2. Remove image/figure artifact markers (case-insensitive)
        3. Replace characters outside the permitted set with a space
        4. Re-collapse whitespace and trim

    Idempotent: normalize_text(normalize_text(x)) == normalize_text(x).
    """
    text = _WHITESPACE.sub(" ", raw)

    # Removing one marker can splice another together, e.g. "[im[img]age]"
    while _ARTIFACT_MARKERS.search(text):
        text = _ARTIFACT_MARKERS.sub("", text)

    text = _DISALLOWED_CHARS.sub(" ", text)
    return collapse_whitespace(text)


def is_meaningful_word(token: str) -> bool:
    """A token longer than 2 characters containing at least one letter."""
    return len(token) > 2 and _LETTER.search(token) is not None


def count_meaningful_words(text: str) -> int:
    """Count meaningful whitespace-separated tokens."""
    return sum(1 for token in text.split() if is_meaningful_word(token))


def truncate_for_processing(text: str) -> str:
    """Keep head and tail of long text around an explicit marker."""
    if len(text) <= PROCESSING_CAP:
        return text
    return text[:HEAD_CHARS] + TRUNCATION_MARKER + text[-TAIL_CHARS:]


def cap_for_storage(text: str) -> str:
    """Bound persisted content length."""
    return text[:STORAGE_CONTENT_CAP]


def prepare_text(raw: str, *, min_meaningful_words: int = MIN_MEANINGFUL_WORDS) -> PreparedText:
    """Normalize, gate and truncate raw text.

    Raises:
        InsufficientText: If fewer than ``min_meaningful_words`` remain.
    """
    normalized = normalize_text(raw)
    meaningful = count_meaningful_words(normalized)

    if not normalized or meaningful < min_meaningful_words:
        raise InsufficientText(
            "The source contains insufficient readable text content. It appears to be "
            "image-based, scanned, or graphics-heavy.",
            suggestion="Try a document with more selectable text content.",
        )

    processed = truncate_for_processing(normalized)
    return PreparedText(
        text=processed,
        meaningful_words=meaningful,
        truncated=len(normalized) > PROCESSING_CAP,
    )
