"""Document assembler - shape extractor output and classification into a record."""

import uuid
from collections.abc import Callable
from datetime import datetime, timezone

from docsense.ingest.normalizer import cap_for_storage
from docsense.models.documents import Classification, Document, ExtractionResult, SourceType


def new_document_id() -> str:
    """Opaque, never-reused document id."""
    return uuid.uuid4().hex


def assemble_document(
    *,
    extraction: ExtractionResult,
    content: str,
    classification: Classification,
    source_type: SourceType,
    owner_id: str,
    original_url: str | None = None,
    now: datetime | None = None,
    id_factory: Callable[[], str] = new_document_id,
) -> Document:
    """Build the canonical Document record.

    Pure function: no I/O. ``content`` is capped at the storage limit here
    regardless of what the caller passes.

    Args:
        extraction: Extractor output (title, raw text, url)
        content: Normalized text (truncated for processing or full)
        classification: Summary and labels
        source_type: pdf, url or youtube
        owner_id: Owning user id
        original_url: Source URL; defaults to the extractor's URL
        now: Upload timestamp (for testing)
        id_factory: Id generator (for testing)

    Returns:
        Document ready to persist
    """
    if now is None:
        now = datetime.now(timezone.utc)

    return Document(
        id=id_factory(),
        title=extraction.title,
        summary=classification.summary,
        category=classification.category,
        department=classification.department,
        upload_date=now,
        type=source_type,
        original_url=original_url or extraction.original_url,
        content=cap_for_storage(content),
        owner_id=owner_id,
    )
