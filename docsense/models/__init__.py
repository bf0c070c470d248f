"""Models package - re-exports for convenience."""

from docsense.models.documents import (
    STORAGE_CONTENT_CAP,
    Category,
    Classification,
    Department,
    Document,
    ExtractionResult,
    SourceType,
)
from docsense.models.users import DailyUsage, UserResponse, UserStats

__all__ = [
    "STORAGE_CONTENT_CAP",
    "Category",
    "Classification",
    "DailyUsage",
    "Department",
    "Document",
    "ExtractionResult",
    "SourceType",
    "UserResponse",
    "UserStats",
]
