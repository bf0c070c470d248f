"""Document domain models."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

STORAGE_CONTENT_CAP = 10_000


class SourceType(str, Enum):
    """Where a document came from."""

    pdf = "pdf"
    url = "url"
    youtube = "youtube"


class Category(str, Enum):
    """Known document categories."""

    technical = "Technical"
    business = "Business"
    legal = "Legal"
    marketing = "Marketing"
    hr = "HR"
    finance = "Finance"
    operations = "Operations"
    research = "Research"


class Department(str, Enum):
    """Known owning departments."""

    engineering = "Engineering"
    sales = "Sales"
    legal = "Legal"
    marketing = "Marketing"
    hr = "HR"
    finance = "Finance"
    operations = "Operations"
    research = "Research"


class ExtractionResult(BaseModel):
    """Output of a source extractor, before normalization."""

    title: str
    raw_text: str
    original_url: str | None = None


class Classification(BaseModel):
    """Summary and labels for a document."""

    summary: str
    category: str
    department: str
    source: str = Field("heuristic", pattern="^(llm|heuristic)$")


class Document(BaseModel):
    """Canonical document record (camelCase on the wire)."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str
    title: str
    summary: str
    category: str
    department: str
    upload_date: datetime
    type: SourceType
    original_url: str | None = None
    content: str = Field(..., max_length=STORAGE_CONTENT_CAP)
    owner_id: str
