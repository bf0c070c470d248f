"""User and usage domain models."""

from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class UserResponse(BaseModel):
    """Public view of a user account (never carries the password hash)."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str
    email: str
    name: str
    is_active: bool
    created_at: datetime
    last_login: datetime | None = None
    email_verified: bool


class UserStats(BaseModel):
    """Aggregate account counts."""

    total_users: int
    active_users: int
    new_users_today: int
    new_users_this_week: int


class DailyUsage(BaseModel):
    """Per-user request count for one calendar day."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    user_id: str
    day: date = Field(..., alias="date")
    requests: int
    max_requests: int

    @property
    def remaining(self) -> int:
        return max(0, self.max_requests - self.requests)
