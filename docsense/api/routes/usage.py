"""Quota usage endpoint."""

from fastapi import APIRouter
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from docsense.api.deps import CurrentUser, ServicesDep

router = APIRouter(tags=["usage"])


class UsageResponse(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    user_id: str
    day: str = Field(..., alias="date")
    requests: int
    max_requests: int
    remaining: int


@router.get("/usage", response_model=UsageResponse)
async def usage(user: CurrentUser, services: ServicesDep) -> UsageResponse:
    """Today's request count for the caller."""
    daily = await services.quota.get_daily_usage(user.id)
    return UsageResponse(
        user_id=daily.user_id,
        day=daily.day.isoformat(),
        requests=daily.requests,
        max_requests=daily.max_requests,
        remaining=daily.remaining,
    )
