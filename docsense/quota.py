"""Daily request quota tracking."""

import logging
from collections.abc import Callable
from datetime import date

from docsense.db.repositories import UsageStore
from docsense.models.users import DailyUsage

logger = logging.getLogger(__name__)

DEFAULT_DAILY_LIMIT = 5


class QuotaTracker:
    """Per-user daily request counter.

    A (user, day) counter is created at zero on the first check of a day, so
    a new calendar day always reads as zero usage. Callers check
    ``can_make_request`` before chargeable work and call ``increment`` only
    after it succeeds.
    """

    def __init__(
        self,
        store: UsageStore,
        max_requests: int = DEFAULT_DAILY_LIMIT,
        today: Callable[[], date] = date.today,
    ) -> None:
        """Initialize quota tracker.

        Args:
            store: Usage store implementation
            max_requests: Daily quota per user
            today: Local calendar-day clock (for testing)
        """
        self._store = store
        self._max_requests = max_requests
        self._today = today

    @property
    def max_requests(self) -> int:
        return self._max_requests

    async def get_daily_usage(self, user_id: str) -> DailyUsage:
        """Get today's usage, creating the record if needed."""
        day = self._today()
        requests = await self._store.ensure_usage(user_id, day, self._max_requests)
        return DailyUsage(
            user_id=user_id, day=day, requests=requests, max_requests=self._max_requests
        )

    async def can_make_request(self, user_id: str) -> bool:
        """True iff today's requests are below the quota."""
        usage = await self.get_daily_usage(user_id)
        return usage.requests < usage.max_requests

    async def increment(self, user_id: str) -> DailyUsage:
        """Record one successful chargeable request."""
        usage = await self.get_daily_usage(user_id)
        requests = await self._store.increment_usage(user_id, usage.day)
        logger.debug(f"Usage for {user_id} on {usage.day}: {requests}/{self._max_requests}")
        return usage.model_copy(update={"requests": requests})

    async def remaining(self, user_id: str) -> int:
        """Requests left today."""
        usage = await self.get_daily_usage(user_id)
        return usage.remaining
