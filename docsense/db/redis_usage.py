"""Redis-backed usage store using INCR + EXPIRE."""

from datetime import date

from redis.asyncio import Redis


def make_usage_key(user_id: str, day: date) -> str:
    """Create the counter key for a (user, day) pair."""
    return f"quota:{user_id}:{day.isoformat()}"


class RedisUsageStore:
    """Redis implementation of UsageStore.

    Keys expire after ``retention_days`` so old days age out instead of
    accumulating.
    """

    def __init__(self, redis_client: Redis, retention_days: int = 30) -> None:
        """Initialize usage store.

        Args:
            redis_client: Async Redis client
            retention_days: How long a day's counter is kept
        """
        self._redis = redis_client
        self._ttl_seconds = retention_days * 24 * 3600

    async def ensure_usage(self, user_id: str, day: date, max_requests: int) -> int:
        """Create the counter at zero if missing."""
        key = make_usage_key(user_id, day)
        await self._redis.set(key, 0, ex=self._ttl_seconds, nx=True)
        value = await self._redis.get(key)
        return int(value or 0)

    async def increment_usage(self, user_id: str, day: date) -> int:
        """Atomically add one request."""
        key = make_usage_key(user_id, day)
        count = await self._redis.incr(key)

        # Set expiry on first request
        if count == 1:
            await self._redis.expire(key, self._ttl_seconds)

        return int(count)
