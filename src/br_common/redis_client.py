"""Redis connection and fixed-window counter — used for rate limiting only.

NOT used for balances or positions; the order ledger in PostgreSQL is the
only source of truth for money.
"""

import redis.asyncio as aioredis

from config.settings import settings

_redis_pool: aioredis.Redis | None = None


async def get_redis() -> aioredis.Redis:
    """Get or create the shared Redis client."""
    global _redis_pool  # noqa: PLW0603
    if _redis_pool is None:
        _redis_pool = aioredis.from_url(
            settings.REDIS_URL,
            decode_responses=True,
        )
    return _redis_pool


async def close_redis() -> None:
    global _redis_pool  # noqa: PLW0603
    if _redis_pool is not None:
        await _redis_pool.aclose()
        _redis_pool = None


async def hit_window(redis: aioredis.Redis, key: str, window_seconds: int) -> int:
    """Increment the counter for the current window and return the new count.

    The first hit in a window sets the expiry, so the key disappears when the
    window closes.
    """
    count = int(await redis.incr(key))
    if count == 1:
        await redis.expire(key, window_seconds)
    return count
