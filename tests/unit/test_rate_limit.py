"""Redis fixed-window write limiter."""

from unittest.mock import AsyncMock, patch

import pytest

from src.pa_common.errors import RateLimitError
from src.pa_gateway.middleware.rate_limit import RateLimiter


def _redis(counts: list[int]) -> AsyncMock:
    redis = AsyncMock()
    redis.incr.side_effect = counts
    return redis


async def test_first_hit_sets_expiry() -> None:
    redis = _redis([1])
    limiter = RateLimiter("tickets", limit=3, window_seconds=60)
    with patch("src.pa_gateway.middleware.rate_limit.get_redis", AsyncMock(return_value=redis)):
        await limiter.hit("u1")
    redis.incr.assert_awaited_once_with("ratelimit:u1:tickets")
    redis.expire.assert_awaited_once_with("ratelimit:u1:tickets", 60)


async def test_under_limit_does_not_reset_expiry() -> None:
    redis = _redis([2, 3])
    limiter = RateLimiter("tickets", limit=3)
    with patch("src.pa_gateway.middleware.rate_limit.get_redis", AsyncMock(return_value=redis)):
        await limiter.hit("u1")
        await limiter.hit("u1")
    redis.expire.assert_not_awaited()


async def test_over_limit_raises() -> None:
    redis = _redis([4])
    limiter = RateLimiter("tickets", limit=3)
    with patch("src.pa_gateway.middleware.rate_limit.get_redis", AsyncMock(return_value=redis)):
        with pytest.raises(RateLimitError):
            await limiter.hit("u1")


def test_keys_are_per_user_and_group() -> None:
    assert RateLimiter("tickets", 1).key_for("u1") != RateLimiter("tickets", 1).key_for("u2")
    assert RateLimiter("a", 1).key_for("u1") != RateLimiter("b", 1).key_for("u1")
