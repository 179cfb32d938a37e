"""Per-user write rate limiting (Redis fixed window).

Applied as a route dependency on ticket create / claim / cancel so the user id
from the bearer token is available. Window logic:

    count = INCR ratelimit:{user_id}:{group}
    if count == 1: EXPIRE key window
    if count > limit: raise RateLimitError
"""

import logging

from fastapi import Depends

from config.settings import settings
from src.pa_common.errors import RateLimitError
from src.pa_common.redis_client import get_redis
from src.pa_gateway.auth.dependencies import get_current_user_id

logger = logging.getLogger(__name__)


class RateLimiter:
    def __init__(self, group: str, limit: int, window_seconds: int = 60) -> None:
        self.group = group
        self.limit = limit
        self.window_seconds = window_seconds

    def key_for(self, user_id: str) -> str:
        return f"ratelimit:{user_id}:{self.group}"

    async def hit(self, user_id: str) -> None:
        redis = await get_redis()
        key = self.key_for(user_id)
        count = await redis.incr(key)
        if count == 1:
            await redis.expire(key, self.window_seconds)
        if count > self.limit:
            logger.warning("Rate limit hit: user=%s group=%s count=%d", user_id, self.group, count)
            raise RateLimitError()

    async def __call__(self, user_id: str = Depends(get_current_user_id)) -> None:
        await self.hit(user_id)


ticket_write_limiter = RateLimiter("tickets", settings.RATE_LIMIT_WRITES_PER_MINUTE)
