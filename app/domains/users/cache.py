"""
File: app/domains/users/cache.py
Description: 用户缓存 (Redis)

Key:   {USER_CACHE_PREFIX}{user_id}   例如 user:42
Value: UserRead 的 JSON 快照 (orjson)
TTL:   USER_CACHE_TTL_SECONDS

缓存与数据库写入不在同一事务中：
- 写操作提交后调用 invalidate 删除 Key
- Redis 异常只记录 warning，不影响主流程 (允许短暂的脏读窗口)

Author: jinmozhe
Created: 2026-10-17
"""

import orjson
from pydantic import ValidationError
from redis.asyncio import Redis
from redis.exceptions import RedisError

from app.core.config import settings
from app.core.logging import logger
from app.domains.users.schemas import UserRead


class UserCache:
    """基于 Redis 的用户快照缓存"""

    def __init__(
        self,
        redis: Redis,
        prefix: str = settings.USER_CACHE_PREFIX,
        ttl_seconds: int = settings.USER_CACHE_TTL_SECONDS,
    ):
        self.redis = redis
        self.prefix = prefix
        self.ttl_seconds = ttl_seconds

    def key(self, user_id: int) -> str:
        return f"{self.prefix}{user_id}"

    async def get(self, user_id: int) -> UserRead | None:
        try:
            raw = await self.redis.get(self.key(user_id))
        except RedisError as exc:
            logger.bind(user_id=user_id, error=str(exc)).warning("User cache read failed")
            return None

        if raw is None:
            return None

        try:
            return UserRead.model_validate(orjson.loads(raw))
        except (orjson.JSONDecodeError, ValidationError):
            # 快照结构过期 (字段变更)，当作未命中
            logger.bind(user_id=user_id).warning("Stale user cache entry dropped")
            await self.invalidate(user_id)
            return None

    async def set(self, user: UserRead) -> None:
        payload = orjson.dumps(user.model_dump(mode="json"))
        try:
            await self.redis.setex(self.key(user.id), self.ttl_seconds, payload)
        except RedisError as exc:
            logger.bind(user_id=user.id, error=str(exc)).warning("User cache write failed")

    async def invalidate(self, user_id: int) -> None:
        try:
            await self.redis.delete(self.key(user_id))
        except RedisError as exc:
            logger.bind(user_id=user_id, error=str(exc)).warning(
                "User cache invalidate failed"
            )
