"""
File: app/core/redis.py
Description: 异步 Redis 客户端

进程内共享一个 redis.asyncio 客户端 (内部自带连接池，首个命令时才建连)。
路由通过 get_redis 依赖获取，测试中 override 为 FakeRedis。

Author: jinmozhe
Created: 2025-12-05
Updated: 2026-10-17
"""

from collections.abc import AsyncGenerator

from redis.asyncio import Redis, from_url

from app.core.config import settings

# 读出的值统一解码为 str
redis_client: Redis = from_url(settings.REDIS_URL, encoding="utf-8", decode_responses=True)


async def get_redis() -> AsyncGenerator[Redis, None]:
    yield redis_client


async def close_redis() -> None:
    """lifespan 关闭阶段调用"""
    await redis_client.aclose()
