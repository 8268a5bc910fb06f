"""
File: app/db/session.py
Description: 异步引擎与 Session 工厂

- 生产使用 postgresql+asyncpg，连接池参数取自 Settings
- 本地 / 测试可以指向 sqlite+aiosqlite，此时不传连接池参数
- JSON 列统一用 orjson 编解码

Author: jinmozhe
Created: 2025-11-24
Updated: 2026-10-17
"""

from typing import Any

import orjson
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from app.core.config import settings


def _json_dumps(obj: Any) -> str:
    return orjson.dumps(obj).decode()


def build_engine_options() -> dict[str, Any]:
    options: dict[str, Any] = {
        "echo": settings.is_debug,
        "json_serializer": _json_dumps,
        "json_deserializer": orjson.loads,
    }
    if settings.is_sqlite:
        return options

    options.update(
        pool_pre_ping=settings.DB_POOL_PRE_PING,
        pool_size=settings.DB_POOL_SIZE,
        max_overflow=settings.DB_MAX_OVERFLOW,
        pool_timeout=settings.DB_POOL_TIMEOUT,
        pool_recycle=settings.DB_POOL_RECYCLE,
    )
    return options


engine: AsyncEngine = create_async_engine(
    str(settings.SQLALCHEMY_DATABASE_URI), **build_engine_options()
)

# AsyncSession 下 commit 后访问属性不能触发隐式加载
AsyncSessionLocal: async_sessionmaker[AsyncSession] = async_sessionmaker(
    bind=engine,
    class_=AsyncSession,
    autoflush=False,
    expire_on_commit=False,
)


async def close_engine() -> None:
    await engine.dispose()
