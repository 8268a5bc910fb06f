"""
File: tests/conftest.py
Description: Pytest 全局 Fixtures 配置 (Async + 独立测试库)

说明：
1. 默认使用内存 SQLite (sqlite+aiosqlite)，每个用例独立建表，互不干扰
2. 设置 TEST_DATABASE_URI 可改用 PostgreSQL 测试库 (postgresql+asyncpg://.../fastapi_test)
3. Redis 使用进程内 FakeRedis，RecordingUserCache 记录每次缓存失效
4. event loop 交给 pytest-asyncio 自动管理 (pyproject.toml: asyncio_default_fixture_loop_scope)

Author: jinmozhe
Created: 2025-11-26
Updated: 2026-10-17 (Account flow fixtures)
"""

import asyncio
import os
import sys
from collections.abc import AsyncGenerator, Awaitable, Callable

# ------------------------------------------------------------------------------
# Windows 平台特定修复 (必须在任何 async 操作之前)
# ------------------------------------------------------------------------------
if sys.platform == "win32":
    asyncio.set_event_loop_policy(asyncio.WindowsSelectorEventLoopPolicy())

# ------------------------------------------------------------------------------
# 1. 环境配置覆写 (必须在导入 app 之前)
# ------------------------------------------------------------------------------
TEST_DATABASE_URI = os.environ.get("TEST_DATABASE_URI", "sqlite+aiosqlite:///:memory:")
IS_SQLITE = TEST_DATABASE_URI.startswith("sqlite")
os.environ["SQLALCHEMY_DATABASE_URI"] = TEST_DATABASE_URI

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from redis.exceptions import ConnectionError as RedisConnectionError  # noqa: E402
from sqlalchemy.ext.asyncio import (  # noqa: E402
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool  # noqa: E402

from app.api.deps import get_db  # noqa: E402
from app.core.redis import get_redis  # noqa: E402
from app.db.models import Base, ExternalIdentity, User  # noqa: E402
from app.db.transaction import SessionTransaction  # noqa: E402
from app.domains.identities.repository import ExternalIdentityRepository  # noqa: E402
from app.domains.users.cache import UserCache  # noqa: E402
from app.domains.users.repository import UserRepository  # noqa: E402
from app.domains.users.service import UserService  # noqa: E402
from app.main import app  # noqa: E402
from app.utils.timestamp import now_timestamp  # noqa: E402

# ------------------------------------------------------------------------------
# 2. 测试替身 (Redis / Cache)
# ------------------------------------------------------------------------------


class FakeRedis:
    """
    进程内 Redis 替身，仅实现 UserCache 用到的命令。
    broken=True 时所有命令抛出 redis ConnectionError。
    """

    def __init__(self, broken: bool = False):
        self.store: dict[str, str | bytes] = {}
        self.ttls: dict[str, int] = {}
        self.broken = broken

    def _check(self) -> None:
        if self.broken:
            raise RedisConnectionError("redis is down")

    async def get(self, key: str) -> str | bytes | None:
        self._check()
        return self.store.get(key)

    async def setex(self, key: str, ttl: int, value: str | bytes) -> bool:
        self._check()
        self.store[key] = value
        self.ttls[key] = ttl
        return True

    async def delete(self, *keys: str) -> int:
        self._check()
        removed = 0
        for key in keys:
            if self.store.pop(key, None) is not None:
                removed += 1
            self.ttls.pop(key, None)
        return removed


class RecordingUserCache(UserCache):
    """记录 invalidate 调用的 UserCache"""

    def __init__(self, redis: FakeRedis):
        super().__init__(redis)  # type: ignore[arg-type]
        self.invalidated: list[int] = []

    async def invalidate(self, user_id: int) -> None:
        self.invalidated.append(user_id)
        await super().invalidate(user_id)


# ------------------------------------------------------------------------------
# 3. 数据库 Fixtures
# ------------------------------------------------------------------------------


@pytest_asyncio.fixture
async def db_engine() -> AsyncGenerator[AsyncEngine, None]:
    """
    创建测试专用的数据库引擎 (每个用例重建 Schema)。
    内存 SQLite 必须使用 StaticPool，保证所有连接看到同一个库。
    """
    if IS_SQLITE:
        engine = create_async_engine(
            TEST_DATABASE_URI,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    else:
        engine = create_async_engine(TEST_DATABASE_URI, pool_pre_ping=True)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(db_engine: AsyncEngine) -> AsyncGenerator[AsyncSession, None]:
    async_session_factory = async_sessionmaker(
        bind=db_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )

    async with async_session_factory() as session:
        yield session


# ------------------------------------------------------------------------------
# 4. 领域 Fixtures
# ------------------------------------------------------------------------------


@pytest.fixture
def fake_redis() -> FakeRedis:
    return FakeRedis()


@pytest.fixture
def user_cache(fake_redis: FakeRedis) -> RecordingUserCache:
    return RecordingUserCache(fake_redis)


@pytest.fixture
def broken_cache() -> RecordingUserCache:
    """Redis 不可用时的缓存"""
    return RecordingUserCache(FakeRedis(broken=True))


@pytest.fixture
def user_repo(db_session: AsyncSession) -> UserRepository:
    return UserRepository(model=User, session=db_session)


@pytest.fixture
def identity_repo(db_session: AsyncSession) -> ExternalIdentityRepository:
    return ExternalIdentityRepository(model=ExternalIdentity, session=db_session)


@pytest.fixture
def user_service(
    db_session: AsyncSession,
    user_repo: UserRepository,
    identity_repo: ExternalIdentityRepository,
    user_cache: RecordingUserCache,
) -> UserService:
    """
    绑定测试 Session 的 UserService。
    仓储与事务执行器共享同一个 Session，与线上依赖注入一致。
    """
    return UserService(
        repo=user_repo,
        identity_repo=identity_repo,
        tx=SessionTransaction(db_session),
        cache=user_cache,
    )


MakeIdentity = Callable[..., Awaitable[ExternalIdentity]]


@pytest.fixture
def make_identity(db_session: AsyncSession) -> MakeIdentity:
    """
    模拟 OAuth 回调：写入一条 (默认未绑定的) 三方身份。
    """

    async def _make(
        external_id: int,
        login: str,
        name: str | None = None,
        email: str | None = None,
        avatar_url: str | None = "https://avatars.githubusercontent.com/u/1",
        user_id: int | None = None,
    ) -> ExternalIdentity:
        now = now_timestamp()
        identity = ExternalIdentity(
            external_id=external_id,
            login=login,
            name=name,
            email=email,
            avatar_url=avatar_url,
            user_id=user_id,
            create_time=now,
            update_time=now,
        )
        db_session.add(identity)
        await db_session.commit()
        await db_session.refresh(identity)
        return identity

    return _make


# ------------------------------------------------------------------------------
# 5. HTTP Client
# ------------------------------------------------------------------------------


@pytest_asyncio.fixture
async def client(
    db_session: AsyncSession, fake_redis: FakeRedis
) -> AsyncGenerator[AsyncClient, None]:
    """获取异步 HTTP 客户端 (DB 与 Redis 均替换为测试替身)"""

    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        yield db_session

    async def override_get_redis() -> AsyncGenerator[FakeRedis, None]:
        yield fake_redis

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_redis] = override_get_redis

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test"  # type: ignore
    ) as ac:
        yield ac

    app.dependency_overrides.clear()
