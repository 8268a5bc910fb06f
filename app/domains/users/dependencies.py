"""
File: app/domains/users/dependencies.py
Description: 用户领域依赖注入 (DI)

本模块负责定义和组装用户领域的依赖项：
1. get_user_repository / get_identity_repository: 注入 DB 会话，实例化 Repository
2. get_user_cache: 注入 Redis 客户端，实例化 UserCache
3. get_user_service: 组装 UserService (同一个 Session 上的仓储 + 事务执行器)

依赖链：
DBSession → UserRepository / ExternalIdentityRepository / SessionTransaction ┐
Redis     → UserCache                                                        ┴→ UserService

Router 层直接使用 UserServiceDep，无需关心底层细节。

Author: jinmozhe
Created: 2025-11-26
Updated: 2026-10-17
"""

from typing import Annotated

from fastapi import Depends
from redis.asyncio import Redis

from app.api.deps import DBSession
from app.core.redis import get_redis
from app.db.models.external_identity import ExternalIdentity
from app.db.models.user import User
from app.db.transaction import SessionTransaction
from app.domains.identities.repository import ExternalIdentityRepository
from app.domains.users.cache import UserCache
from app.domains.users.repository import UserRepository
from app.domains.users.service import UserService


async def get_user_repository(session: DBSession) -> UserRepository:
    return UserRepository(model=User, session=session)


async def get_identity_repository(session: DBSession) -> ExternalIdentityRepository:
    return ExternalIdentityRepository(model=ExternalIdentity, session=session)


async def get_user_cache(redis: Annotated[Redis, Depends(get_redis)]) -> UserCache:
    return UserCache(redis)


UserRepoDep = Annotated[UserRepository, Depends(get_user_repository)]
IdentityRepoDep = Annotated[ExternalIdentityRepository, Depends(get_identity_repository)]
UserCacheDep = Annotated[UserCache, Depends(get_user_cache)]


async def get_user_service(
    session: DBSession,
    repo: UserRepoDep,
    identity_repo: IdentityRepoDep,
    cache: UserCacheDep,
) -> UserService:
    """
    获取用户服务实例 (UserService)。
    FastAPI 在同一请求内缓存 get_db 的结果，因此仓储与事务执行器共享同一个 Session。
    """
    return UserService(
        repo=repo,
        identity_repo=identity_repo,
        tx=SessionTransaction(session),
        cache=cache,
    )


# Router 中只需写: service: UserServiceDep
UserServiceDep = Annotated[UserService, Depends(get_user_service)]
