"""
File: app/domains/users/interfaces.py
Description: UserService 依赖的协作者契约 (Protocol)

UserService 只依赖这些结构化接口，具体实现在构造时注入：
- UserStore            -> UserRepository
- ExternalIdentityStore -> ExternalIdentityRepository
- TransactionRunner    -> SessionTransaction
- UserCacheBackend     -> UserCache (Redis)

Author: jinmozhe
Created: 2026-10-17
"""

from collections.abc import Awaitable, Callable
from typing import Any, Protocol, TypeVar

from app.db.models.external_identity import ExternalIdentity
from app.db.models.user import User
from app.domains.identities.repository import ExternalIdentityColumn
from app.domains.users.schemas import UserColumns, UserRead

T = TypeVar("T")


class UserStore(Protocol):
    async def get(self, id: int) -> User | None: ...

    async def get_by_username(self, username: str) -> User | None: ...

    async def get_by_email(self, email: str) -> User | None: ...

    async def list(self, *, skip: int = 0, limit: int = 100) -> list[User]: ...

    async def count(self) -> int: ...

    async def create(self, db_obj: User) -> User: ...

    async def update(self, db_obj: User) -> User: ...

    async def update_columns(self, id: int, columns: UserColumns) -> None: ...

    async def update_column(self, id: int, name: str, value: Any) -> None: ...

    async def delete(self, id: int) -> User | None: ...


class ExternalIdentityStore(Protocol):
    async def get_by_external_id(self, external_id: int) -> ExternalIdentity | None: ...

    async def update(self, db_obj: ExternalIdentity) -> ExternalIdentity: ...

    async def update_column(
        self, id: int, name: ExternalIdentityColumn, value: Any
    ) -> None: ...


class TransactionRunner(Protocol):
    async def run(self, fn: Callable[[], Awaitable[T]]) -> T: ...


class UserCacheBackend(Protocol):
    """失效操作为 best-effort：实现方自行吞掉并记录缓存异常"""

    async def get(self, user_id: int) -> UserRead | None: ...

    async def set(self, user: UserRead) -> None: ...

    async def invalidate(self, user_id: int) -> None: ...
