"""
File: app/domains/users/repository.py
Description: 用户领域仓储层 (Repository)

本模块负责用户数据的数据库访问，继承自通用 BaseRepository。
扩展功能：
1. get_by_username: 根据用户名查询
2. get_by_email: 根据邮箱查询
3. update_columns: 列名受 UserColumns 约束

Author: jinmozhe
Created: 2025-11-25
Updated: 2026-10-17
"""

from sqlalchemy import select

from app.db.models.user import User
from app.db.repositories.base import BaseRepository
from app.domains.users.schemas import UserColumns


class UserRepository(BaseRepository[User]):
    """
    用户仓储类。
    继承了 BaseRepository 的 get/list/count/create/update/delete 方法。
    """

    async def get_by_username(self, username: str) -> User | None:
        """
        根据用户名查询。
        使用 scalar_one_or_none，出现重复数据时直接抛错。
        """
        stmt = select(User).where(User.username == username)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_email(self, email: str) -> User | None:
        """根据邮箱查询"""
        stmt = select(User).where(User.email == email)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def update_columns(self, id: int, columns: UserColumns) -> None:  # type: ignore[override]
        await super().update_columns(id, columns)
