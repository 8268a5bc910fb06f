"""
File: app/db/repositories/base.py
Description: 通用异步 Repository 基类 (CRUD)

本模块定义了 BaseRepository，封装了通用的 CRUD 操作。
所有领域的 Repository 应继承此类，以减少样板代码。

特性：
- 泛型支持: BaseRepository[ModelType]
- 纯异步: 基于 sqlalchemy.ext.asyncio
- 只 flush 不 commit: 事务边界由 Service 层 (SessionTransaction) 控制
- 部分列更新自动过滤核心系统字段 (id, create_time)

Author: jinmozhe
Created: 2025-11-25
Updated: 2026-10-17 (ORM-object writes + partial column updates)
"""

from collections.abc import Mapping
from typing import Any, ClassVar, Generic, TypeVar

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.models.base import IntIdBase

ModelType = TypeVar("ModelType", bound=IntIdBase)


class BaseRepository(Generic[ModelType]):
    """
    通用 CRUD 仓储基类。

    参数:
    - model: SQLAlchemy 模型类 (如 User)
    - session: 当前请求的 AsyncSession
    """

    # 受保护的字段，禁止通过 update_columns 修改
    PROTECTED_FIELDS: ClassVar[set[str]] = {"id", "create_time"}

    def __init__(self, model: type[ModelType], session: AsyncSession):
        self.model = model
        self.session = session

    # --------------------------------------------------------------------------
    # 查询操作 (Read)
    # --------------------------------------------------------------------------

    async def get(self, id: int) -> ModelType | None:
        """根据主键 ID 查询单条记录"""
        return await self.session.get(self.model, id)

    async def list(self, *, skip: int = 0, limit: int = 100) -> list[ModelType]:
        """按主键顺序分页查询"""
        stmt = select(self.model).order_by(self.model.id).offset(skip).limit(limit)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def count(self) -> int:
        stmt = select(func.count()).select_from(self.model)
        result = await self.session.execute(stmt)
        return result.scalar_one()

    # --------------------------------------------------------------------------
    # 写入操作 (Create / Update / Delete)
    # --------------------------------------------------------------------------

    async def create(self, db_obj: ModelType) -> ModelType:
        """
        持久化新对象。
        flush 以获取自增 ID，不 commit。
        """
        self.session.add(db_obj)
        await self.session.flush()
        await self.session.refresh(db_obj)
        return db_obj

    async def update(self, db_obj: ModelType) -> ModelType:
        """将已修改的 ORM 对象 flush 到数据库"""
        self.session.add(db_obj)
        await self.session.flush()
        return db_obj

    async def update_columns(self, id: int, columns: Mapping[str, Any]) -> None:
        """
        按主键更新部分列。

        会自动过滤 PROTECTED_FIELDS 与模型上不存在的字段。
        使用 ORM-enabled UPDATE，Session 中已加载的对象会同步新值。
        """
        values = {
            k: v
            for k, v in columns.items()
            if k not in self.PROTECTED_FIELDS and hasattr(self.model, k)
        }
        if not values:
            return

        stmt = update(self.model).where(self.model.id == id).values(**values)
        await self.session.execute(stmt)
        await self.session.flush()

    async def update_column(self, id: int, name: str, value: Any) -> None:
        """单列更新"""
        await self.update_columns(id, {name: value})

    async def delete(self, id: int) -> ModelType | None:
        """物理删除记录"""
        db_obj = await self.get(id)
        if db_obj:
            await self.session.delete(db_obj)
            await self.session.flush()
        return db_obj
