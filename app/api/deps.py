"""
File: app/api/deps.py
Description: 全局依赖注入定义 (DB Session)

本模块负责数据库会话管理 (get_db / DBSession)。
账号服务不签发 Token，也没有权限模型，因此不包含鉴权依赖。

Author: jinmozhe
Created: 2025-12-05
Updated: 2026-10-17 (Drop JWT dependencies)
"""

from collections.abc import AsyncGenerator
from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.session import AsyncSessionLocal


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    获取异步数据库会话依赖。
    使用 async with 确保请求结束时自动关闭 session (未提交的事务随之回滚)。
    """
    async with AsyncSessionLocal() as session:
        yield session


# 数据库会话依赖类型别名
DBSession = Annotated[AsyncSession, Depends(get_db)]
