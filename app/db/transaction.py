"""
File: app/db/transaction.py
Description: 事务执行器 (TransactionRunner)

在同一个 AsyncSession 上执行一段异步闭包：
- 闭包正常返回: commit
- 闭包抛出任何异常: rollback 后原样抛出

Repository 与事务执行器共享同一个 Session，因此闭包内的所有写操作
(如 "创建用户 + 绑定三方身份") 要么一起提交，要么一起回滚。

Author: jinmozhe
Created: 2026-10-17
"""

from collections.abc import Awaitable, Callable
from typing import TypeVar

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.logging import logger

T = TypeVar("T")


class SessionTransaction:
    """基于 AsyncSession 的事务执行器"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def run(self, fn: Callable[[], Awaitable[T]]) -> T:
        try:
            result = await fn()
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            logger.debug("Transaction rolled back")
            raise
        return result
