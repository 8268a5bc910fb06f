"""
File: app/domains/identities/repository.py
Description: 三方身份仓储层 (Repository)

继承通用 BaseRepository，扩展：
1. get_by_external_id: 按 (provider, external_id) 查询三方身份
2. update_column: 列名限定为 ExternalIdentityColumn

Author: jinmozhe
Created: 2026-10-17
"""

from typing import Any, Literal

from sqlalchemy import select

from app.db.models.external_identity import PROVIDER_GITHUB, ExternalIdentity
from app.db.repositories.base import BaseRepository

# 允许部分更新的列
ExternalIdentityColumn = Literal[
    "user_id", "login", "name", "email", "avatar_url", "update_time"
]


class ExternalIdentityRepository(BaseRepository[ExternalIdentity]):
    """三方身份仓储类"""

    async def get_by_external_id(
        self, external_id: int, provider: str = PROVIDER_GITHUB
    ) -> ExternalIdentity | None:
        """根据三方平台账号 ID 查询"""
        stmt = select(ExternalIdentity).where(
            ExternalIdentity.provider == provider,
            ExternalIdentity.external_id == external_id,
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def update_column(
        self, id: int, name: ExternalIdentityColumn, value: Any
    ) -> None:
        await super().update_column(id, name, value)
