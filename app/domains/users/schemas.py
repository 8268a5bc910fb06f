"""
File: app/domains/users/schemas.py
Description: 用户领域 Pydantic 模型 (Schema) 与部分更新类型

本模块定义了：
1. UserRead: 用户信息响应 / 缓存快照 (屏蔽密码哈希)
2. UserColumns: 部分列更新的类型约束 (TypedDict)，替代开放的 dict[str, Any]

规范：
- 严格遵循 Pydantic V2 写法 (ConfigDict)
- 响应模型开启 from_attributes=True 以支持 ORM 转换

Author: jinmozhe
Created: 2025-11-25
Updated: 2026-10-17 (Account flow fields)
"""

from typing import Literal, TypedDict

from pydantic import BaseModel, ConfigDict, Field

from app.db.models.user import UserStatus


class UserColumns(TypedDict, total=False):
    """
    User 允许部分更新的列。
    id / create_time 不在此列，由仓储层额外过滤。
    """

    username: str
    email: str | None
    nickname: str
    password: str | None
    avatar: str | None
    status: int
    update_time: int


UserColumnName = Literal[
    "username", "email", "nickname", "password", "avatar", "status", "update_time"
]


class UserRead(BaseModel):
    """
    用户读取模型 (响应 / Redis 缓存快照)。
    不包含 password 字段。
    """

    id: int = Field(..., description="用户 ID")
    username: str = Field(..., description="用户名")
    email: str | None = Field(default=None, description="邮箱")
    nickname: str = Field(..., description="昵称")
    avatar: str | None = Field(default=None, description="头像URL")
    status: UserStatus = Field(..., description="账号状态")
    create_time: int = Field(..., description="创建时间 (Unix 秒)")
    update_time: int = Field(..., description="更新时间 (Unix 秒)")

    model_config = ConfigDict(from_attributes=True)
