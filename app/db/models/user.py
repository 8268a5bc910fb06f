"""
File: app/db/models/user.py
Description: 用户核心账号模型

继承自 IntIdModel，自动拥有：
1. 自增整数主键
2. create_time / update_time (Unix 秒)

约束:
- username / email 全局唯一
- password 仅存储 Argon2id 哈希；三方自动注册的账号没有密码 (NULL)
- email 对三方自动注册且未公开邮箱的账号允许为空

Author: jinmozhe
Created: 2025-11-25
Updated: 2026-10-17 (Account flow fields: nickname / avatar / status)
"""

from enum import IntEnum

from sqlalchemy import CheckConstraint, Integer, String, text
from sqlalchemy.orm import Mapped, declared_attr, mapped_column

from app.db.models.base import IntIdModel


class UserStatus(IntEnum):
    """账号状态"""

    OK = 0
    DISABLED = 1


class User(IntIdModel):
    """
    用户模型 (账号域)
    """

    @declared_attr.directive
    def __tablename__(cls) -> str:
        return "users"

    __table_args__ = (
        CheckConstraint(
            "length(trim(username)) > 0", name="username_not_empty"
        ),
        CheckConstraint(
            "length(trim(nickname)) > 0", name="nickname_not_empty"
        ),
    )

    # 用户名：登录凭证，必填且唯一
    username: Mapped[str] = mapped_column(
        String(50), unique=True, nullable=False, comment="用户名"
    )

    # 邮箱：登录凭证，唯一
    email: Mapped[str | None] = mapped_column(
        String(255), unique=True, nullable=True, comment="用户邮箱"
    )

    # 昵称：用于对外展示，可重复
    nickname: Mapped[str] = mapped_column(
        String(50), nullable=False, comment="用户昵称 (显示用)"
    )

    # 密码哈希 (Argon2id)
    password: Mapped[str | None] = mapped_column(
        String(255), nullable=True, comment="密码哈希值"
    )

    # 头像 URL
    avatar: Mapped[str | None] = mapped_column(
        String(512), nullable=True, comment="头像URL"
    )

    status: Mapped[int] = mapped_column(
        Integer,
        default=UserStatus.OK,
        server_default=text("0"),
        nullable=False,
        comment="账号状态 (0 正常 / 1 禁用)",
    )
