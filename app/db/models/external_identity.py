"""
File: app/db/models/external_identity.py
Description: 三方身份模型 (GitHub 等 OAuth 账号)

本表记录用户在三方平台上的账号快照，由 OAuth 回调写入 (未绑定状态)，
随后通过 Bind 或 SignInByGithub 与本地 User 绑定一次。

绑定状态:
- user_id 为 NULL / 0: 未绑定
- user_id > 0: 已绑定到唯一的 User，之后不可再改绑

注意：
采用 "No-Relationship" 模式，不显式定义 ORM relationship。
严禁物理级联删除。

Author: jinmozhe
Created: 2025-12-02
Updated: 2026-10-17 (Replace UserSocial with provider identity snapshot)
"""

from sqlalchemy import BigInteger, ForeignKey, String, UniqueConstraint
from sqlalchemy.orm import Mapped, declared_attr, mapped_column

from app.db.models.base import IntIdModel

PROVIDER_GITHUB = "github"


class ExternalIdentity(IntIdModel):
    """
    三方身份表 (N:1 User)
    """

    @declared_attr.directive
    def __tablename__(cls) -> str:
        return "external_identities"

    __table_args__ = (UniqueConstraint("provider", "external_id"),)

    # 平台标识: github
    provider: Mapped[str] = mapped_column(
        String(32), nullable=False, default=PROVIDER_GITHUB, comment="平台标识"
    )

    # 三方平台账号 ID
    external_id: Mapped[int] = mapped_column(
        BigInteger, nullable=False, index=True, comment="三方账号ID"
    )

    # 三方登录名 (自动注册时作为本地 username)
    login: Mapped[str] = mapped_column(
        String(100), nullable=False, comment="三方登录名"
    )

    name: Mapped[str | None] = mapped_column(
        String(100), nullable=True, comment="三方显示名"
    )

    email: Mapped[str | None] = mapped_column(
        String(255), nullable=True, comment="三方公开邮箱"
    )

    avatar_url: Mapped[str | None] = mapped_column(
        String(512), nullable=True, comment="三方头像URL"
    )

    # ❌ 严禁 ondelete="CASCADE"
    user_id: Mapped[int | None] = mapped_column(
        BigInteger,
        ForeignKey("users.id"),
        nullable=True,
        index=True,
        comment="绑定的用户ID (NULL 表示未绑定)",
    )

    @property
    def is_linked(self) -> bool:
        """是否已绑定本地用户"""
        return bool(self.user_id and self.user_id > 0)
