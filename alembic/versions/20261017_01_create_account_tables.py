"""create users and external_identities

Revision ID: 20261017_01
Revises:
Create Date: 2026-10-17 10:00:00
"""

import sqlalchemy as sa

from alembic import op

revision = "20261017_01"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.BigInteger().with_variant(sa.Integer(), "sqlite"), autoincrement=True, nullable=False, comment="主键 (自增)"),
        sa.Column("username", sa.String(length=50), nullable=False, comment="用户名"),
        sa.Column("email", sa.String(length=255), nullable=True, comment="用户邮箱"),
        sa.Column("nickname", sa.String(length=50), nullable=False, comment="用户昵称 (显示用)"),
        sa.Column("password", sa.String(length=255), nullable=True, comment="密码哈希值"),
        sa.Column("avatar", sa.String(length=512), nullable=True, comment="头像URL"),
        sa.Column("status", sa.Integer(), server_default=sa.text("0"), nullable=False, comment="账号状态 (0 正常 / 1 禁用)"),
        sa.Column("create_time", sa.BigInteger(), nullable=False, comment="创建时间 (Unix 秒)"),
        sa.Column("update_time", sa.BigInteger(), nullable=False, comment="更新时间 (Unix 秒)"),
        sa.CheckConstraint("length(trim(username)) > 0", name=op.f("ck_users_username_not_empty")),
        sa.CheckConstraint("length(trim(nickname)) > 0", name=op.f("ck_users_nickname_not_empty")),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_users")),
        sa.UniqueConstraint("email", name=op.f("uq_users_email")),
        sa.UniqueConstraint("username", name=op.f("uq_users_username")),
    )
    op.create_table(
        "external_identities",
        sa.Column("id", sa.BigInteger().with_variant(sa.Integer(), "sqlite"), autoincrement=True, nullable=False, comment="主键 (自增)"),
        sa.Column("provider", sa.String(length=32), nullable=False, comment="平台标识"),
        sa.Column("external_id", sa.BigInteger(), nullable=False, comment="三方账号ID"),
        sa.Column("login", sa.String(length=100), nullable=False, comment="三方登录名"),
        sa.Column("name", sa.String(length=100), nullable=True, comment="三方显示名"),
        sa.Column("email", sa.String(length=255), nullable=True, comment="三方公开邮箱"),
        sa.Column("avatar_url", sa.String(length=512), nullable=True, comment="三方头像URL"),
        sa.Column("user_id", sa.BigInteger(), nullable=True, comment="绑定的用户ID (NULL 表示未绑定)"),
        sa.Column("create_time", sa.BigInteger(), nullable=False, comment="创建时间 (Unix 秒)"),
        sa.Column("update_time", sa.BigInteger(), nullable=False, comment="更新时间 (Unix 秒)"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], name=op.f("fk_external_identities_user_id_users")),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_external_identities")),
        sa.UniqueConstraint("provider", "external_id", name=op.f("uq_external_identities_provider")),
    )
    op.create_index(op.f("ix_external_identities_external_id"), "external_identities", ["external_id"], unique=False)
    op.create_index(op.f("ix_external_identities_user_id"), "external_identities", ["user_id"], unique=False)


def downgrade() -> None:
    op.drop_index(op.f("ix_external_identities_user_id"), table_name="external_identities")
    op.drop_index(op.f("ix_external_identities_external_id"), table_name="external_identities")
    op.drop_table("external_identities")
    op.drop_table("users")
