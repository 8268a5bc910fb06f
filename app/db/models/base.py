"""
File: app/db/models/base.py
Description: ORM 模型基类与组件化定义

本模块采用"组件化组合" (Mixin) 模式：
1. Base: 声明式基类，统一约束命名约定
2. IntIdBase: [基础] 自增整数主键
3. EpochTimeMixin: [组件] create_time / update_time (Unix 秒级时间戳)
4. IntIdModel: [标准] IntIdBase + EpochTimeMixin

说明：
账号体系沿用整数 ID 与秒级时间戳 (now_timestamp)，
便于三方身份表以 user_id = NULL / 0 表示"未绑定"。

Author: jinmozhe
Created: 2025-11-25
Updated: 2026-10-17 (Integer ids + epoch timestamps for the account tables)
"""

from sqlalchemy import BigInteger, Integer, MetaData
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

# 约束命名约定 (PostgreSQL / SQLite 通用)
INDEXES_NAMING_CONVENTION = {
    "ix": "ix_%(table_name)s_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

# SQLite 只有 INTEGER PRIMARY KEY 才会自增
BigIntId = BigInteger().with_variant(Integer(), "sqlite")


class Base(DeclarativeBase):
    """SQLAlchemy 声明式元类"""

    metadata = MetaData(naming_convention=INDEXES_NAMING_CONVENTION)


class EpochTimeMixin:
    """
    [组件] 时间戳混入类

    create_time / update_time 为 Unix 秒级时间戳，由 Service 层显式写入，
    不依赖数据库默认值。
    """

    create_time: Mapped[int] = mapped_column(
        BigInteger, nullable=False, default=0, comment="创建时间 (Unix 秒)"
    )

    update_time: Mapped[int] = mapped_column(
        BigInteger, nullable=False, default=0, comment="更新时间 (Unix 秒)"
    )


class IntIdBase(Base):
    """
    [纯净版] 仅包含自增 ID。
    """

    __abstract__ = True

    id: Mapped[int] = mapped_column(
        BigIntId, primary_key=True, autoincrement=True, comment="主键 (自增)"
    )


class IntIdModel(IntIdBase, EpochTimeMixin):
    """
    [标准版] 账号域通用模型基类。

    class User(IntIdModel): ...
    class ExternalIdentity(IntIdModel): ...
    """

    __abstract__ = True
