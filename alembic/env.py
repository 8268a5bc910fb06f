"""
File: alembic/env.py
Description: Alembic 迁移环境

运行时使用异步驱动，迁移使用同步驱动：
- postgresql+asyncpg -> postgresql+psycopg
- sqlite+aiosqlite   -> sqlite (pysqlite)，并启用 batch 模式以支持 ALTER

Author: jinmozhe
Created: 2025-11-26
Updated: 2026-10-17
"""

import sys
from logging.config import fileConfig
from pathlib import Path

from sqlalchemy import create_engine, make_url, pool

from alembic import context  # type: ignore

sys.path.insert(0, str(Path(__file__).parent.parent.resolve()))

from app.core.config import settings  # noqa: E402
from app.db.models import Base  # noqa: E402

_SYNC_DRIVERS = {
    "postgresql+asyncpg": "postgresql+psycopg",
    "sqlite+aiosqlite": "sqlite",
}

config = context.config
if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata


def build_sync_uri() -> str:
    url = make_url(str(settings.SQLALCHEMY_DATABASE_URI))
    url = url.set(drivername=_SYNC_DRIVERS.get(url.drivername, url.drivername))
    return url.render_as_string(hide_password=False)


def run_migrations_offline() -> None:
    """只输出 SQL，不连接数据库"""
    context.configure(
        url=build_sync_uri(),
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        compare_type=True,
    )
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    connectable = create_engine(build_sync_uri(), poolclass=pool.NullPool)

    with connectable.connect() as connection:
        context.configure(
            connection=connection,
            target_metadata=target_metadata,
            compare_type=True,
            render_as_batch=connection.dialect.name == "sqlite",
        )
        with context.begin_transaction():
            context.run_migrations()

    connectable.dispose()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
