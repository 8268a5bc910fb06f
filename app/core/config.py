"""
File: app/core/config.py
Description: 账号服务配置 (pydantic-settings)

配置来源优先级：环境变量 > .env 文件 > 默认值。

分组：
- 通用: 项目名、API 前缀、运行环境、CORS
- 数据库: SQLALCHEMY_DATABASE_URI 直接给出，或由 POSTGRES_* 拼装 (postgresql+asyncpg)
- 日志: Loguru 输出格式与文件轮转
- Redis: 用户资料缓存

数据库配置缺失时在导入阶段直接抛错，服务不会带着错误配置启动。

Author: jinmozhe
Created: 2025-11-24
Updated: 2026-10-17 (Account flow: drop JWT settings, add user cache settings)
"""

from typing import Literal

from pydantic import AnyHttpUrl, model_validator
from pydantic_core import MultiHostUrl
from pydantic_settings import BaseSettings, SettingsConfigDict

_POSTGRES_PARTS = ("POSTGRES_SERVER", "POSTGRES_USER", "POSTGRES_PASSWORD", "POSTGRES_DB")


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_ignore_empty=True,
        extra="ignore",
        case_sensitive=True,
    )

    # ---- 通用 ----------------------------------------------------------------
    PROJECT_NAME: str = "Account Flow Service"
    API_V1_STR: str = "/api/v1"
    ENVIRONMENT: Literal["local", "dev", "prod"] = "local"
    DEBUG: bool = False
    BACKEND_CORS_ORIGINS: list[AnyHttpUrl] = []

    # ---- 数据库 --------------------------------------------------------------
    SQLALCHEMY_DATABASE_URI: str | None = None

    POSTGRES_SERVER: str | None = None
    POSTGRES_PORT: int = 5432
    POSTGRES_USER: str | None = None
    POSTGRES_PASSWORD: str | None = None
    POSTGRES_DB: str | None = None

    # 连接池 (SQLite 下忽略)
    DB_POOL_SIZE: int = 20
    DB_MAX_OVERFLOW: int = 10
    DB_POOL_PRE_PING: bool = True
    DB_POOL_TIMEOUT: int = 30
    DB_POOL_RECYCLE: int = 1800

    # ---- 日志 ----------------------------------------------------------------
    LOG_LEVEL: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    LOG_JSON_FORMAT: bool = False
    LOG_DIAGNOSE: bool = True  # 生产环境关闭，避免变量值进入日志

    LOG_FILE_ENABLED: bool = False
    LOG_DIR: str = "logs"
    LOG_ROTATION: str = "1 hour"
    LOG_RETENTION: str = "7 days"
    LOG_COMPRESSION: str = "zip"

    # ---- Redis ---------------------------------------------------------------
    REDIS_URL: str = "redis://localhost:6379/0"
    USER_CACHE_PREFIX: str = "user:"
    USER_CACHE_TTL_SECONDS: int = 3600

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT == "prod"

    @property
    def is_debug(self) -> bool:
        # 生产环境强制关闭调试
        return self.DEBUG and not self.is_production

    @property
    def is_sqlite(self) -> bool:
        return str(self.SQLALCHEMY_DATABASE_URI).startswith("sqlite")

    @model_validator(mode="after")
    def _assemble_database_uri(self) -> "Settings":
        if self.SQLALCHEMY_DATABASE_URI:
            return self

        missing = [name for name in _POSTGRES_PARTS if not getattr(self, name)]
        if missing:
            raise ValueError(
                "未配置 SQLALCHEMY_DATABASE_URI，且缺少: " + ", ".join(missing)
            )

        url = MultiHostUrl.build(
            scheme="postgresql+asyncpg",
            username=self.POSTGRES_USER,
            password=self.POSTGRES_PASSWORD,
            host=self.POSTGRES_SERVER,  # type: ignore[arg-type]
            port=self.POSTGRES_PORT,
            path=self.POSTGRES_DB,
        )
        self.SQLALCHEMY_DATABASE_URI = str(url)
        return self


settings = Settings()
