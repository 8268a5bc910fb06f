"""
File: app/core/logging.py
Description: Loguru 日志配置

- 标准库 logging (uvicorn / fastapi / sqlalchemy) 统一转发到 Loguru
- 控制台: 本地彩色文本，LOG_JSON_FORMAT=True 时输出 JSON
- 文件: LOG_FILE_ENABLED=True 时按小时轮转
- mask_record patcher: bind 进 extra 的邮箱与密码类字段在输出前脱敏

Author: jinmozhe
Created: 2025-11-24
Updated: 2026-10-17 (Mask account PII in bound extras)
"""

import logging
import sys
from pathlib import Path
from typing import Any

from loguru import logger

from app.core.config import settings
from app.utils.masking import mask_email, mask_sensitive_data

_FORWARDED_LOGGERS = ("uvicorn", "uvicorn.access", "uvicorn.error", "fastapi", "sqlalchemy")

_TEXT_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
    "<level>{message}</level>"
)


class InterceptHandler(logging.Handler):
    def emit(self, record: logging.LogRecord) -> None:
        try:
            level: str | int = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        # 回溯到 logging 模块之外的调用方
        frame, depth = logging.currentframe(), 2
        while frame and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back  # type: ignore[assignment]
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(level, record.getMessage())


def mask_record(record: Any) -> None:
    extra = record["extra"]
    if "email" in extra:
        extra["email"] = mask_email(extra["email"])
    extra.update(mask_sensitive_data(dict(extra)))


def format_record(record: dict[str, Any]) -> str:
    fmt = _TEXT_FORMAT
    extra = record["extra"]
    if extra.get("request_id"):
        fmt += " | <magenta>req_id={extra[request_id]}</magenta>"
    if extra.get("user_id"):
        fmt += " | <yellow>user_id={extra[user_id]}</yellow>"
    return fmt + "\n{exception}"


def _sink_options(**overrides: Any) -> dict[str, Any]:
    options: dict[str, Any] = {
        "level": settings.LOG_LEVEL,
        "enqueue": True,
        "backtrace": True,
        "diagnose": settings.LOG_DIAGNOSE,
    }
    if settings.LOG_JSON_FORMAT:
        options["serialize"] = True
    else:
        options["format"] = format_record
    options.update(overrides)
    return options


def setup_logging() -> None:
    """lifespan 启动阶段调用"""
    logging.root.handlers = [InterceptHandler()]
    logging.root.setLevel(settings.LOG_LEVEL)
    for name in _FORWARDED_LOGGERS:
        std_logger = logging.getLogger(name)
        std_logger.handlers = []
        std_logger.propagate = True

    logger.remove()
    logger.configure(patcher=mask_record)

    console = _sink_options()
    if not settings.LOG_JSON_FORMAT:
        console["colorize"] = True
    logger.add(sys.stdout, **console)

    if settings.LOG_FILE_ENABLED:
        log_dir = Path(settings.LOG_DIR)
        log_dir.mkdir(parents=True, exist_ok=True)
        logger.add(
            str(log_dir / "account_{time:YYYY-MM-DD_HH}.log"),
            **_sink_options(
                rotation=settings.LOG_ROTATION,
                retention=settings.LOG_RETENTION,
                compression=settings.LOG_COMPRESSION,
            ),
        )

    logger.bind(environment=settings.ENVIRONMENT).info("Logging configured")
