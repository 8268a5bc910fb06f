"""
File: app/core/middleware.py
Description: HTTP 中间件

RequestLogMiddleware 为每个请求生成 UUID v7 request_id：
写入 request.state 供信封使用，写入 X-Request-ID 响应头，
并在请求期间通过 logger.contextualize 附加到所有日志上。

Author: jinmozhe
Created: 2025-11-24
Updated: 2026-10-17
"""

import time
from collections.abc import Awaitable, Callable

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.base import BaseHTTPMiddleware
from uuid6 import uuid7

from app.core.config import settings
from app.core.logging import logger

# 探针请求不写 Access Log
QUIET_PATHS = frozenset({"/health", "/favicon.ico"})


def _elapsed_ms(started: float) -> float:
    return round((time.perf_counter() - started) * 1000, 2)


class RequestLogMiddleware(BaseHTTPMiddleware):
    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        request_id = str(uuid7())
        request.state.request_id = request_id
        path = request.url.path

        with logger.contextualize(request_id=request_id):
            started = time.perf_counter()
            try:
                response = await call_next(request)
            except Exception:
                logger.bind(
                    method=request.method, path=path, duration_ms=_elapsed_ms(started)
                ).exception("Request crashed")
                raise

            response.headers["X-Request-ID"] = request_id
            if path not in QUIET_PATHS:
                logger.bind(
                    method=request.method,
                    path=path,
                    status_code=response.status_code,
                    duration_ms=_elapsed_ms(started),
                    client_ip=request.client.host if request.client else "-",
                ).info("{} {} -> {}", request.method, path, response.status_code)
            return response


def register_middlewares(app: FastAPI) -> None:
    # 后添加的先执行，RequestLogMiddleware 位于最外层
    if settings.BACKEND_CORS_ORIGINS:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=[str(origin) for origin in settings.BACKEND_CORS_ORIGINS],
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )
    app.add_middleware(RequestLogMiddleware)
