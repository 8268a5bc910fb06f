"""
File: app/main.py
Description: FastAPI 应用入口

create_app 组装中间件、异常处理器与 /api/v1 路由；
lifespan 启动时配置日志，关闭时释放 Redis 与数据库连接池。
/health 挂在根路径，供探针使用。

Author: jinmozhe
Created: 2025-12-05
Updated: 2026-10-17
"""

import asyncio
import sys
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

# asyncpg 在 Windows 下需要 SelectorEventLoop，必须先于任何事件循环设置
if sys.platform == "win32":
    asyncio.set_event_loop_policy(asyncio.WindowsSelectorEventLoopPolicy())

from fastapi import FastAPI  # noqa: E402
from fastapi.responses import ORJSONResponse  # noqa: E402

from app.api_router import api_router  # noqa: E402
from app.core.config import settings  # noqa: E402
from app.core.exceptions import register_exception_handlers  # noqa: E402
from app.core.logging import setup_logging  # noqa: E402
from app.core.middleware import register_middlewares  # noqa: E402
from app.core.redis import close_redis  # noqa: E402
from app.core.response import ResponseModel  # noqa: E402
from app.db.session import close_engine  # noqa: E402


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    setup_logging()
    try:
        yield
    finally:
        await close_redis()
        await close_engine()


def create_app() -> FastAPI:
    app = FastAPI(
        title=settings.PROJECT_NAME,
        default_response_class=ORJSONResponse,
        lifespan=lifespan,
    )

    register_middlewares(app)
    register_exception_handlers(app)
    app.include_router(api_router, prefix=settings.API_V1_STR)

    @app.get("/health", tags=["health"], response_model=ResponseModel[dict[str, str]])
    async def health_check():
        return ResponseModel.success(data={"status": "ok"})

    return app


app = create_app()

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000)
