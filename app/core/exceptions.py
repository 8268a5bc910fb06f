"""
File: app/core/exceptions.py
Description: 业务异常与全局异常处理器

- AppException 是服务内唯一抛给 HTTP 层的业务异常，携带 BaseErrorCode
- 处理器把各类异常转换为 ResponseModel.fail 信封，HTTP 状态码取自错误码
- 失败信封的 data.kind 给出错误类别，客户端可以不解析 code 直接分支

Author: jinmozhe
Created: 2025-11-24
Updated: 2026-10-17 (AppException carries ErrorKind)
"""

from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import ORJSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.error_code import BaseErrorCode, ErrorKind, SystemErrorCode
from app.core.logging import logger
from app.core.response import ResponseModel


class AppException(Exception):
    """
    业务异常。

        raise AppException(UserError.WRONG_PASSWORD)
        raise AppException(UserError.USERNAME_EXISTS, message="用户名：alice 已被占用")

    存储层故障以 `raise AppException(SystemErrorCode.DB_ERROR) from exc` 抛出，
    原始异常留在 __cause__ 中供日志输出。
    """

    def __init__(self, error: BaseErrorCode, message: str = "", data: Any = None):
        self.error = error
        self.message = message or error.msg
        self.data = data
        super().__init__(self.message)

    @property
    def code(self) -> str:
        return self.error.code

    @property
    def kind(self) -> ErrorKind:
        return self.error.kind

    @property
    def http_status(self) -> int:
        return self.error.http_status


def _request_id(request: Request) -> str:
    return str(getattr(request.state, "request_id", "unknown"))


def _fail(
    request: Request,
    status_code: int,
    code: str,
    message: str,
    kind: ErrorKind | None = None,
    data: Any = None,
) -> ORJSONResponse:
    body = ResponseModel.fail(
        code=code,
        message=message,
        kind=kind,
        data=data,
        request_id=_request_id(request),
    )
    return ORJSONResponse(status_code=status_code, content=body.model_dump(mode="json"))


async def app_exception_handler(request: Request, exc: AppException) -> ORJSONResponse:
    log = logger.bind(code=exc.code, kind=exc.kind.value, http_status=exc.http_status)
    if exc.__cause__ is not None:
        log.opt(exception=exc.__cause__).error(exc.message)
    else:
        log.warning(exc.message)

    return _fail(request, exc.http_status, exc.code, exc.message, exc.kind, exc.data)


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> ORJSONResponse:
    """请求体 / 参数类型错误: 422 改为 400 system.invalid_params，只报告第一处"""
    errors = exc.errors()
    first = errors[0] if errors else {}
    loc = first.get("loc") or ("unknown",)
    message = f"{loc[-1]}: {first.get('msg', 'Invalid parameter')}"

    logger.bind(detail=message).warning("Request validation failed")

    error = SystemErrorCode.INVALID_PARAMS
    return _fail(request, error.http_status, error.code, message, error.kind)


async def http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> ORJSONResponse:
    """路由不存在 / 方法不允许等框架异常"""
    code = "system.not_found" if exc.status_code == 404 else "system.http_error"
    logger.bind(status_code=exc.status_code, detail=str(exc.detail)).warning(
        "Framework HTTP exception"
    )
    return _fail(request, exc.status_code, code, str(exc.detail))


async def general_exception_handler(request: Request, exc: Exception) -> ORJSONResponse:
    logger.opt(exception=exc).error("Unhandled exception")

    error = SystemErrorCode.INTERNAL_ERROR
    return _fail(request, error.http_status, error.code, error.msg, error.kind)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppException, app_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, validation_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, general_exception_handler)
