"""
File: app/core/response.py
Description: 统一响应信封（Unified Response Envelope）

所有 HTTP 接口 (包括 /health) 统一返回：
{code, message, data, request_id, timestamp}

成功: code = "success"
失败: code = 业务错误码 (domain.reason)，kind 放在 data.kind 中供前端分支处理

Author: jinmozhe
Created: 2025-11-24
Updated: 2026-10-17 (fail() accepts ErrorKind)
"""

from datetime import UTC, datetime
from typing import Any, Generic, TypeVar, cast

from pydantic import BaseModel, ConfigDict, Field

from app.core.error_code import ErrorKind

T = TypeVar("T")


class ResponseModel(BaseModel, Generic[T]):
    """统一响应信封"""

    model_config = ConfigDict(from_attributes=True)

    code: str = Field(default="success", description="业务状态码")
    message: str = Field(default="Success", description="响应消息")
    data: T | None = Field(default=None, description="业务数据")
    request_id: str | None = Field(default=None, description="请求追踪ID")
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(UTC),
        description="响应生成时间",
    )

    @classmethod
    def success(
        cls,
        data: T | None = None,
        message: str = "Success",
        request_id: str | None = None,
    ) -> "ResponseModel[T]":
        """构造成功响应"""
        # Pydantic 模型先转成 JSON 安全的字典
        if hasattr(data, "model_dump"):
            data = cast(Any, data).model_dump(mode="json")

        return cls(code="success", message=message, data=data, request_id=request_id)

    @classmethod
    def fail(
        cls,
        code: str,
        message: str,
        kind: ErrorKind | None = None,
        data: Any = None,
        request_id: str | None = None,
    ) -> "ResponseModel[Any]":
        """构造失败响应"""
        if kind is not None:
            data = {"kind": kind.value, **(data or {})}

        return cls(code=code, message=message, data=data, request_id=request_id)
