"""
File: app/domains/users/router.py
Description: 用户领域 HTTP 路由层

1. GET /{user_id}: 查询用户公开资料 (优先读 Redis 缓存)

Author: jinmozhe
Created: 2025-12-05
Updated: 2026-10-17
"""

from fastapi import APIRouter, Request

from app.core.response import ResponseModel
from app.domains.users.dependencies import UserServiceDep
from app.domains.users.schemas import UserRead

router = APIRouter()


@router.get(
    "/{user_id}",
    response_model=ResponseModel[UserRead],
    summary="获取用户资料",
    description="按 ID 查询用户公开资料，不包含密码。",
)
async def read_user(
    request: Request,
    user_id: int,
    service: UserServiceDep,
) -> ResponseModel[UserRead]:
    profile = await service.get_profile(user_id)
    req_id = getattr(request.state, "request_id", None)

    return ResponseModel.success(data=profile, request_id=req_id)
