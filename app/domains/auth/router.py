"""
File: app/domains/auth/router.py
Description: 认证领域 HTTP 路由层

本模块定义账号流程的 API 端点：
1. POST /signin: 用户名 / 邮箱 + 密码登录
2. POST /signup: 注册
3. POST /bind: 三方身份绑定 (登录绑定 / 注册绑定)
4. POST /github/{external_id}/signin: 三方身份登录 (必要时自动注册)

规范：
- 使用统一响应信封 (ResponseModel.success)
- 使用 UserServiceDep 进行服务注入
- 不签发 Token，只返回用户资料 (UserRead)

Author: jinmozhe
Created: 2025-12-05
Updated: 2026-10-17 (Account flow endpoints)
"""

from fastapi import APIRouter, Request, status

from app.core.exceptions import AppException
from app.core.response import ResponseModel
from app.domains.auth.schemas import BindRequest, SignInRequest, SignUpRequest
from app.domains.identities.constants import IdentityError
from app.domains.users.constants import UserMsg
from app.domains.users.dependencies import IdentityRepoDep, UserServiceDep
from app.domains.users.schemas import UserRead

router = APIRouter()


@router.post(
    "/signin",
    response_model=ResponseModel[UserRead],
    summary="用户登录",
    description="使用用户名或邮箱 + 密码登录，成功后返回用户资料。",
)
async def sign_in(
    request: Request,
    body: SignInRequest,
    service: UserServiceDep,
) -> ResponseModel[UserRead]:
    user = await service.sign_in(body.username, body.password)
    req_id = getattr(request.state, "request_id", None)

    return ResponseModel.success(
        data=UserRead.model_validate(user),
        message=UserMsg.SIGN_IN_SUCCESS,
        request_id=req_id,
    )


@router.post(
    "/signup",
    response_model=ResponseModel[UserRead],
    status_code=status.HTTP_201_CREATED,
    summary="注册新用户",
    description="用户名至少 5 个字符、密码至少 6 个字符，用户名与邮箱必须唯一。",
)
async def sign_up(
    request: Request,
    body: SignUpRequest,
    service: UserServiceDep,
) -> ResponseModel[UserRead]:
    user = await service.sign_up(
        username=body.username,
        email=body.email,
        password=body.password,
        re_password=body.re_password,
        nickname=body.nickname,
        avatar=body.avatar,
    )
    req_id = getattr(request.state, "request_id", None)

    return ResponseModel.success(
        data=UserRead.model_validate(user),
        message=UserMsg.SIGN_UP_SUCCESS,
        request_id=req_id,
    )


@router.post(
    "/bind",
    response_model=ResponseModel[UserRead],
    summary="绑定三方账号",
    description="bind_type=login 时登录已有账号绑定，否则注册新账号绑定。每个三方账号只能绑定一次。",
)
async def bind(
    request: Request,
    body: BindRequest,
    service: UserServiceDep,
) -> ResponseModel[UserRead]:
    user = await service.bind(
        external_id=body.external_id,
        bind_type=body.bind_type,
        username=body.username,
        email=body.email,
        password=body.password,
        re_password=body.re_password,
        nickname=body.nickname,
    )
    req_id = getattr(request.state, "request_id", None)

    return ResponseModel.success(
        data=UserRead.model_validate(user),
        message=UserMsg.BIND_SUCCESS,
        request_id=req_id,
    )


@router.post(
    "/github/{external_id}/signin",
    response_model=ResponseModel[UserRead],
    summary="GitHub 账号登录",
    description="三方身份已绑定时直接登录；未绑定且用户名未被占用时自动注册并绑定。",
)
async def sign_in_by_github(
    request: Request,
    external_id: int,
    service: UserServiceDep,
    identity_repo: IdentityRepoDep,
) -> ResponseModel[UserRead]:
    identity = await identity_repo.get_by_external_id(external_id)
    if identity is None:
        raise AppException(IdentityError.NOT_FOUND)

    user = await service.sign_in_by_github(identity)
    req_id = getattr(request.state, "request_id", None)

    return ResponseModel.success(
        data=UserRead.model_validate(user),
        message=UserMsg.SIGN_IN_SUCCESS,
        request_id=req_id,
    )
