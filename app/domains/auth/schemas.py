"""
File: app/domains/auth/schemas.py
Description: 认证领域 Pydantic 模型 (Schema)

本模块定义了登录 / 注册 / 绑定的请求参数。

注意：
字段只做类型约束，不做长度 / 格式校验。
所有业务规则由 UserService 按固定顺序校验，保证 HTTP 与服务层返回相同的错误码。

Author: jinmozhe
Created: 2025-12-05
Updated: 2026-10-17 (Account flow requests)
"""

from pydantic import BaseModel, Field

from app.domains.users.constants import BindType


class SignInRequest(BaseModel):
    """用户名 / 邮箱 + 密码登录"""

    username: str = Field(default="", description="用户名或邮箱", examples=["alice"])
    password: str = Field(default="", description="密码")


class SignUpRequest(BaseModel):
    """注册请求"""

    username: str = Field(default="", description="用户名 (至少 5 个字符)")
    email: str = Field(default="", description="邮箱")
    password: str = Field(default="", description="密码 (至少 6 个字符)")
    re_password: str = Field(default="", description="确认密码")
    nickname: str = Field(default="", description="昵称")
    avatar: str | None = Field(default=None, description="头像URL")


class BindRequest(BaseModel):
    """三方身份绑定请求"""

    external_id: int = Field(..., description="三方平台账号 ID")
    bind_type: str = Field(
        default=BindType.LOGIN.value,
        description="login: 登录已有账号绑定；signup: 注册新账号绑定",
    )
    username: str = Field(default="", description="用户名 (登录绑定时也可为邮箱)")
    email: str = Field(default="", description="邮箱 (注册绑定)")
    password: str = Field(default="", description="密码")
    re_password: str = Field(default="", description="确认密码 (注册绑定)")
    nickname: str = Field(default="", description="昵称 (注册绑定)")
