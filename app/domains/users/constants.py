"""
File: app/domains/users/constants.py
Description: 用户领域常量定义 (错误码 + 校验规则 + 成功提示)
Namespace: users.*

Author: jinmozhe
Created: 2025-11-25
Updated: 2026-10-17 (Sign-in / sign-up / bind error codes)
"""

from enum import StrEnum

from starlette.status import (
    HTTP_400_BAD_REQUEST,
    HTTP_403_FORBIDDEN,
    HTTP_404_NOT_FOUND,
    HTTP_409_CONFLICT,
    HTTP_500_INTERNAL_SERVER_ERROR,
)

from app.core.error_code import BaseErrorCode

# 校验规则 (按字符数计算，非字节数)
USERNAME_MIN_LENGTH = 5
PASSWORD_MIN_LENGTH = 6


class BindType(StrEnum):
    """绑定方式: login 登录已有账号绑定，其它值一律按注册绑定处理"""

    LOGIN = "login"
    SIGNUP = "signup"  # 仅作为文档取值，非 login 即走注册绑定


class UserError(BaseErrorCode):
    """
    用户领域错误码
    格式: (HTTP状态, 业务码, 默认文案)
    """

    # HTTP 400: 输入校验失败 (注册校验顺序见 UserService.sign_up)
    USERNAME_REQUIRED = (HTTP_400_BAD_REQUEST, "users.username_required", "请输入用户名")
    USERNAME_TOO_SHORT = (
        HTTP_400_BAD_REQUEST,
        "users.username_too_short",
        f"用户名长度不能少于{USERNAME_MIN_LENGTH}个字符",
    )
    EMAIL_INVALID = (HTTP_400_BAD_REQUEST, "users.email_invalid", "请输入合法的邮箱")
    PASSWORD_REQUIRED = (HTTP_400_BAD_REQUEST, "users.password_required", "请输入密码")
    PASSWORD_TOO_SIMPLE = (
        HTTP_400_BAD_REQUEST,
        "users.password_too_simple",
        "密码过于简单",
    )
    NICKNAME_REQUIRED = (HTTP_400_BAD_REQUEST, "users.nickname_required", "昵称不能为空")
    PASSWORD_MISMATCH = (
        HTTP_400_BAD_REQUEST,
        "users.password_mismatch",
        "两次输入密码不匹配",
    )

    # HTTP 403: 凭证错误
    WRONG_PASSWORD = (HTTP_403_FORBIDDEN, "users.wrong_password", "密码错误")

    # HTTP 404
    USER_NOT_FOUND = (HTTP_404_NOT_FOUND, "users.user_not_found", "用户不存在")

    # HTTP 409: 唯一性冲突
    USERNAME_EXISTS = (HTTP_409_CONFLICT, "users.username_exists", "用户名已被占用")
    EMAIL_EXISTS = (HTTP_409_CONFLICT, "users.email_exists", "邮箱已被占用")

    # HTTP 500: 不应出现的状态
    UNKNOWN_ERROR = (HTTP_500_INTERNAL_SERVER_ERROR, "users.unknown_error", "未知异常")


class UserMsg:
    """用户领域成功提示文案"""

    SIGN_IN_SUCCESS = "登录成功"
    SIGN_UP_SUCCESS = "注册成功"
    BIND_SUCCESS = "绑定成功"
