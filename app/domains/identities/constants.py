"""
File: app/domains/identities/constants.py
Description: 三方身份领域错误码
Namespace: identities.*
"""

from starlette.status import HTTP_404_NOT_FOUND, HTTP_409_CONFLICT

from app.core.error_code import BaseErrorCode


class IdentityError(BaseErrorCode):
    """三方身份错误码 (HTTP状态, 业务码, 默认文案)"""

    NOT_FOUND = (HTTP_404_NOT_FOUND, "identities.not_found", "Github账号未找到")
    ALREADY_LINKED = (
        HTTP_409_CONFLICT,
        "identities.already_linked",
        "Github账号已绑定了用户",
    )
    # 自动注册时 login 与已有用户名冲突，需要用户走绑定流程另选用户名
    USERNAME_CONFLICT = (
        HTTP_409_CONFLICT,
        "identities.username_conflict",
        "用户名已存在",
    )
