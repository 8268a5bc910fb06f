"""
File: app/core/error_code.py
Description: 错误码基类与系统级错误码

每个错误码是一个三元组 (http_status, code, msg)：
- http_status: 返回给客户端的 HTTP 状态码
- code: "domain.reason" 形式的字符串业务码
- msg: 默认提示文案，抛出时可以覆盖

ErrorKind 由 http_status 推导，领域代码只需要挑选合适的状态码。

Author: jinmozhe
Created: 2026-01-15
Updated: 2026-10-17 (Add ErrorKind)
"""

from enum import Enum, StrEnum

from starlette import status


class ErrorKind(StrEnum):
    VALIDATION = "validation"
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    PERSISTENCE = "persistence"
    UNKNOWN = "unknown"


_KIND_BY_STATUS: dict[int, ErrorKind] = {
    status.HTTP_400_BAD_REQUEST: ErrorKind.VALIDATION,
    # 密码错误也属于输入问题
    status.HTTP_403_FORBIDDEN: ErrorKind.VALIDATION,
    status.HTTP_404_NOT_FOUND: ErrorKind.NOT_FOUND,
    status.HTTP_409_CONFLICT: ErrorKind.CONFLICT,
    status.HTTP_503_SERVICE_UNAVAILABLE: ErrorKind.PERSISTENCE,
}


class BaseErrorCode(Enum):
    """领域错误码枚举的公共基类"""

    @property
    def http_status(self) -> int:
        return self.value[0]

    @property
    def code(self) -> str:
        return self.value[1]

    @property
    def msg(self) -> str:
        return self.value[2]

    @property
    def kind(self) -> ErrorKind:
        return _KIND_BY_STATUS.get(self.http_status, ErrorKind.UNKNOWN)


class SystemErrorCode(BaseErrorCode):
    INVALID_PARAMS = (status.HTTP_400_BAD_REQUEST, "system.invalid_params", "参数校验失败")
    INTERNAL_ERROR = (
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "system.internal_error",
        "系统内部错误",
    )
    DB_ERROR = (status.HTTP_503_SERVICE_UNAVAILABLE, "system.db_error", "数据库操作异常")
