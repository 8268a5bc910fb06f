"""
File: app/utils/masking.py
Description: PII 数据脱敏工具 (Data Masking)

本模块提供账号相关敏感信息的脱敏功能，供日志 patcher 使用，
确保日志中不出现明文密码、密码哈希或完整邮箱。

Author: jinmozhe
Created: 2025-11-26
Updated: 2026-10-17 (Account flow keys: re_password / hashed_password)
"""

from typing import Any

# 敏感字段黑名单 (大小写不敏感)
SENSITIVE_KEYS = {
    "password",
    "re_password",
    "repassword",
    "hashed_password",
    "passwd",
    "secret",
    "token",
    "access_token",
    "api_key",
    "client_secret",
}


def mask_email(email: Any) -> str:
    """
    邮箱脱敏。
    规则: 保留用户名首位和域名，中间掩盖。
    示例: alice@mlog.club -> a***@mlog.club
    """
    if not isinstance(email, str) or "@" not in email:
        return "******"

    user_part, domain_part = email.split("@", 1)
    if len(user_part) <= 1:
        masked_user = "*" * 4
    else:
        masked_user = f"{user_part[0]}***"
    return f"{masked_user}@{domain_part}"


def mask_secret(value: Any) -> str:
    """通用机密信息完全掩盖 (密码 / 哈希 / Token)。"""
    if value is None:
        return ""
    return "******"


def mask_sensitive_data(data: Any) -> Any:
    """
    递归遍历字典 / 列表，对敏感 Key 的值进行掩盖。
    返回浅拷贝副本，不修改原数据。
    """
    if isinstance(data, dict):
        new_data = {}
        for k, v in data.items():
            if isinstance(k, str) and k.lower() in SENSITIVE_KEYS:
                new_data[k] = mask_secret(v)
            else:
                new_data[k] = mask_sensitive_data(v)
        return new_data

    if isinstance(data, list):
        return [mask_sensitive_data(item) for item in data]

    return data
