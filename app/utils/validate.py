"""
File: app/utils/validate.py
Description: 输入格式校验工具

is_email 复用 email-validator (Pydantic EmailStr 的同一实现)，
仅做语法校验，不做 DNS 可投递性检查。

Author: jinmozhe
Created: 2026-10-17
"""

from email_validator import EmailNotValidError, validate_email


def is_email(value: str | None) -> bool:
    """判断字符串是否为合法邮箱地址"""
    if not value:
        return False
    try:
        validate_email(value, check_deliverability=False)
    except EmailNotValidError:
        return False
    return True
