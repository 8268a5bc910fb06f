"""
File: app/core/security.py
Description: 密码哈希 (pwdlib / Argon2id)

Argon2 计算是 CPU 密集型的，异步代码一律使用 *_async 版本，
在线程池中执行以免阻塞事件循环。

Author: jinmozhe
Created: 2025-12-05
Updated: 2026-10-17 (Remove JWT: the account flow issues no tokens)
"""

from pwdlib import PasswordHash
from starlette.concurrency import run_in_threadpool

password_hash = PasswordHash.recommended()


def get_password_hash(password: str) -> str:
    return password_hash.hash(password)


def verify_password(plain_password: str, hashed_password: str | None) -> bool:
    """
    校验明文密码。
    三方身份自动注册的用户没有密码哈希，任何输入都校验失败。
    """
    if not hashed_password:
        return False
    return password_hash.verify(plain_password, hashed_password)


async def get_password_hash_async(password: str) -> str:
    return await run_in_threadpool(get_password_hash, password)


async def verify_password_async(plain_password: str, hashed_password: str | None) -> bool:
    return await run_in_threadpool(verify_password, plain_password, hashed_password)
