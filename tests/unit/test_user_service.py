"""
File: tests/unit/test_user_service.py
Description: 用户领域服务单元测试 (登录 / 注册 / 缓存失效)

本模块测试 UserService 的核心业务逻辑：
1. 注册校验顺序 (多处同时违规时只报告最靠前的一项)
2. 注册成功：密码哈希、默认状态、时间戳
3. 登录：用户名 / 邮箱两种方式，用户不存在与密码错误
4. 写操作后缓存失效：每次写入恰好失效一次

Author: jinmozhe
Created: 2025-11-26
Updated: 2026-10-17 (Account flow)
"""

import pytest

from app.core.error_code import ErrorKind
from app.core.exceptions import AppException
from app.core.security import verify_password
from app.db.models.user import User, UserStatus
from app.domains.users.constants import UserError
from app.domains.users.repository import UserRepository
from app.domains.users.service import UserService

# ------------------------------------------------------------------------------
# Helpers
# ------------------------------------------------------------------------------


async def sign_up_alice(user_service: UserService) -> User:
    return await user_service.sign_up(
        "alice", "alice@mlog.club", "secret1", "secret1", "Alice", ""
    )


# ------------------------------------------------------------------------------
# SignUp
# ------------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_sign_up_success(user_service: UserService) -> None:
    """测试：正常注册"""
    user = await user_service.sign_up(
        "  alice  ", " alice@mlog.club ", "secret1", "secret1", "Alice", "https://a.png"
    )

    assert user.id is not None
    # 用户名 / 邮箱去除首尾空格
    assert user.username == "alice"
    assert user.email == "alice@mlog.club"
    assert user.nickname == "Alice"
    assert user.avatar == "https://a.png"
    assert user.status == UserStatus.OK

    # 密码只存哈希
    assert user.password != "secret1"
    assert verify_password("secret1", user.password)

    assert user.create_time > 0
    assert user.create_time == user.update_time


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("args", "expected"),
    [
        # 全部字段都不合法 -> 用户名为空最先报告
        (("   ", "bad", "", "x", "", ""), UserError.USERNAME_REQUIRED),
        (("ab", "bad", "", "x", "", ""), UserError.USERNAME_TOO_SHORT),
        (("alice", "not-an-email", "", "x", "", ""), UserError.EMAIL_INVALID),
        (("alice", "a@b.com", "", "x", "", ""), UserError.PASSWORD_REQUIRED),
        (("alice", "a@b.com", "12345", "x", "", ""), UserError.PASSWORD_TOO_SIMPLE),
        (("alice", "a@b.com", "secret1", "x", "", ""), UserError.NICKNAME_REQUIRED),
        (("alice", "a@b.com", "secret1", "x", "Nick", ""), UserError.PASSWORD_MISMATCH),
    ],
)
async def test_sign_up_validation_order(
    user_service: UserService, args: tuple[str, ...], expected: UserError
) -> None:
    """测试：注册校验按固定顺序报告第一个错误"""
    with pytest.raises(AppException) as excinfo:
        await user_service.sign_up(*args)

    assert excinfo.value.code == expected.code
    assert excinfo.value.kind == ErrorKind.VALIDATION


@pytest.mark.asyncio
async def test_sign_up_examples(user_service: UserService) -> None:
    """测试：典型输入的校验结果"""
    cases = [
        (("ab", "a@b.com", "secret1", "secret1", "Nick", ""), UserError.USERNAME_TOO_SHORT),
        (("alice", "not-an-email", "secret1", "secret1", "Nick", ""), UserError.EMAIL_INVALID),
        (("alice", "a@b.com", "secret1", "secret2", "Nick", ""), UserError.PASSWORD_MISMATCH),
    ]
    for args, expected in cases:
        with pytest.raises(AppException) as excinfo:
            await user_service.sign_up(*args)
        assert excinfo.value.code == expected.code


@pytest.mark.asyncio
async def test_sign_up_length_counts_characters(user_service: UserService) -> None:
    """测试：长度按字符计算而不是字节"""
    # 4 个汉字 = 12 字节，仍然太短
    with pytest.raises(AppException) as excinfo:
        await user_service.sign_up("张三李四", "a@b.com", "secret1", "secret1", "Nick")
    assert excinfo.value.code == UserError.USERNAME_TOO_SHORT.code

    # 5 个汉字通过用户名校验；5 个汉字的密码仍然太短
    with pytest.raises(AppException) as excinfo:
        await user_service.sign_up("张三李四五", "a@b.com", "密码密码密", "密码密码密", "Nick")
    assert excinfo.value.code == UserError.PASSWORD_TOO_SIMPLE.code

    user = await user_service.sign_up(
        "张三李四五", "a@b.com", "密码密码密码", "密码密码密码", "Nick"
    )
    assert user.username == "张三李四五"


@pytest.mark.asyncio
async def test_sign_up_duplicate_username(user_service: UserService) -> None:
    """测试：用户名重复注册"""
    await sign_up_alice(user_service)

    with pytest.raises(AppException) as excinfo:
        await user_service.sign_up(
            "alice", "other@mlog.club", "secret1", "secret1", "Alice 2"
        )

    assert excinfo.value.code == UserError.USERNAME_EXISTS.code
    assert excinfo.value.kind == ErrorKind.CONFLICT
    assert "alice" in excinfo.value.message


@pytest.mark.asyncio
async def test_sign_up_duplicate_email(user_service: UserService) -> None:
    """测试：邮箱重复注册"""
    await sign_up_alice(user_service)

    with pytest.raises(AppException) as excinfo:
        await user_service.sign_up(
            "alice2", "alice@mlog.club", "secret1", "secret1", "Alice 2"
        )

    assert excinfo.value.code == UserError.EMAIL_EXISTS.code
    assert excinfo.value.kind == ErrorKind.CONFLICT


@pytest.mark.asyncio
async def test_sign_up_does_not_touch_cache(
    user_service: UserService, user_cache
) -> None:
    """测试：注册不触发缓存失效"""
    await sign_up_alice(user_service)
    assert user_cache.invalidated == []


# ------------------------------------------------------------------------------
# SignIn
# ------------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_sign_in_by_username_and_email(user_service: UserService) -> None:
    """测试：用户名 / 邮箱均可登录"""
    created = await sign_up_alice(user_service)

    by_name = await user_service.sign_in("alice", "secret1")
    by_email = await user_service.sign_in("alice@mlog.club", "secret1")

    assert by_name.id == created.id
    assert by_email.id == created.id


@pytest.mark.asyncio
async def test_sign_in_wrong_password(user_service: UserService) -> None:
    """测试：密码错误"""
    await sign_up_alice(user_service)

    with pytest.raises(AppException) as excinfo:
        await user_service.sign_in("alice", "wrongpw")

    assert excinfo.value.code == UserError.WRONG_PASSWORD.code
    assert excinfo.value.kind == ErrorKind.VALIDATION


@pytest.mark.asyncio
async def test_sign_in_user_not_found(user_service: UserService) -> None:
    """测试：用户不存在"""
    with pytest.raises(AppException) as excinfo:
        await user_service.sign_in("nobody", "secret1")
    assert excinfo.value.code == UserError.USER_NOT_FOUND.code
    assert excinfo.value.kind == ErrorKind.NOT_FOUND

    with pytest.raises(AppException) as excinfo:
        await user_service.sign_in("nobody@mlog.club", "secret1")
    assert excinfo.value.code == UserError.USER_NOT_FOUND.code


@pytest.mark.asyncio
async def test_sign_in_requires_credentials(user_service: UserService) -> None:
    """测试：用户名与密码不能为空"""
    with pytest.raises(AppException) as excinfo:
        await user_service.sign_in("", "secret1")
    assert excinfo.value.code == UserError.USERNAME_REQUIRED.code

    with pytest.raises(AppException) as excinfo:
        await user_service.sign_in("alice", "")
    assert excinfo.value.code == UserError.PASSWORD_REQUIRED.code


# ------------------------------------------------------------------------------
# Update / Delete + Cache
# ------------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_update_columns_invalidates_once(
    user_service: UserService, user_cache
) -> None:
    """测试：部分列更新无论改几列，缓存只失效一次"""
    user = await sign_up_alice(user_service)

    await user_service.update_columns(
        user.id, {"nickname": "Alice W", "avatar": "https://b.png", "update_time": 1}
    )

    assert user_cache.invalidated == [user.id]
    reloaded = await user_service.get(user.id)
    assert reloaded is not None
    assert reloaded.nickname == "Alice W"
    assert reloaded.avatar == "https://b.png"


@pytest.mark.asyncio
async def test_update_and_delete_invalidate(
    user_service: UserService, user_cache
) -> None:
    """测试：整体更新 / 单列更新 / 删除各失效一次"""
    user = await sign_up_alice(user_service)

    user.nickname = "Renamed"
    await user_service.update(user)
    await user_service.update_column(user.id, "status", UserStatus.DISABLED)
    await user_service.delete(user.id)

    assert user_cache.invalidated == [user.id, user.id, user.id]
    assert await user_service.get(user.id) is None


@pytest.mark.asyncio
async def test_update_columns_ignores_protected_fields(
    user_service: UserService, user_repo: UserRepository
) -> None:
    """测试：id / create_time 不允许通过部分更新修改"""
    user = await sign_up_alice(user_service)
    original_create_time = user.create_time

    await user_repo.update_columns(user.id, {"create_time": 1, "nickname": "N2"})  # type: ignore[typeddict-unknown-key]

    reloaded = await user_service.get(user.id)
    assert reloaded is not None
    assert reloaded.create_time == original_create_time
    assert reloaded.nickname == "N2"


@pytest.mark.asyncio
async def test_get_profile_read_through(
    user_service: UserService, fake_redis
) -> None:
    """测试：资料读取先查缓存，写操作后缓存失效"""
    user = await sign_up_alice(user_service)

    profile = await user_service.get_profile(user.id)
    assert profile.username == "alice"
    assert f"user:{user.id}" in fake_redis.store

    await user_service.update_columns(user.id, {"nickname": "Alice W"})
    assert f"user:{user.id}" not in fake_redis.store

    refreshed = await user_service.get_profile(user.id)
    assert refreshed.nickname == "Alice W"


@pytest.mark.asyncio
async def test_get_profile_not_found(user_service: UserService) -> None:
    with pytest.raises(AppException) as excinfo:
        await user_service.get_profile(404)
    assert excinfo.value.code == UserError.USER_NOT_FOUND.code


@pytest.mark.asyncio
async def test_cache_failure_does_not_break_writes(
    user_repo, identity_repo, db_session, broken_cache
) -> None:
    """测试：Redis 不可用时写操作仍然成功"""
    from app.db.transaction import SessionTransaction

    service = UserService(
        repo=user_repo,
        identity_repo=identity_repo,
        tx=SessionTransaction(db_session),
        cache=broken_cache,
    )
    user = await sign_up_alice(service)

    await service.update_columns(user.id, {"nickname": "Still Works"})
    profile = await service.get_profile(user.id)

    assert profile.nickname == "Still Works"
    assert broken_cache.invalidated == [user.id]


@pytest.mark.asyncio
async def test_list_and_count(user_service: UserService) -> None:
    await sign_up_alice(user_service)
    await user_service.sign_up("bobby", "bob@mlog.club", "secret1", "secret1", "Bob")

    assert await user_service.count() == 2
    users = await user_service.list(skip=1, limit=10)
    assert [u.username for u in users] == ["bobby"]


@pytest.mark.asyncio
async def test_create_without_password(user_service: UserService) -> None:
    """测试：直接创建的无密码用户无法用密码登录"""
    user = await user_service.create(
        User(username="carol", nickname="Carol", create_time=1, update_time=1)
    )

    assert user.id is not None
    assert (await user_service.get_by_username("carol")) is not None
    with pytest.raises(AppException) as excinfo:
        await user_service.sign_in("carol", "anything")
    assert excinfo.value.code == UserError.WRONG_PASSWORD.code


@pytest.mark.asyncio
async def test_update_failure_reports_db_error(
    user_service: UserService, user_cache
) -> None:
    """测试：整体更新违反唯一约束时返回 DB_ERROR，缓存仍失效一次"""
    await sign_up_alice(user_service)
    bob = await user_service.sign_up(
        "bobby", "bob@mlog.club", "secret1", "secret1", "Bob"
    )
    bob_id = bob.id

    bob.username = "alice"
    with pytest.raises(AppException) as excinfo:
        await user_service.update(bob)

    assert excinfo.value.code == "system.db_error"
    assert excinfo.value.kind == ErrorKind.PERSISTENCE
    assert excinfo.value.__cause__ is not None
    assert user_cache.invalidated == [bob_id]

    stored = await user_service.get_by_username("bobby")
    assert stored is not None
    assert stored.id == bob_id


@pytest.mark.asyncio
async def test_sign_up_blank_nickname(user_service: UserService) -> None:
    """测试：昵称只有空白时按昵称为空处理"""
    with pytest.raises(AppException) as excinfo:
        await user_service.sign_up(
            "alice", "alice@mlog.club", "secret1", "secret1", "   "
        )

    assert excinfo.value.code == UserError.NICKNAME_REQUIRED.code
    assert excinfo.value.kind == ErrorKind.VALIDATION
    assert await user_service.count() == 0
