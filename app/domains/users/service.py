"""
File: app/domains/users/service.py
Description: 用户领域服务 (账号流程)

本模块封装账号体系的核心业务逻辑：
1. 登录 (sign_in): 用户名或邮箱 + 密码校验。
2. 注册 (sign_up): 固定顺序的输入校验、唯一性校验、哈希密码、写库。
3. 绑定 (bind): 将未绑定的三方身份通过 "登录已有账号" 或 "注册新账号" 绑定到本地用户。
4. 三方登录 (sign_in_by_github): 已绑定直接返回；未绑定且用户名不冲突时自动注册并绑定。
5. 通用读写: get / update / update_columns / delete，写操作后失效用户缓存。

注意：
- 所有写操作都通过 TransactionRunner 提交，失败时整体回滚。
- "创建用户 + 绑定三方身份" 总是在同一个事务内完成 (sign_in_by_github 与注册绑定)。
- 存储层异常统一转换为 AppException(SystemErrorCode.DB_ERROR)，原始异常保留在 __cause__。
- 缓存失效在事务结束之后执行，且无论写入成功与否都只执行一次。

Author: jinmozhe
Created: 2025-11-25
Updated: 2026-10-17 (Sign-in / sign-up / bind / GitHub sign-in)
"""

from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

from sqlalchemy.exc import SQLAlchemyError

from app.core.error_code import SystemErrorCode
from app.core.exceptions import AppException
from app.core.logging import logger
from app.core.security import get_password_hash_async, verify_password_async
from app.db.models.external_identity import ExternalIdentity
from app.db.models.user import User, UserStatus
from app.domains.identities.constants import IdentityError
from app.domains.users.constants import (
    PASSWORD_MIN_LENGTH,
    USERNAME_MIN_LENGTH,
    BindType,
    UserError,
)
from app.domains.users.interfaces import (
    ExternalIdentityStore,
    TransactionRunner,
    UserCacheBackend,
    UserStore,
)
from app.domains.users.schemas import UserColumnName, UserColumns, UserRead
from app.utils.timestamp import now_timestamp
from app.utils.validate import is_email

T = TypeVar("T")


class UserService:
    """
    用户领域服务 (账号流程)。

    职责：
    - 编排登录 / 注册 / 绑定流程
    - 执行业务规则校验
    - 调用 Repository 持久化，并维护用户缓存

    协作者全部通过构造函数注入，本类不持有任何全局状态。
    """

    def __init__(
        self,
        repo: UserStore,
        identity_repo: ExternalIdentityStore,
        tx: TransactionRunner,
        cache: UserCacheBackend,
    ):
        self.repo = repo
        self.identity_repo = identity_repo
        self.tx = tx
        self.cache = cache

    # --------------------------------------------------------------------------
    # 通用读写 (Delegation)
    # --------------------------------------------------------------------------

    async def get(self, user_id: int) -> User | None:
        return await self.repo.get(user_id)

    async def get_by_username(self, username: str) -> User | None:
        return await self.repo.get_by_username(username)

    async def get_by_email(self, email: str) -> User | None:
        return await self.repo.get_by_email(email)

    async def list(self, *, skip: int = 0, limit: int = 100) -> list[User]:
        return await self.repo.list(skip=skip, limit=limit)

    async def count(self) -> int:
        return await self.repo.count()

    async def get_profile(self, user_id: int) -> UserRead:
        """
        读取用户资料 (Read-Through 缓存)。
        缓存未命中时查库并回填；用户不存在抛出 USER_NOT_FOUND。
        """
        cached = await self.cache.get(user_id)
        if cached is not None:
            return cached

        user = await self.repo.get(user_id)
        if user is None:
            raise AppException(UserError.USER_NOT_FOUND)

        profile = UserRead.model_validate(user)
        await self.cache.set(profile)
        return profile

    async def create(self, user: User) -> User:
        return await self._in_transaction(lambda: self.repo.create(user))

    async def update(self, user: User) -> User:
        # 回滚会让 user 过期，失效缓存前不能再读它的属性
        user_id = user.id
        try:
            return await self._in_transaction(lambda: self.repo.update(user))
        finally:
            await self.cache.invalidate(user_id)

    async def update_columns(self, user_id: int, columns: UserColumns) -> None:
        try:
            await self._in_transaction(
                lambda: self.repo.update_columns(user_id, columns)
            )
        finally:
            await self.cache.invalidate(user_id)

    async def update_column(
        self, user_id: int, name: UserColumnName, value: Any
    ) -> None:
        try:
            await self._in_transaction(
                lambda: self.repo.update_column(user_id, name, value)
            )
        finally:
            await self.cache.invalidate(user_id)

    async def delete(self, user_id: int) -> None:
        try:
            await self._in_transaction(lambda: self.repo.delete(user_id))
        finally:
            await self.cache.invalidate(user_id)

    # --------------------------------------------------------------------------
    # 登录 / 注册
    # --------------------------------------------------------------------------

    async def sign_in(self, username: str, password: str) -> User:
        """
        用户名或邮箱登录。
        输入为合法邮箱时按邮箱查询，否则按用户名查询。无副作用。
        """
        if not username:
            raise AppException(UserError.USERNAME_REQUIRED, message="用户名/邮箱不能为空")
        if not password:
            raise AppException(UserError.PASSWORD_REQUIRED, message="密码不能为空")

        if is_email(username):
            user = await self.repo.get_by_email(username)
        else:
            user = await self.repo.get_by_username(username)

        if user is None:
            raise AppException(UserError.USER_NOT_FOUND)

        if not await verify_password_async(password, user.password):
            raise AppException(UserError.WRONG_PASSWORD)

        logger.bind(user_id=user.id).info("User signed in")
        return user

    async def sign_up(
        self,
        username: str,
        email: str,
        password: str,
        re_password: str,
        nickname: str,
        avatar: str | None = None,
    ) -> User:
        """
        注册新用户。
        校验顺序固定，第一条失败即返回 (见 _prepare_sign_up)。
        """
        user = await self._prepare_sign_up(
            username, email, password, re_password, nickname, avatar
        )
        await self._in_transaction(lambda: self.repo.create(user))

        logger.bind(user_id=user.id, email=user.email).info("User signed up")
        return user

    async def _prepare_sign_up(
        self,
        username: str,
        email: str,
        password: str,
        re_password: str,
        nickname: str,
        avatar: str | None,
    ) -> User:
        """执行注册校验并构造 (尚未持久化的) User"""
        username = username.strip()
        email = email.strip()
        nickname = nickname.strip()

        if not username:
            raise AppException(UserError.USERNAME_REQUIRED)
        if len(username) < USERNAME_MIN_LENGTH:
            raise AppException(UserError.USERNAME_TOO_SHORT)
        if not is_email(email):
            raise AppException(UserError.EMAIL_INVALID)
        if not password:
            raise AppException(UserError.PASSWORD_REQUIRED)
        if len(password) < PASSWORD_MIN_LENGTH:
            raise AppException(UserError.PASSWORD_TOO_SIMPLE)
        if not nickname:
            raise AppException(UserError.NICKNAME_REQUIRED)
        if password != re_password:
            raise AppException(UserError.PASSWORD_MISMATCH)

        if await self.repo.get_by_username(username) is not None:
            raise AppException(
                UserError.USERNAME_EXISTS, message=f"用户名：{username} 已被占用"
            )
        if await self.repo.get_by_email(email) is not None:
            raise AppException(UserError.EMAIL_EXISTS, message=f"邮箱：{email} 已被占用")

        now = now_timestamp()
        return User(
            username=username,
            email=email,
            nickname=nickname,
            password=await get_password_hash_async(password),
            avatar=avatar,
            status=UserStatus.OK,
            create_time=now,
            update_time=now,
        )

    # --------------------------------------------------------------------------
    # 三方身份绑定
    # --------------------------------------------------------------------------

    async def bind(
        self,
        external_id: int,
        bind_type: str,
        username: str,
        email: str,
        password: str,
        re_password: str,
        nickname: str,
    ) -> User:
        """
        将未绑定的三方身份绑定到本地用户。

        - bind_type == "login": 登录已有账号后绑定
        - 其它: 以三方头像注册新账号后绑定

        注册绑定时 "创建用户" 与 "写入绑定关系" 在同一事务内提交，
        绑定失败不会留下孤立的新用户。
        """
        identity = await self.identity_repo.get_by_external_id(external_id)
        if identity is None:
            raise AppException(IdentityError.NOT_FOUND)
        if identity.is_linked:
            raise AppException(IdentityError.ALREADY_LINKED)

        user: User | None
        if bind_type == BindType.LOGIN:
            user = await self.sign_in(username, password)
        else:
            user = await self._prepare_sign_up(
                username, email, password, re_password, nickname, identity.avatar_url
            )

        if user is None:
            raise AppException(UserError.UNKNOWN_ERROR)

        async def link() -> User:
            # 注册绑定: 新用户尚未持久化
            if user.id is None:
                await self.repo.create(user)
            identity.user_id = user.id
            identity.update_time = now_timestamp()
            await self.identity_repo.update(identity)
            return user

        await self._in_transaction(link)

        logger.bind(
            user_id=user.id, identity_id=identity.id, bind_type=bind_type
        ).info("External identity bound")
        return user

    async def sign_in_by_github(self, identity: ExternalIdentity) -> User:
        """
        三方身份登录。

        1. 已绑定且用户存在: 直接返回该用户 (幂等)
        2. login 与已有用户名冲突: 抛出 USERNAME_CONFLICT，不写任何数据
        3. 否则在同一事务内创建用户并写入绑定关系
        """
        if identity.is_linked:
            user = await self.repo.get(identity.user_id)  # type: ignore[arg-type]
            if user is not None:
                return user
            # 绑定指向的用户已不存在，按未绑定处理
            logger.bind(identity_id=identity.id, user_id=identity.user_id).warning(
                "Linked user missing, falling back to auto registration"
            )

        if await self.repo.get_by_username(identity.login) is not None:
            raise AppException(IdentityError.USERNAME_CONFLICT)

        now = now_timestamp()
        user = User(
            username=identity.login,
            email=identity.email or None,
            nickname=(identity.name or "").strip() or identity.login,
            avatar=identity.avatar_url,
            status=UserStatus.OK,
            create_time=now,
            update_time=now,
        )

        async def create_and_link() -> User:
            await self.repo.create(user)
            await self.identity_repo.update_column(identity.id, "user_id", user.id)
            return user

        await self._in_transaction(create_and_link)

        logger.bind(user_id=user.id, identity_id=identity.id).info(
            "User registered from external identity"
        )
        return user

    # --------------------------------------------------------------------------
    # 内部工具
    # --------------------------------------------------------------------------

    async def _in_transaction(self, fn: Callable[[], Awaitable[T]]) -> T:
        """在事务中执行写操作，存储层异常转换为 DB_ERROR"""
        try:
            return await self.tx.run(fn)
        except SQLAlchemyError as exc:
            raise AppException(SystemErrorCode.DB_ERROR) from exc
