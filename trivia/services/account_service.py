"""账号：注册、登录校验、按 ID 查询、更新 XP。"""
import logging
import re

from trivia.core.errors import (
    ConstraintViolationError,
    DuplicateEmailError,
    DuplicateUsernameError,
    InvalidCredentialsError,
    StorageError,
    ValidationError,
)
from trivia.core.security import MAX_BCRYPT_PASSWORD_BYTES, hash_password, verify_password
from trivia.repositories import account_repository as repo
from trivia.schemas.auth import AccountOut
from trivia.storage.base import AccountStore
from trivia.storage.commands import AccountRow

logger = logging.getLogger(__name__)

EMAIL_RE = re.compile(r"[^@]+@[^@]+\.[^@]+")


def _to_public(row: AccountRow) -> AccountOut:
    return AccountOut(id=row.id, username=row.username, email=row.email, xp=row.xp or 0)


async def _ensure_store_ready(store: AccountStore) -> None:
    try:
        await store.init()
    except StorageError as e:
        logger.error("[account] 存储未就绪: %s", e)
        raise StorageError("Database not ready. Please try again.") from e


def _validate_signup(username: str, email: str, password: str) -> None:
    if not username or not username.strip():
        raise ValidationError("Username is required")
    if not EMAIL_RE.search(email or ""):
        raise ValidationError("Invalid email address")
    if not password:
        raise ValidationError("Password is required")
    if len(password.encode("utf-8")) > MAX_BCRYPT_PASSWORD_BYTES:
        raise ValidationError(f"Password is too long (max {MAX_BCRYPT_PASSWORD_BYTES} bytes)")


async def create_account(store: AccountStore, username: str, email: str, password: str) -> None:
    """
    注册新账号。

    先做格式校验与重名预检，再插入；预检与插入之间的竞争由存储层的唯一约束兜底。
    任何失败路径都不会留下半条记录。
    """
    _validate_signup(username, email, password)
    await _ensure_store_ready(store)

    if await repo.get_account_by_username(store, username):
        raise DuplicateUsernameError()
    if await repo.get_account_by_email(store, email):
        raise DuplicateEmailError()

    logger.info("[account] 创建账号 username=%s", username)
    try:
        await repo.create_account(store, username=username, email=email, password_hash=hash_password(password))
    except ConstraintViolationError as e:
        if e.field == "email":
            raise DuplicateEmailError() from e
        raise DuplicateUsernameError() from e


async def login(store: AccountStore, username: str, password: str) -> AccountOut:
    """用户名 + 密码登录，只读不写。任何失败都统一报 InvalidCredentialsError。"""
    if len((password or "").encode("utf-8")) > MAX_BCRYPT_PASSWORD_BYTES:
        # bcrypt 只看前 72 字节，超长密码直接拒绝，避免前缀相同即可登录
        logger.info("[account] 登录失败：密码超过 %d 字节", MAX_BCRYPT_PASSWORD_BYTES)
        raise InvalidCredentialsError()
    await _ensure_store_ready(store)
    row = await repo.get_account_by_username(store, username)
    if row is None:
        logger.info("[account] 登录失败：用户不存在")
        raise InvalidCredentialsError()
    if not row.password:
        logger.info("[account] 登录失败：账号 %s 没有保存密码", row.id)
        raise InvalidCredentialsError()
    if not verify_password(password, row.password):
        logger.info("[account] 登录失败：账号 %s 密码不匹配", row.id)
        raise InvalidCredentialsError()
    return _to_public(row)


async def get_account_by_id(store: AccountStore, account_id: int) -> AccountOut | None:
    row = await repo.get_account_by_id(store, account_id)
    return _to_public(row) if row else None


async def update_xp(store: AccountStore, account_id: int, new_xp: int) -> None:
    await repo.set_account_xp(store, account_id, new_xp)
