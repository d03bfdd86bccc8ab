"""密码哈希与 JWT 令牌生成/校验。"""
from datetime import datetime, timezone, timedelta
from typing import Any

import jwt
from jwt.exceptions import PyJWTError
from passlib.context import CryptContext

from trivia.core.config import Settings, settings

# 新密码用 bcrypt；hex_sha256 仅用于校验旧版本留下的无盐 SHA-256 摘要
pwd_context = CryptContext(schemes=["bcrypt", "hex_sha256"], deprecated="auto")

MAX_BCRYPT_PASSWORD_BYTES = 72


def hash_password(password: str) -> str:
    """对明文密码做 bcrypt 哈希。"""
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """校验明文密码与哈希是否一致；无法识别的哈希格式视为不一致。"""
    if not hashed_password:
        return False
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except ValueError:
        return False


def create_access_token(
    subject: str | Any,
    expires_delta: timedelta | None = None,
    *,
    config: Settings | None = None,
) -> str:
    """生成 JWT access token，subject 一般为账号 id。"""
    config = config or settings
    if expires_delta is None:
        expires_delta = timedelta(minutes=config.access_token_expire_minutes)
    expire = datetime.now(timezone.utc) + expires_delta
    to_encode = {"sub": str(subject), "exp": expire}
    return jwt.encode(to_encode, config.secret_key, algorithm=config.jwt_algorithm)


def decode_access_token(token: str, *, config: Settings | None = None) -> str | None:
    """解码 JWT，成功返回 sub（账号 ID），失败返回 None。"""
    config = config or settings
    try:
        payload = jwt.decode(token, config.secret_key, algorithms=[config.jwt_algorithm])
        return payload.get("sub")
    except PyJWTError:
        return None
