"""
users 表的版本化迁移。

schema_migrations 记录已执行的版本号，每个迁移只执行一次，按版本顺序执行。
表结构通过 SQLAlchemy inspector 读取，不依赖捕获到的报错文本判断列是否存在。
"""
import logging
from collections.abc import Callable

from sqlalchemy import inspect, insert, select, text
from sqlalchemy.engine import Connection

from trivia.models.account import Account
from trivia.models.schema_migration import SchemaMigration

logger = logging.getLogger(__name__)

USERS_TABLE = Account.__tablename__


def _user_columns(conn: Connection) -> set[str]:
    return {col["name"] for col in inspect(conn).get_columns(USERS_TABLE)}


def _m001_create_users(conn: Connection) -> None:
    if inspect(conn).has_table(USERS_TABLE):
        logger.info("[migrations] users 表已存在，跳过建表")
        return
    Account.__table__.create(conn)
    logger.info("[migrations] users 表已创建")


def _m002_upgrade_legacy_users(conn: Connection) -> None:
    """旧库：补齐 email / password / xp 列，并把 password_hash 中的数据同步到 password。"""
    columns = _user_columns(conn)
    if "email" not in columns:
        conn.execute(text(f"ALTER TABLE {USERS_TABLE} ADD COLUMN email TEXT"))
        conn.execute(text(f"CREATE UNIQUE INDEX IF NOT EXISTS ix_users_email ON {USERS_TABLE} (email)"))
        logger.info("[migrations] 已添加 email 列")
    if "password" not in columns:
        conn.execute(text(f"ALTER TABLE {USERS_TABLE} ADD COLUMN password TEXT DEFAULT ''"))
        logger.info("[migrations] 已添加 password 列")
    if "xp" not in columns:
        conn.execute(text(f"ALTER TABLE {USERS_TABLE} ADD COLUMN xp INTEGER DEFAULT 0"))
        logger.info("[migrations] 已添加 xp 列")
    if "password_hash" in columns:
        conn.execute(
            text(
                f"UPDATE {USERS_TABLE} SET password = password_hash "
                "WHERE password IS NULL OR password = ''"
            )
        )
        logger.info("[migrations] 已从 password_hash 同步 password")


MIGRATIONS: list[tuple[int, str, Callable[[Connection], None]]] = [
    (1, "create_users", _m001_create_users),
    (2, "upgrade_legacy_users", _m002_upgrade_legacy_users),
]


def applied_versions(conn: Connection) -> set[int]:
    if not inspect(conn).has_table(SchemaMigration.__tablename__):
        return set()
    return set(conn.execute(select(SchemaMigration.version)).scalars())


def run_migrations(conn: Connection) -> list[int]:
    """在同步连接上执行未执行过的迁移，返回本次执行的版本号。"""
    SchemaMigration.__table__.create(conn, checkfirst=True)
    done = applied_versions(conn)
    applied: list[int] = []
    for version, name, migrate in MIGRATIONS:
        if version in done:
            continue
        logger.info("[migrations] 执行 %03d_%s", version, name)
        migrate(conn)
        conn.execute(insert(SchemaMigration).values(version=version, name=name))
        applied.append(version)
    return applied
