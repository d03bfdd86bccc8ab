"""关系库后端（SQLite / PostgreSQL），SQLAlchemy async。"""
import logging

from sqlalchemy import MetaData, Table, func, insert, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from trivia.core.db import create_engine_and_sessionmaker, ensure_sqlite_dir, to_async_url
from trivia.core.errors import ConstraintViolationError, StorageError
from trivia.storage.base import AccountStore
from trivia.storage.commands import (
    AccountCommand,
    AccountQuery,
    AccountRow,
    FindByEmail,
    FindById,
    FindByUsername,
    InsertAccount,
    TopByXp,
    UpdateXp,
)
from trivia.storage.migrations import USERS_TABLE, run_migrations

logger = logging.getLogger(__name__)


def _reflect_users(conn) -> Table:
    return Table(USERS_TABLE, MetaData(), autoload_with=conn)


class SqlAccountStore(AccountStore):
    backend_name = "sql"

    def __init__(self, database_url: str, *, echo: bool = False) -> None:
        super().__init__()
        self._database_url = to_async_url(database_url)
        self._echo = echo
        self._engine = None
        self._session_local = None
        self._users: Table | None = None

    @property
    def has_legacy_password_hash(self) -> bool:
        return self._users is not None and "password_hash" in self._users.c

    async def _initialize(self) -> None:
        ensure_sqlite_dir(self._database_url)
        if self._engine is None:
            self._engine, self._session_local = create_engine_and_sessionmaker(
                self._database_url, echo=self._echo
            )
        async with self._engine.begin() as conn:
            applied = await conn.run_sync(run_migrations)
            self._users = await conn.run_sync(_reflect_users)
        if applied:
            logger.info("[storage] 已执行迁移版本 %s", applied)
        if self.has_legacy_password_hash:
            logger.info("[storage] 检测到旧版 password_hash 列，写入时会同时写两列")

    def _select_rows(self):
        users = self._users
        password = users.c.password
        if self.has_legacy_password_hash:
            password = func.coalesce(func.nullif(users.c.password, ""), users.c.password_hash)
        return select(
            users.c.id,
            users.c.username,
            users.c.email,
            password.label("password"),
            func.coalesce(users.c.xp, 0).label("xp"),
        )

    async def _query(self, query: AccountQuery) -> list[AccountRow]:
        users = self._users
        stmt = self._select_rows()
        if isinstance(query, FindByUsername):
            stmt = stmt.where(users.c.username == query.username)
        elif isinstance(query, FindByEmail):
            stmt = stmt.where(users.c.email == query.email)
        elif isinstance(query, FindById):
            stmt = stmt.where(users.c.id == query.account_id)
        elif isinstance(query, TopByXp):
            stmt = stmt.order_by(func.coalesce(users.c.xp, 0).desc(), users.c.id.asc()).limit(query.limit)
        else:
            raise TypeError(f"unsupported query: {query!r}")
        try:
            async with self._session_local() as db:
                result = await db.execute(stmt)
                return [
                    AccountRow(
                        id=row.id,
                        username=row.username,
                        email=row.email or "",
                        password=row.password or "",
                        xp=row.xp or 0,
                    )
                    for row in result
                ]
        except SQLAlchemyError as e:
            logger.error("[storage] 查询失败: %s", e)
            raise StorageError(str(e)) from e

    async def _execute(self, command: AccountCommand) -> None:
        if isinstance(command, InsertAccount):
            await self._insert(command)
        elif isinstance(command, UpdateXp):
            stmt = update(self._users).where(self._users.c.id == command.account_id).values(xp=command.xp)
            await self._commit(stmt)
        else:
            raise TypeError(f"unsupported command: {command!r}")

    async def _insert(self, command: InsertAccount) -> None:
        values = {
            "username": command.username,
            "email": command.email,
            "password": command.password,
            "xp": 0,
        }
        if self.has_legacy_password_hash:
            values["password_hash"] = command.password
        try:
            await self._commit(insert(self._users).values(**values))
        except IntegrityError as e:
            field = await self._conflicting_field(command)
            if field is None:
                logger.error("[storage] 插入失败（非唯一约束）: %s", e)
                raise StorageError(str(e.orig)) from e
            raise ConstraintViolationError(field) from e

    async def _conflicting_field(self, command: InsertAccount) -> str | None:
        """唯一约束冲突后重新查询，确定冲突的是 username 还是 email。"""
        if await self._query(FindByUsername(command.username)):
            return "username"
        if await self._query(FindByEmail(command.email)):
            return "email"
        return None

    async def _commit(self, stmt) -> None:
        async with self._session_local() as db:
            try:
                await db.execute(stmt)
                await db.commit()
            except IntegrityError:
                await db.rollback()
                raise
            except SQLAlchemyError as e:
                await db.rollback()
                logger.error("[storage] 写入失败: %s", e)
                raise StorageError(str(e)) from e

    async def _close(self) -> None:
        if self._engine is not None:
            await self._engine.dispose()
            self._engine = None
