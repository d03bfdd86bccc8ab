"""账号数据访问层：把存储命令包装成按用途命名的函数。"""
from trivia.storage.base import AccountStore
from trivia.storage.commands import (
    LEADERBOARD_LIMIT,
    AccountRow,
    FindByEmail,
    FindById,
    FindByUsername,
    InsertAccount,
    TopByXp,
    UpdateXp,
)


async def get_account_by_username(store: AccountStore, username: str) -> AccountRow | None:
    """按用户名查询账号，不存在返回 None。"""
    rows = await store.query(FindByUsername(username))
    return rows[0] if rows else None


async def get_account_by_email(store: AccountStore, email: str) -> AccountRow | None:
    """按邮箱查询账号，不存在返回 None。"""
    rows = await store.query(FindByEmail(email))
    return rows[0] if rows else None


async def get_account_by_id(store: AccountStore, account_id: int) -> AccountRow | None:
    """按账号 ID 查询，不存在返回 None。"""
    rows = await store.query(FindById(account_id))
    return rows[0] if rows else None


async def create_account(store: AccountStore, *, username: str, email: str, password_hash: str) -> None:
    await store.execute(InsertAccount(username=username, email=email, password=password_hash))


async def set_account_xp(store: AccountStore, account_id: int, xp: int) -> None:
    await store.execute(UpdateXp(account_id=account_id, xp=xp))


async def list_top_accounts(store: AccountStore, limit: int = LEADERBOARD_LIMIT) -> list[AccountRow]:
    """按 XP 降序取前 limit 个账号（同分按 id 升序）。"""
    return await store.query(TopByXp(limit))
