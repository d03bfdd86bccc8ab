"""等级与排行榜，均由存储中的 XP 推导，不持有状态。"""
from trivia.repositories.account_repository import list_top_accounts
from trivia.schemas.leaderboard import LeaderboardEntry
from trivia.storage.base import AccountStore
from trivia.storage.commands import LEADERBOARD_LIMIT

XP_PER_LEVEL = 100
MAX_LEVEL = 10


def calculate_level(xp: int) -> int:
    return min(xp // XP_PER_LEVEL, MAX_LEVEL)


async def get_leaderboard(store: AccountStore, limit: int = LEADERBOARD_LIMIT) -> list[LeaderboardEntry]:
    rows = await list_top_accounts(store, limit)
    return [
        LeaderboardEntry(rank=index, username=row.username, xp=row.xp, level=calculate_level(row.xp))
        for index, row in enumerate(rows, 1)
    ]
