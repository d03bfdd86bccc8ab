"""账号表的读写命令。两个存储后端实现同一组命令，调用方不拼 SQL 字符串。"""
from dataclasses import dataclass

LEADERBOARD_LIMIT = 100


@dataclass(frozen=True)
class FindByUsername:
    username: str


@dataclass(frozen=True)
class FindByEmail:
    email: str


@dataclass(frozen=True)
class FindById:
    account_id: int


@dataclass(frozen=True)
class TopByXp:
    limit: int = LEADERBOARD_LIMIT


@dataclass(frozen=True)
class InsertAccount:
    username: str
    email: str
    password: str


@dataclass(frozen=True)
class UpdateXp:
    account_id: int
    xp: int


AccountQuery = FindByUsername | FindByEmail | FindById | TopByXp
AccountCommand = InsertAccount | UpdateXp


@dataclass
class AccountRow:
    id: int
    username: str
    email: str
    password: str
    xp: int = 0
