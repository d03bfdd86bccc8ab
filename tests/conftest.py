import pytest

from helpers import sqlite_url
from trivia.storage.json_store import FileKeyValueStore, JsonAccountStore
from trivia.storage.sql_store import SqlAccountStore


@pytest.fixture(params=["sql", "json"])
async def store(request, tmp_path):
    """已初始化的存储，两个后端各跑一遍。"""
    if request.param == "sql":
        s = SqlAccountStore(sqlite_url(tmp_path))
    else:
        s = JsonAccountStore(FileKeyValueStore(tmp_path / "kv"))
    await s.init()
    yield s
    await s.close()
