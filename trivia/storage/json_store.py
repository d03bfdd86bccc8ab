"""
无关系库环境下的后端：整张账号表序列化为一个 JSON 数组，保存在键值存储的一个 key 下。

每次 query / execute 都完整读出、在内存中过滤或修改、再整体写回；写回在返回前落盘。
"""
import asyncio
import json
import logging
import os
import re
import tempfile
from pathlib import Path

import aiofiles

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

logger = logging.getLogger(__name__)

STORAGE_KEY = "@trivia_users"


class FileKeyValueStore:
    """每个 key 对应 root 下的一个文件。"""

    def __init__(self, root: str | Path) -> None:
        self.root = Path(root)

    def path_for(self, key: str) -> Path:
        name = re.sub(r"[^A-Za-z0-9_.-]", "_", key).strip("_") or "default"
        return self.root / f"{name}.json"

    async def get_item(self, key: str) -> str | None:
        path = self.path_for(key)
        if not await asyncio.to_thread(path.is_file):
            return None
        async with aiofiles.open(path, "r", encoding="utf-8") as f:
            return await f.read()

    async def set_item(self, key: str, value: str) -> None:
        path = self.path_for(key)
        await asyncio.to_thread(path.parent.mkdir, parents=True, exist_ok=True)
        # 每次写入用独立的临时文件，并发写不会互相搬走对方的文件
        fd, tmp_name = await asyncio.to_thread(
            tempfile.mkstemp, prefix=f".{path.name}.", suffix=".tmp", dir=path.parent
        )
        os.close(fd)
        tmp_path = Path(tmp_name)
        try:
            async with aiofiles.open(tmp_path, "w", encoding="utf-8") as f:
                await f.write(value)
                await f.flush()
                await asyncio.to_thread(os.fsync, f.fileno())
            # 先写临时文件再整体替换，避免写到一半留下损坏的 JSON
            await asyncio.to_thread(os.replace, tmp_path, path)
        except Exception:
            await asyncio.to_thread(tmp_path.unlink, missing_ok=True)
            raise


def _row_from_dict(item: dict) -> AccountRow:
    return AccountRow(
        id=int(item["id"]),
        username=item["username"],
        email=item.get("email") or "",
        password=item.get("password") or "",
        xp=int(item.get("xp") or 0),
    )


class JsonAccountStore(AccountStore):
    backend_name = "json"

    def __init__(self, kv: FileKeyValueStore, *, key: str = STORAGE_KEY) -> None:
        super().__init__()
        self._kv = kv
        self._key = key
        # query / execute 都是整表读出再写回，同一进程内串行执行
        self._lock = asyncio.Lock()

    async def _initialize(self) -> None:
        try:
            data = await self._kv.get_item(self._key)
            if not data:
                await self._kv.set_item(self._key, json.dumps([]))
                logger.info("[storage] 已创建空账号列表 key=%s", self._key)
                return
        except OSError as e:
            raise StorageError(f"Database initialization failed: {e}") from e
        # 校验已有数据可解析
        self._decode(data)

    def _decode(self, data: str) -> list[dict]:
        try:
            users = json.loads(data)
        except json.JSONDecodeError as e:
            raise StorageError(f"Corrupt account data under {self._key}") from e
        if not isinstance(users, list):
            raise StorageError(f"Corrupt account data under {self._key}")
        return users

    async def _load(self) -> list[dict]:
        try:
            data = await self._kv.get_item(self._key)
        except OSError as e:
            logger.error("[storage] 读取失败: %s", e)
            raise StorageError(str(e)) from e
        return self._decode(data) if data else []

    async def _save(self, users: list[dict]) -> None:
        try:
            await self._kv.set_item(self._key, json.dumps(users, ensure_ascii=False))
        except OSError as e:
            logger.error("[storage] 写入失败: %s", e)
            raise StorageError(str(e)) from e

    async def _query(self, query: AccountQuery) -> list[AccountRow]:
        async with self._lock:
            users = await self._load()
        if isinstance(query, FindByUsername):
            matched = [u for u in users if u.get("username") == query.username]
        elif isinstance(query, FindByEmail):
            matched = [u for u in users if u.get("email") == query.email]
        elif isinstance(query, FindById):
            matched = [u for u in users if u.get("id") == query.account_id]
        elif isinstance(query, TopByXp):
            # sorted 是稳定排序，列表按 id 递增追加，同分时与关系库一样按 id 升序
            matched = sorted(users, key=lambda u: int(u.get("xp") or 0), reverse=True)[: query.limit]
        else:
            raise TypeError(f"unsupported query: {query!r}")
        return [_row_from_dict(u) for u in matched]

    async def _execute(self, command: AccountCommand) -> None:
        async with self._lock:
            users = await self._load()
            await self._apply(users, command)

    async def _apply(self, users: list[dict], command: AccountCommand) -> None:
        if isinstance(command, InsertAccount):
            if any(u.get("username") == command.username for u in users):
                raise ConstraintViolationError("username")
            if any(u.get("email") == command.email for u in users):
                raise ConstraintViolationError("email")
            new_id = max((int(u["id"]) for u in users), default=0) + 1
            users.append(
                {
                    "id": new_id,
                    "username": command.username,
                    "email": command.email,
                    "password": command.password,
                    "xp": 0,
                }
            )
            await self._save(users)
        elif isinstance(command, UpdateXp):
            for user in users:
                if user.get("id") == command.account_id:
                    user["xp"] = command.xp
                    await self._save(users)
                    break
        else:
            raise TypeError(f"unsupported command: {command!r}")
