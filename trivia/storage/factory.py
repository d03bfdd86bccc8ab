from trivia.core.config import Settings
from trivia.core.errors import StorageError
from trivia.storage.base import AccountStore
from trivia.storage.json_store import FileKeyValueStore, JsonAccountStore
from trivia.storage.sql_store import SqlAccountStore


def create_store(settings: Settings) -> AccountStore:
    """按 STORAGE_BACKEND 构造存储后端；只构造，不初始化。"""
    backend = (settings.storage_backend or "sql").strip().lower()
    if backend == "sql":
        return SqlAccountStore(settings.database_url, echo=settings.db_echo)
    if backend == "json":
        return JsonAccountStore(FileKeyValueStore(settings.kv_dir))
    raise StorageError(f"Unknown storage backend: {settings.storage_backend}")
