"""执行 users 表的版本化迁移（见 trivia/storage/migrations.py）。
与应用使用同一 DATABASE_URL（会从项目根目录 .env 加载环境变量）。"""
import asyncio
import os
import sys

# 项目根目录
_project_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
sys.path.insert(0, _project_root)
os.chdir(_project_root)

# 在导入 trivia 前加载 .env，保证与 uvicorn 启动时使用同一 DATABASE_URL
_env_file = os.path.join(_project_root, ".env")
if os.path.isfile(_env_file):
    with open(_env_file, "r", encoding="utf-8") as f:
        for line in f:
            line = line.strip()
            if line and "=" in line and not line.startswith("#"):
                k, _, v = line.partition("=")
                k, v = k.strip(), v.strip()
                if k and os.environ.get(k) is None:
                    os.environ[k] = v

from sqlalchemy import inspect

from trivia.core.config import settings
from trivia.core.db import create_engine_and_sessionmaker, ensure_sqlite_dir, to_async_url
from trivia.storage.migrations import USERS_TABLE, applied_versions, run_migrations


def _redact_url(url: str) -> str:
    """隐藏密码，便于日志核对连接的是哪个库。"""
    if "@" in url and "//" in url:
        pre, _, rest = url.partition("//")
        if "@" in rest:
            user_part, _, host_part = rest.rpartition("@")
            if ":" in user_part:
                user = user_part.split(":")[0]
                return f"{pre}//{user}:****@{host_part}"
    return url


def _users_columns(conn) -> list[str]:
    insp = inspect(conn)
    if not insp.has_table(USERS_TABLE):
        return []
    return [col["name"] for col in insp.get_columns(USERS_TABLE)]


async def main() -> None:
    url = to_async_url(settings.database_url)
    print(f"Using DB: {_redact_url(url)}")
    ensure_sqlite_dir(url)
    engine, _ = create_engine_and_sessionmaker(url)
    try:
        async with engine.begin() as conn:
            print(f"users 表当前列: {await conn.run_sync(_users_columns)}")
            print(f"已执行的迁移版本: {sorted(await conn.run_sync(applied_versions))}")
            applied = await conn.run_sync(run_migrations)
            if not applied:
                print("没有待执行的迁移。")
            else:
                print(f"本次执行迁移版本: {applied}")
            print(f"迁移后 users 表列: {await conn.run_sync(_users_columns)}")
    finally:
        await engine.dispose()
    print("Migrations completed.")


if __name__ == "__main__":
    asyncio.run(main())
