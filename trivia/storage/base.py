"""存储后端基类：生命周期（NEW -> READY -> CLOSED）与去重的初始化。"""
import asyncio
import enum
import logging

from trivia.core.errors import StorageError, StoreNotInitializedError
from trivia.storage.commands import AccountCommand, AccountQuery, AccountRow

logger = logging.getLogger(__name__)


class StoreState(str, enum.Enum):
    NEW = "new"
    READY = "ready"
    CLOSED = "closed"


class AccountStore:
    """
    账号存储的统一接口。子类实现 _initialize / _query / _execute / _close。

    init() 可被并发多次调用：同一时刻只会跑一次底层初始化，其余调用方等待同一个任务；
    初始化失败后会丢弃该任务，之后的 init() 可以重新尝试。
    """

    backend_name = "base"

    def __init__(self) -> None:
        self._state = StoreState.NEW
        self._init_task: asyncio.Future | None = None

    @property
    def state(self) -> StoreState:
        return self._state

    @property
    def is_ready(self) -> bool:
        return self._state is StoreState.READY

    async def init(self) -> None:
        if self._state is StoreState.READY:
            return
        if self._state is StoreState.CLOSED:
            raise StorageError("Database is closed")
        if self._init_task is None:
            self._init_task = asyncio.ensure_future(self._run_init())
        task = self._init_task
        try:
            await asyncio.shield(task)
        except Exception:
            if self._init_task is task:
                self._init_task = None
            raise

    async def _run_init(self) -> None:
        try:
            await self._initialize()
        except StorageError:
            raise
        except Exception as e:
            raise StorageError(f"Database initialization failed: {e}") from e
        self._state = StoreState.READY
        logger.info("[storage] %s 初始化完成", self.backend_name)

    async def init_with_retry(self, delay: float) -> bool:
        """启动时使用：失败后延迟 delay 秒重试一次；仍失败则记录日志并以降级状态继续，返回是否就绪。"""
        try:
            await self.init()
            return True
        except StorageError as e:
            logger.warning("[storage] 初始化失败，%.1fs 后重试: %s", delay, e)
        await asyncio.sleep(delay)
        try:
            await self.init()
            logger.info("[storage] 重试初始化成功")
            return True
        except StorageError as e:
            logger.error("[storage] 重试初始化仍失败，以降级状态继续: %s", e)
            return False

    def _ensure_ready(self) -> None:
        if self._state is not StoreState.READY:
            raise StoreNotInitializedError(
                "Database is closed" if self._state is StoreState.CLOSED else None
            )

    async def query(self, query: AccountQuery) -> list[AccountRow]:
        self._ensure_ready()
        return await self._query(query)

    async def execute(self, command: AccountCommand) -> None:
        self._ensure_ready()
        await self._execute(command)

    async def close(self) -> None:
        if self._state is StoreState.CLOSED:
            return
        if self._init_task is not None and not self._init_task.done():
            self._init_task.cancel()
        self._state = StoreState.CLOSED
        await self._close()

    async def _initialize(self) -> None:
        raise NotImplementedError

    async def _query(self, query: AccountQuery) -> list[AccountRow]:
        raise NotImplementedError

    async def _execute(self, command: AccountCommand) -> None:
        raise NotImplementedError

    async def _close(self) -> None:
        return None
