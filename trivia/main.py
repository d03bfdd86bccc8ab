import logging
import os
import time
from contextlib import asynccontextmanager
from pathlib import Path

# 在导入 config 前加载项目根目录 .env，与迁移脚本使用同一组环境变量
_root = Path(__file__).resolve().parent.parent
_env = _root / ".env"
if _env.is_file():
    with open(_env, "r", encoding="utf-8") as f:
        for line in f:
            line = line.strip()
            if line and "=" in line and not line.startswith("#"):
                k, _, v = line.partition("=")
                k, v = k.strip(), v.strip()
                if k and os.environ.get(k) is None:
                    os.environ[k] = v

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

from trivia.api.router import api_router
from trivia.core.config import Settings, settings
from trivia.core.errors import TriviaError
from trivia.core.storage import ensure_storage_dirs
from trivia.services.llm_service import build_llm_client
from trivia.storage.factory import create_store

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(message)s")
logger = logging.getLogger(__name__)


class RequestLogMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        start = time.perf_counter()
        response = await call_next(request)
        elapsed = (time.perf_counter() - start) * 1000
        addr = request.client.host if request.client else "-"
        logger.info(f'{addr} - "{request.method} {request.url.path}" {response.status_code} ({elapsed:.0f}ms)')
        return response


async def trivia_error_handler(request: Request, exc: TriviaError):
    if exc.status_code >= 500:
        logger.error("[error] %s %s -> %s: %s", request.method, request.url.path, type(exc).__name__, exc.message)
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


def create_app(config: Settings | None = None) -> FastAPI:
    config = config or settings

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        ensure_storage_dirs(config)
        store = create_store(config)
        llm_client = build_llm_client(config)
        app.state.settings = config
        app.state.store = store
        app.state.llm_client = llm_client
        # 初始化失败重试一次；仍失败则降级启动，之后的存储调用返回 StorageError
        await store.init_with_retry(config.storage_init_retry_delay)
        try:
            yield
        finally:
            await store.close()
            await llm_client.close()

    app = FastAPI(title="Trivia Quest Backend", lifespan=lifespan)
    app.add_middleware(RequestLogMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(TriviaError, trivia_error_handler)
    app.include_router(api_router, prefix=config.api_prefix)
    return app


app = create_app()
