from fastapi import APIRouter, Depends

from trivia.api.deps import get_store
from trivia.schemas.health import HealthResponse
from trivia.storage.base import AccountStore

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health(store: AccountStore = Depends(get_store)):
    """存储未就绪（启动重试后仍失败）时返回 degraded。"""
    return HealthResponse(status="ok" if store.is_ready else "degraded", storage=store.state.value)
