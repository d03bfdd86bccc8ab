"""API 依赖项：存储、大模型客户端、配置与当前账号。均来自 app.state，由 main 的 lifespan 创建。"""
from fastapi import Depends, HTTPException, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from openai import AsyncOpenAI

from trivia.core.config import Settings
from trivia.core.security import decode_access_token
from trivia.schemas.auth import AccountOut
from trivia.services.account_service import get_account_by_id
from trivia.storage.base import AccountStore

_bearer_scheme = HTTPBearer(auto_error=False)


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_store(request: Request) -> AccountStore:
    return request.app.state.store


def get_llm_client(request: Request) -> AsyncOpenAI:
    return request.app.state.llm_client


async def get_current_account(
    credentials: HTTPAuthorizationCredentials | None = Depends(_bearer_scheme),
    store: AccountStore = Depends(get_store),
    config: Settings = Depends(get_settings),
) -> AccountOut:
    """从 Authorization: Bearer <token> 中解析账号。"""
    if credentials is None or credentials.scheme.lower() != "bearer":
        raise HTTPException(status_code=401, detail="Not authenticated")
    subject = decode_access_token(credentials.credentials, config=config)
    if not subject or not subject.isdigit():
        raise HTTPException(status_code=401, detail="Not authenticated")
    account = await get_account_by_id(store, int(subject))
    if not account:
        raise HTTPException(status_code=401, detail="Not authenticated")
    return account
