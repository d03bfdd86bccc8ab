"""注册与登录接口：POST /auth/signup、POST /auth/login、GET /auth/me。"""
from fastapi import APIRouter, Depends

from trivia.api.deps import get_current_account, get_settings, get_store
from trivia.core.config import Settings
from trivia.core.security import create_access_token
from trivia.schemas.auth import AccountOut, AuthResponse, LoginRequest, SignupRequest
from trivia.services import account_service
from trivia.storage.base import AccountStore

router = APIRouter()


def _auth_response(account: AccountOut, config: Settings) -> AuthResponse:
    token = create_access_token(account.id, config=config)
    return AuthResponse(token=token, user=account)


@router.post("/signup", response_model=AuthResponse, status_code=201)
async def signup(
    body: SignupRequest,
    store: AccountStore = Depends(get_store),
    config: Settings = Depends(get_settings),
):
    """注册：用户名+邮箱+密码，成功即登录，返回 token 与 user。"""
    await account_service.create_account(store, body.username, body.email, body.password)
    account = await account_service.login(store, body.username, body.password)
    return _auth_response(account, config)


@router.post("/login", response_model=AuthResponse)
async def login(
    body: LoginRequest,
    store: AccountStore = Depends(get_store),
    config: Settings = Depends(get_settings),
):
    """登录：用户名+密码，成功返回 token 与 user。"""
    account = await account_service.login(store, body.username, body.password)
    return _auth_response(account, config)


@router.get("/me", response_model=AccountOut)
async def me(account: AccountOut = Depends(get_current_account)):
    """恢复会话：返回 token 对应账号的最新信息（含 XP）。"""
    return account
