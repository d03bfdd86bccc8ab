"""认证相关请求/响应模型。"""
from pydantic import BaseModel, Field


class LoginRequest(BaseModel):
    username: str = Field(..., description="用户名")
    password: str = Field(..., description="密码")


class SignupRequest(BaseModel):
    username: str = Field(..., description="用户名（唯一，区分大小写）")
    email: str = Field(..., description="邮箱（唯一）")
    password: str = Field(..., description="密码")


class AccountOut(BaseModel):
    """账号公开信息，不含密码。"""
    id: int = Field(..., description="账号 ID")
    username: str = Field(..., description="用户名")
    email: str = Field(..., description="邮箱")
    xp: int = Field(0, description="经验值")


class AuthResponse(BaseModel):
    token: str = Field(..., description="JWT 令牌")
    user: AccountOut = Field(..., description="账号信息")
