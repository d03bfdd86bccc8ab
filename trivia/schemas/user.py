"""个人中心相关响应模型。"""
from pydantic import BaseModel, Field


class UserProfileResponse(BaseModel):
    id: int = Field(..., description="账号 ID")
    username: str = Field(..., description="用户名")
    email: str = Field(..., description="邮箱")
    xp: int = Field(0, description="经验值")
    level: int = Field(0, description="等级，0-10")
