"""排行榜与等级相关响应模型。"""
from pydantic import BaseModel, Field


class LeaderboardEntry(BaseModel):
    rank: int = Field(..., description="名次，从 1 开始连续")
    username: str
    xp: int
    level: int


class LeaderboardResponse(BaseModel):
    items: list[LeaderboardEntry] = Field(default_factory=list)


class LevelResponse(BaseModel):
    xp: int
    level: int
