"""排行榜与等级：GET /leaderboard、GET /level。"""
from fastapi import APIRouter, Depends, Query

from trivia.api.deps import get_store
from trivia.schemas.leaderboard import LeaderboardResponse, LevelResponse
from trivia.services.leaderboard_service import calculate_level, get_leaderboard
from trivia.storage.base import AccountStore

router = APIRouter()


@router.get("/leaderboard", response_model=LeaderboardResponse)
async def leaderboard(store: AccountStore = Depends(get_store)):
    """XP 前 100 名，名次从 1 开始连续。"""
    return LeaderboardResponse(items=await get_leaderboard(store))


@router.get("/level", response_model=LevelResponse)
async def level(xp: int = Query(..., ge=0, description="经验值")):
    return LevelResponse(xp=xp, level=calculate_level(xp))
