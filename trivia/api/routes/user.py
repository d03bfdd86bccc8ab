"""个人中心：GET /user/profile。"""
from fastapi import APIRouter, Depends

from trivia.api.deps import get_current_account
from trivia.schemas.auth import AccountOut
from trivia.schemas.user import UserProfileResponse
from trivia.services.leaderboard_service import calculate_level

router = APIRouter()


@router.get("/profile", response_model=UserProfileResponse)
async def get_profile(account: AccountOut = Depends(get_current_account)):
    return UserProfileResponse(
        id=account.id,
        username=account.username,
        email=account.email,
        xp=account.xp,
        level=calculate_level(account.xp),
    )
