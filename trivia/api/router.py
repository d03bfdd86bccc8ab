from fastapi import APIRouter

from trivia.api.routes.auth import router as auth_router
from trivia.api.routes.health import router as health_router
from trivia.api.routes.leaderboard import router as leaderboard_router
from trivia.api.routes.quiz import router as quiz_router
from trivia.api.routes.user import router as user_router

api_router = APIRouter()
api_router.include_router(auth_router, prefix="/auth", tags=["auth"])
api_router.include_router(health_router, tags=["health"])
api_router.include_router(quiz_router, prefix="/quiz", tags=["quiz"])
api_router.include_router(leaderboard_router, tags=["leaderboard"])
api_router.include_router(user_router, prefix="/user", tags=["user"])
