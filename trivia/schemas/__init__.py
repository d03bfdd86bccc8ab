"""API 请求/响应 Pydantic 模型。按模块组织，路由从本包或子模块导入。"""
from trivia.schemas.auth import (
    AccountOut,
    AuthResponse,
    LoginRequest,
    SignupRequest,
)
from trivia.schemas.health import HealthResponse
from trivia.schemas.leaderboard import LeaderboardEntry, LeaderboardResponse, LevelResponse
from trivia.schemas.quiz import (
    CHOICE_TYPES,
    Difficulty,
    GenerateQuestionRequest,
    QuizQuestion,
    QuizType,
    SubmitAnswerRequest,
    SubmitResult,
)
from trivia.schemas.user import UserProfileResponse

__all__ = [
    "AccountOut",
    "AuthResponse",
    "LoginRequest",
    "SignupRequest",
    "HealthResponse",
    "LeaderboardEntry",
    "LeaderboardResponse",
    "LevelResponse",
    "CHOICE_TYPES",
    "Difficulty",
    "GenerateQuestionRequest",
    "QuizQuestion",
    "QuizType",
    "SubmitAnswerRequest",
    "SubmitResult",
    "UserProfileResponse",
]
