"""出题与作答：POST /quiz/generate、POST /quiz/submit。"""
import logging
import time

from fastapi import APIRouter, Depends, Response
from openai import AsyncOpenAI

from trivia.api.deps import get_current_account, get_llm_client, get_settings, get_store
from trivia.core.config import Settings
from trivia.schemas.auth import AccountOut
from trivia.schemas.quiz import GenerateQuestionRequest, QuizQuestion, SubmitAnswerRequest, SubmitResult
from trivia.services import quiz_service
from trivia.storage.base import AccountStore

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("/generate", response_model=QuizQuestion, response_model_exclude_none=True)
async def generate(
    body: GenerateQuestionRequest,
    response: Response,
    client: AsyncOpenAI = Depends(get_llm_client),
    config: Settings = Depends(get_settings),
):
    """
    生成一道题。会调用大模型，响应时间通常为数秒到数十秒，前端请适当放宽超时。
    每次调用都可能返回不同题目；前端把已出过的题目文本放进 askedQuestions 以尽量避免重复。
    """
    response.headers["X-Recommended-Client-Timeout"] = "60000"
    t0 = time.perf_counter()
    question = await quiz_service.generate_question(
        client,
        topic=body.topic,
        quiz_type=body.quiz_type,
        difficulty=body.difficulty,
        asked_questions=body.asked_questions,
        model=config.llm_model,
        max_tokens=config.llm_max_tokens,
    )
    logger.info("[generate] 出题耗时 %.2fs", time.perf_counter() - t0)
    return question


@router.post("/submit", response_model=SubmitResult)
async def submit(
    body: SubmitAnswerRequest,
    store: AccountStore = Depends(get_store),
    account: AccountOut = Depends(get_current_account),
):
    """提交当前账号的答案，答对加 XP，返回新 XP 与等级。"""
    return await quiz_service.submit_answer(store, account.id, body.user_answer, body.correct_answer)
