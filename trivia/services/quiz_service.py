"""出题与作答：按题型拼 prompt 调用大模型，校验返回的题目；比对答案并累加 XP。"""
import logging
from typing import Any

from openai import AsyncOpenAI

from trivia.core.errors import AccountNotFoundError, MalformedResponseError, ValidationError
from trivia.schemas.quiz import CHOICE_TYPES, Difficulty, QuizQuestion, QuizType, SubmitResult
from trivia.services import account_service
from trivia.services.leaderboard_service import calculate_level
from trivia.services.llm_service import call_llm
from trivia.storage.base import AccountStore

logger = logging.getLogger(__name__)

XP_PER_CORRECT_ANSWER = 10

DEFAULT_OPTIONS = {
    QuizType.TRUE_FALSE: ["True", "False"],
    QuizType.MCQ: ["Option A", "Option B", "Option C", "Option D"],
}


def _parse_quiz_type(value: str | QuizType) -> QuizType:
    try:
        return QuizType(value)
    except ValueError:
        raise ValidationError(f"Unsupported quiz type: {value}") from None


def _parse_difficulty(value: str | Difficulty) -> Difficulty:
    try:
        return Difficulty(value)
    except ValueError:
        raise ValidationError(f"Unsupported difficulty: {value}") from None


def build_prompt(topic: str, quiz_type: QuizType, difficulty: Difficulty, asked_questions: list[str]) -> str:
    asked = ", ".join(asked_questions)
    if quiz_type is QuizType.PROGRAMMING:
        return f"""
Generate exactly one short programming quiz question.
Return JSON only.
Keys: question, type, answer
Programming Language: {topic}
Difficulty: {difficulty.value}
Do not repeat: {asked}
"""
    if quiz_type is QuizType.RIDDLE:
        return f"""
Generate exactly one fun riddle.
Return JSON only.
Keys: question, type, answer
Difficulty: {difficulty.value}
Do not repeat: {asked}
"""
    return f"""
Generate exactly one quiz question.
Return JSON only.
Keys: question, options, answer, type
Topic: {topic}
Difficulty: {difficulty.value}
Type: {quiz_type.value}
Do not repeat: {asked}
"""


def _as_text(value: Any) -> str:
    if value is None or isinstance(value, (dict, list)):
        return ""
    return str(value).strip()


def _to_question(data: dict[str, Any], quiz_type: QuizType) -> QuizQuestion:
    question = _as_text(data.get("question"))
    answer = _as_text(data.get("answer"))
    if not question:
        raise MalformedResponseError("Question is empty or missing")
    if not answer:
        raise MalformedResponseError("Answer is empty or missing")

    try:
        returned_type = QuizType(data.get("type"))
    except ValueError:
        returned_type = quiz_type

    options = None
    if quiz_type in CHOICE_TYPES:
        raw_options = data.get("options")
        if isinstance(raw_options, list) and raw_options:
            options = [str(opt) for opt in raw_options]
        else:
            options = list(DEFAULT_OPTIONS[quiz_type])
    return QuizQuestion(question=question, type=returned_type, options=options, answer=answer)


async def generate_question(
    client: AsyncOpenAI,
    topic: str,
    quiz_type: str | QuizType,
    difficulty: str | Difficulty,
    asked_questions: list[str] | None = None,
    *,
    model: str | None = None,
    max_tokens: int | None = None,
) -> QuizQuestion:
    """
    生成一道题。每次调用都可能返回不同的题目。

    asked_questions 原样拼进 prompt，要求模型不要重复；模型是否遵守不做保证。
    MCQ / True/False 缺选项时补默认选项，保证前端总有可渲染的选项。
    """
    quiz_type = _parse_quiz_type(quiz_type)
    difficulty = _parse_difficulty(difficulty)
    topic = (topic or "").strip()
    if quiz_type is not QuizType.RIDDLE and not topic:
        raise ValidationError("Topic is required")

    prompt = build_prompt(topic, quiz_type, difficulty, asked_questions or [])
    logger.info(
        "[quiz] 生成题目 topic=%s type=%s difficulty=%s 已出题数=%d",
        topic,
        quiz_type.value,
        difficulty.value,
        len(asked_questions or []),
    )
    data = await call_llm(client, prompt, model=model, max_tokens=max_tokens)
    return _to_question(data, quiz_type)


def is_correct_answer(user_answer: str, correct_answer: str) -> bool:
    return (user_answer or "").strip().lower() == (correct_answer or "").strip().lower()


async def submit_answer(
    store: AccountStore,
    account_id: int,
    user_answer: str,
    correct_answer: str,
) -> SubmitResult:
    """比对答案（忽略大小写与首尾空白），答对加 10 XP，返回新 XP 与等级。"""
    correct = is_correct_answer(user_answer, correct_answer)
    xp_earned = XP_PER_CORRECT_ANSWER if correct else 0

    account = await account_service.get_account_by_id(store, account_id)
    if account is None:
        raise AccountNotFoundError()

    new_xp = account.xp + xp_earned
    await account_service.update_xp(store, account_id, new_xp)
    logger.info("[quiz] 账号 %s 作答 correct=%s xp %d -> %d", account_id, correct, account.xp, new_xp)
    return SubmitResult(correct=correct, xpEarned=xp_earned, level=calculate_level(new_xp), newXp=new_xp)
