"""出题与作答相关请求/响应模型。"""
from enum import Enum

from pydantic import BaseModel, Field


class QuizType(str, Enum):
    MCQ = "MCQ"
    TRUE_FALSE = "True/False"
    PROGRAMMING = "Programming"
    RIDDLE = "Riddle"


class Difficulty(str, Enum):
    EASY = "Easy"
    MEDIUM = "Medium"
    HARD = "Hard"
    VERY_HARD = "Very Hard"


# 需要选项的题型
CHOICE_TYPES = frozenset({QuizType.MCQ, QuizType.TRUE_FALSE})


class QuizQuestion(BaseModel):
    question: str
    type: QuizType
    options: list[str] | None = Field(None, description="仅 MCQ / True/False 有选项")
    answer: str


class GenerateQuestionRequest(BaseModel):
    topic: str = Field(default="", description="主题；Programming 时为编程语言，Riddle 忽略")
    quiz_type: str = Field(default="MCQ", alias="quizType")
    difficulty: str = Field(default="Medium")
    asked_questions: list[str] = Field(default_factory=list, alias="askedQuestions", description="已出过的题目文本")

    model_config = {"populate_by_name": True}


class SubmitAnswerRequest(BaseModel):
    user_answer: str = Field(..., alias="userAnswer")
    correct_answer: str = Field(..., alias="correctAnswer")

    model_config = {"populate_by_name": True}


class SubmitResult(BaseModel):
    correct: bool
    xpEarned: int
    level: int
    newXp: int
