"""
Question generation and answer submission tests.
The LLM endpoint is replaced by an httpx mock transport.
"""
import json

import pytest

from helpers import FakeLLM, insert_raw
from trivia.core.errors import (
    AccountNotFoundError,
    LLMAuthError,
    MalformedResponseError,
    RateLimitedError,
    RemoteError,
    ValidationError,
)
from trivia.schemas.quiz import Difficulty, QuizType
from trivia.services.llm_service import SYSTEM_PROMPT, extract_json
from trivia.services.quiz_service import build_prompt, generate_question, is_correct_answer, submit_answer
from trivia.storage.commands import FindById


class TestExtractJson:
    def test_json_surrounded_by_prose(self):
        text = 'Sure! Here is your question:\n{"question": "2+2?", "answer": "4"}\nGood luck.'
        assert extract_json(text) == {"question": "2+2?", "answer": "4"}

    def test_nested_braces_inside_object(self):
        text = '{"question": "What does {} create in Python?", "answer": "a dict"}'
        assert extract_json(text)["answer"] == "a dict"

    def test_greedy_match_swallows_trailing_braces(self):
        # 从第一个 { 取到最后一个 }，后面多出的花括号会让解析失败
        text = '{"question": "q", "answer": "a"} and {also this}'
        with pytest.raises(MalformedResponseError):
            extract_json(text)

    @pytest.mark.parametrize("text", ["", "no json here", "[1, 2, 3]", "{broken"])
    def test_no_object(self, text):
        with pytest.raises(MalformedResponseError):
            extract_json(text)


class TestPrompts:
    def test_programming_prompt_uses_language(self):
        prompt = build_prompt("Python", QuizType.PROGRAMMING, Difficulty.HARD, ["Q1", "Q2"])
        assert "Programming Language: Python" in prompt
        assert "Difficulty: Hard" in prompt
        assert "Do not repeat: Q1, Q2" in prompt

    def test_riddle_prompt_ignores_topic(self):
        prompt = build_prompt("History", QuizType.RIDDLE, Difficulty.EASY, [])
        assert "riddle" in prompt
        assert "History" not in prompt

    def test_choice_prompt_asks_for_options(self):
        prompt = build_prompt("Geography", QuizType.TRUE_FALSE, Difficulty.VERY_HARD, [])
        assert "Keys: question, options, answer, type" in prompt
        assert "Type: True/False" in prompt
        assert "Difficulty: Very Hard" in prompt


class TestGenerateQuestion:
    async def test_true_false_without_options_gets_defaults(self):
        llm = FakeLLM(content='{"question": "The sky is green.", "type": "True/False", "answer": false}')

        question = await generate_question(llm.client(), "Science", "True/False", "Easy", [])
        assert question.options == ["True", "False"]
        assert question.answer == "False"
        assert question.type is QuizType.TRUE_FALSE

    async def test_mcq_without_options_gets_placeholders(self):
        llm = FakeLLM(content='{"question": "Capital of France?", "answer": "Paris", "options": []}')

        question = await generate_question(llm.client(), "Geography", "MCQ", "Medium")
        assert question.options == ["Option A", "Option B", "Option C", "Option D"]
        assert question.type is QuizType.MCQ

    async def test_mcq_keeps_upstream_options(self):
        content = json.dumps(
            {"question": "Capital of France?", "type": "MCQ", "options": ["Paris", "Lyon", "Nice", "Lille"], "answer": "Paris"}
        )
        llm = FakeLLM(content=content)

        question = await generate_question(llm.client(), "Geography", "MCQ", "Medium")
        assert question.options == ["Paris", "Lyon", "Nice", "Lille"]

    async def test_programming_question_has_no_options(self):
        content = '```json\n{"question": "What does len([1,2]) return?", "type": "Programming", "options": ["1", "2"], "answer": "2"}\n```'
        llm = FakeLLM(content=content)

        question = await generate_question(llm.client(), "Python", "Programming", "Easy")
        assert question.options is None
        assert question.answer == "2"

    async def test_unknown_upstream_type_falls_back_to_requested(self):
        llm = FakeLLM(content='{"question": "What has keys but no locks?", "type": "riddle", "answer": "A piano"}')

        question = await generate_question(llm.client(), "", "Riddle", "Easy")
        assert question.type is QuizType.RIDDLE

    async def test_request_payload(self):
        llm = FakeLLM(content='{"question": "q", "answer": "a"}')

        await generate_question(llm.client(), "Python", "Programming", "Hard", ["old question"])
        payload = llm.requests[0]
        assert payload["max_tokens"] == 300
        assert payload["messages"][0] == {"role": "system", "content": SYSTEM_PROMPT}
        assert payload["messages"][1]["role"] == "user"
        assert "Do not repeat: old question" in payload["messages"][1]["content"]

    @pytest.mark.parametrize(
        "content",
        [
            '{"question": "", "answer": "a"}',
            '{"question": "q", "answer": "   "}',
            '{"question": "q"}',
            "I cannot help with that.",
        ],
    )
    async def test_malformed_reply(self, content):
        llm = FakeLLM(content=content)
        with pytest.raises(MalformedResponseError):
            await generate_question(llm.client(), "History", "MCQ", "Easy")

    async def test_401_is_auth_error(self):
        llm = FakeLLM(status_code=401, body={"error": {"message": "No auth credentials found", "code": 401}})
        with pytest.raises(LLMAuthError):
            await generate_question(llm.client(), "History", "MCQ", "Easy")

    async def test_429_is_rate_limited_without_retry(self):
        llm = FakeLLM(status_code=429, body={"error": {"message": "Too many requests", "code": 429}})
        with pytest.raises(RateLimitedError):
            await generate_question(llm.client(), "History", "MCQ", "Easy")
        assert len(llm.requests) == 1

    async def test_other_status_carries_upstream_message(self):
        llm = FakeLLM(status_code=500, body={"error": {"message": "Provider returned error", "code": 500}})
        with pytest.raises(RemoteError) as exc_info:
            await generate_question(llm.client(), "History", "MCQ", "Easy")
        assert exc_info.value.message == "Provider returned error"

    async def test_other_status_without_message(self):
        llm = FakeLLM(status_code=503, body={})
        with pytest.raises(RemoteError) as exc_info:
            await generate_question(llm.client(), "History", "MCQ", "Easy")
        assert "503" in exc_info.value.message

    @pytest.mark.parametrize(
        "topic,quiz_type,difficulty",
        [
            ("History", "Essay", "Easy"),
            ("History", "MCQ", "Impossible"),
            ("", "MCQ", "Easy"),
            ("  ", "Programming", "Easy"),
        ],
    )
    async def test_invalid_input_makes_no_request(self, topic, quiz_type, difficulty):
        llm = FakeLLM(content='{"question": "q", "answer": "a"}')
        with pytest.raises(ValidationError):
            await generate_question(llm.client(), topic, quiz_type, difficulty)
        assert llm.requests == []


class TestSubmitAnswer:
    @pytest.mark.parametrize(
        "user_answer,correct_answer,expected",
        [("Paris", "paris", True), ("  PARIS ", "Paris", True), ("Lyon", "Paris", False), ("Par", "Paris", False)],
    )
    def test_answer_comparison(self, user_answer, correct_answer, expected):
        assert is_correct_answer(user_answer, correct_answer) is expected

    async def test_correct_answer_adds_xp(self, store):
        account_id = await insert_raw(store, "alice", xp=95)

        result = await submit_answer(store, account_id, "Paris", "paris")
        assert result.correct is True
        assert result.xpEarned == 10
        assert result.newXp == 105
        assert result.level == 1

        rows = await store.query(FindById(account_id))
        assert rows[0].xp == 105

    async def test_wrong_answer_keeps_xp(self, store):
        account_id = await insert_raw(store, "alice", xp=40)

        result = await submit_answer(store, account_id, "Lyon", "Paris")
        assert result.correct is False
        assert result.xpEarned == 0
        assert result.newXp == 40
        assert result.level == 0

    async def test_unknown_account(self, store):
        with pytest.raises(AccountNotFoundError):
            await submit_answer(store, 12345, "Paris", "Paris")
