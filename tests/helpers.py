"""测试辅助：直接操作存储、伪造大模型接口。"""
import json

import httpx
from openai import AsyncOpenAI

from trivia.storage.commands import InsertAccount, TopByXp, UpdateXp


def sqlite_url(tmp_path, name="trivia.db"):
    return f"sqlite+aiosqlite:///{tmp_path / name}"


async def insert_raw(store, username, xp=0, password="x" * 64):
    """绕过账号服务直接插入一行并设置 XP，返回新行 id。"""
    await store.execute(InsertAccount(username=username, email=f"{username}@example.com", password=password))
    rows = [r for r in await store.query(TopByXp(10_000)) if r.username == username]
    if xp:
        await store.execute(UpdateXp(account_id=rows[0].id, xp=xp))
    return rows[0].id


async def count_rows(store):
    return len(await store.query(TopByXp(10_000)))


def chat_completion(content):
    return {
        "id": "chatcmpl-test",
        "object": "chat.completion",
        "created": 0,
        "model": "test-model",
        "choices": [
            {
                "index": 0,
                "message": {"role": "assistant", "content": content},
                "finish_reason": "stop",
            }
        ],
    }


class FakeLLM:
    """用 httpx.MockTransport 模拟 chat completions 接口，记录收到的请求体。"""

    def __init__(self, content=None, status_code=200, body=None):
        self.content = content
        self.status_code = status_code
        self.body = body
        self.requests = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(json.loads(request.content))
        if self.status_code != 200:
            return httpx.Response(self.status_code, json=self.body or {})
        return httpx.Response(200, json=chat_completion(self.content))

    def client(self) -> AsyncOpenAI:
        return AsyncOpenAI(
            api_key="test-key",
            base_url="http://llm.test/v1",
            max_retries=0,
            http_client=httpx.AsyncClient(transport=httpx.MockTransport(self.handler)),
        )
