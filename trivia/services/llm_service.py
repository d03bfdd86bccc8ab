"""出题大模型调用：OpenAI 兼容的 chat completions 接口（默认 OpenRouter），返回回复中的 JSON 对象。"""
import json
import logging
import re
from typing import Any

import openai
from openai import AsyncOpenAI

from trivia.core.config import Settings, settings
from trivia.core.errors import LLMAuthError, MalformedResponseError, RateLimitedError, RemoteError

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = """You are a professional quiz master AI.
Rules:
- Respond ONLY in valid JSON
- Never repeat a question
- Match difficulty strictly"""

# 贪婪匹配：从第一个 { 到最后一个 }
_JSON_OBJECT_RE = re.compile(r"\{.*\}", re.DOTALL)


def build_llm_client(config: Settings | None = None, **kwargs: Any) -> AsyncOpenAI:
    """按配置构造客户端。不做自动重试，超时沿用 SDK 默认值。"""
    config = config or settings
    if not config.llm_api_key:
        logger.warning("[llm] 未配置 LLM_API_KEY，出题请求将返回鉴权失败")
    return AsyncOpenAI(
        api_key=config.llm_api_key,
        base_url=config.llm_base_url,
        max_retries=0,
        **kwargs,
    )


def extract_json(text: str) -> dict[str, Any]:
    match = _JSON_OBJECT_RE.search(text or "")
    if not match:
        raise MalformedResponseError()
    try:
        data = json.loads(match.group(0))
    except json.JSONDecodeError as e:
        raise MalformedResponseError() from e
    if not isinstance(data, dict):
        raise MalformedResponseError()
    return data


def _upstream_message(e: openai.APIStatusError) -> str | None:
    body = e.body
    if isinstance(body, dict):
        message = body.get("message")
        if message:
            return str(message)
    return None


async def call_llm(
    client: AsyncOpenAI,
    prompt: str,
    *,
    model: str | None = None,
    max_tokens: int | None = None,
) -> dict[str, Any]:
    """发送 system + user 两条消息，解析回复文本中的 JSON 对象。"""
    model = model or settings.llm_model
    max_tokens = max_tokens or settings.llm_max_tokens
    logger.info("[llm] 调用模型 %s max_tokens=%d", model, max_tokens)
    try:
        completion = await client.chat.completions.create(
            model=model,
            messages=[
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": prompt},
            ],
            max_tokens=max_tokens,
        )
    except openai.AuthenticationError as e:
        logger.error("[llm] 鉴权失败: %s", e)
        raise LLMAuthError() from e
    except openai.RateLimitError as e:
        logger.warning("[llm] 触发限流: %s", e)
        raise RateLimitedError() from e
    except openai.APIStatusError as e:
        logger.error("[llm] 请求失败 status=%s: %s", e.status_code, e)
        raise RemoteError(_upstream_message(e) or f"API request failed: {e.status_code}") from e
    except openai.APIConnectionError as e:
        logger.error("[llm] 网络错误: %s", e)
        raise RemoteError("Network error: Please check your internet connection") from e

    if not getattr(completion, "choices", None) or completion.choices[0].message is None:
        raise MalformedResponseError("Invalid API response format")
    content = completion.choices[0].message.content or ""
    if not content.strip():
        raise MalformedResponseError("Empty response from API")
    logger.debug("[llm] 模型回复: %s", content)
    return extract_json(content)
