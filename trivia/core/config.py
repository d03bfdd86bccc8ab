import os
from dataclasses import dataclass


@dataclass(frozen=True)
class Settings:
    api_prefix: str = os.getenv("API_PREFIX", "/api")
    secret_key: str = os.getenv("SECRET_KEY", "change-me-in-production")
    jwt_algorithm: str = os.getenv("JWT_ALGORITHM", "HS256")
    access_token_expire_minutes: int = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "10080"))  # 7 days
    environment: str = os.getenv("ENVIRONMENT", "development")
    # 存储后端：sql（SQLite/PostgreSQL）或 json（单 key 的 JSON 数组，无关系库环境使用）
    storage_backend: str = os.getenv("STORAGE_BACKEND", "sql")
    database_url: str = os.getenv("DATABASE_URL", "sqlite+aiosqlite:///data/trivia.db")
    db_echo: bool = os.getenv("DB_ECHO", "false").lower() == "true"
    data_root: str = os.getenv("DATA_ROOT", "data")
    kv_dir: str = os.getenv("KV_DIR", "data/kv")
    # 启动时存储初始化失败后，延迟多少秒再重试一次
    storage_init_retry_delay: float = float(os.getenv("STORAGE_INIT_RETRY_DELAY", "1.0"))
    # 出题大模型（OpenAI 兼容接口，默认 OpenRouter）；Key 只从环境变量注入
    llm_api_key: str = os.getenv("LLM_API_KEY", "")
    llm_base_url: str = os.getenv("LLM_BASE_URL", "https://openrouter.ai/api/v1")
    llm_model: str = os.getenv("LLM_MODEL", "anthropic/claude-sonnet-4")
    llm_max_tokens: int = int(os.getenv("LLM_MAX_TOKENS", "300"))


settings = Settings()
