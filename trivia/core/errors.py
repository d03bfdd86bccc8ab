"""业务异常。每个异常带面向用户的 message 与对应的 HTTP 状态码，由 main 中的异常处理器统一转为响应。"""


class TriviaError(Exception):
    status_code = 400
    default_message = "Request failed"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(TriviaError):
    default_message = "Invalid input"


class DuplicateUsernameError(TriviaError):
    default_message = "Username already exists"


class DuplicateEmailError(TriviaError):
    default_message = "Email already exists"


class InvalidCredentialsError(TriviaError):
    status_code = 401
    # 不区分「用户不存在」与「密码错误」，避免泄露账号是否存在
    default_message = "Incorrect username or password"


class AccountNotFoundError(TriviaError):
    status_code = 404
    default_message = "User not found"


class StorageError(TriviaError):
    status_code = 503
    default_message = "Storage error"


class StoreNotInitializedError(StorageError):
    default_message = "Database not initialized"


class ConstraintViolationError(TriviaError):
    """唯一约束冲突，field 为冲突的列名（username / email）。"""

    def __init__(self, field: str, message: str | None = None):
        self.field = field
        super().__init__(message or f"UNIQUE constraint failed: {field}")


class QuestionGenerationError(TriviaError):
    status_code = 502
    default_message = "Failed to generate question. Please try again."


class LLMAuthError(QuestionGenerationError):
    default_message = "API authentication failed. Please check your API key."


class RateLimitedError(QuestionGenerationError):
    status_code = 429
    default_message = "API rate limit exceeded. Please try again later."


class RemoteError(QuestionGenerationError):
    pass


class MalformedResponseError(QuestionGenerationError):
    default_message = "Invalid JSON from AI"
