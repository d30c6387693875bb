"""统一业务异常模型。

所有跨模块抛出的业务级错误都应该继承自 BusinessError，
便于在流水线入口统一捕获并通过 Notifier 给用户提示。
"""


class BusinessError(Exception):
    """业务异常基类。

    Attributes:
        code: 机器可读错误码（如 "STORE_READ_ERROR"）。
        message: 用户可读错误信息。
        http_status: 映射到 HTTP 时可用的状态码，默认 400。
        extra: 其他补充字段（例如 provider、path 等）。
    """

    def __init__(self, code: str, message: str, http_status: int = 400, **extra):
        self.code = code
        self.message = message
        self.http_status = http_status
        self.extra = extra
        super().__init__(message)


class EmptyInputError(BusinessError):
    """笔记为空（或解析后没有任何 Turn）时抛出，发生在任何网络调用之前。"""

    def __init__(self, message: str = "No text found to chat with."):
        super().__init__(code="EMPTY_INPUT", message=message)


class ConfigurationError(BusinessError):
    """Provider 未知或缺少 API Key。"""


class RequestError(BusinessError):
    """远端返回非 2xx 状态码，或成功响应的结构无法解析。

    status / body 保留原始状态码与响应文本，便于排查。
    """

    def __init__(self, provider: str, status: int, body: str, code: str = "API_ERROR"):
        self.provider = provider
        self.status = status
        self.body = body
        super().__init__(
            code=code,
            message=f"{provider} request failed: {status} {body}",
            http_status=status,
            provider=provider,
        )


class NetworkError(BusinessError):
    """网络层错误，例如连接失败、超时等。"""


class StoreError(BusinessError):
    """笔记库读写失败。"""


class DirectiveMutationError(BusinessError):
    """单条 <create-note> 指令的创建/追加失败，只影响该指令本身。"""

    def __init__(self, name: str, path: str, cause: Exception):
        self.name = name
        self.path = path
        self.cause = cause
        super().__init__(
            code="DIRECTIVE_MUTATION_ERROR",
            message=f"Failed to write note {name}",
            path=path,
            cause=str(cause),
        )
