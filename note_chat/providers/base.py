"""Provider 抽象接口。

上层流水线不直接依赖具体厂商的 HTTP 协议，而是依赖此协议：

- 每个厂商实现一个 ProviderClient（OpenAIClient / AnthropicClient / GeminiClient）。
- 负责：将 ChatRequest 转成具体 API 请求，并把响应 JSON 解析为 ChatResult。

这样可以在不改流水线代码的前提下接入更多厂商。
"""

from typing import Any, Dict, Optional, Protocol

import httpx

from note_chat.domain.exceptions import NetworkError, RequestError
from note_chat.domain.models import ChatRequest, ChatResult


class ProviderClient(Protocol):
    """LLM Provider 客户端协议。

    实现者需要提供：
    - name: Provider 名称，用于日志/错误信息。
    - chat(req): 执行一次非流式对话调用，返回统一的 ChatResult。
    """

    name: str

    async def chat(self, req: ChatRequest) -> ChatResult:
        ...


async def post_json(
    provider: str,
    url: str,
    payload: Dict[str, Any],
    headers: Dict[str, str],
    timeout: Optional[float] = None,
    params: Optional[Dict[str, str]] = None,
) -> Dict[str, Any]:
    """发送一次 JSON POST，非 2xx 抛 RequestError，网络错误抛 NetworkError。"""

    try:
        async with httpx.AsyncClient(timeout=timeout, trust_env=False) as client:
            resp = await client.post(url, json=payload, headers=headers, params=params)
    except httpx.RequestError as e:
        raise NetworkError(code="NETWORK_ERROR", message=f"{provider} request failed: {e}", provider=provider)
    if not 200 <= resp.status_code < 300:
        raise RequestError(provider, resp.status_code, resp.text)
    try:
        data = resp.json()
    except ValueError:
        raise RequestError(provider, resp.status_code, resp.text, code="MALFORMED_RESPONSE")
    if not isinstance(data, dict):
        raise RequestError(provider, resp.status_code, resp.text, code="MALFORMED_RESPONSE")
    return data
