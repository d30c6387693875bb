"""Anthropic Provider 适配器（Messages API）。

- URL: {base_url}/messages
- 认证: x-api-key: <api_key>，并携带 anthropic-version 请求头。
- system 指令作为顶层 system 字段发送，从不内联进 messages。

回复取 content[0].text。
"""

from typing import Any, Dict

from note_chat.config.settings import settings
from note_chat.domain.exceptions import ConfigurationError, RequestError
from note_chat.domain.models import ChatRequest, ChatResult
from note_chat.providers.base import post_json
from note_chat.providers.registry import ANTHROPIC_CONFIG

ANTHROPIC_VERSION = "2023-06-01"
MAX_TOKENS = 1024


class AnthropicClient:
    """Anthropic Provider 客户端实现。"""

    name = "anthropic"

    def __init__(self, cfg=settings):
        self._settings = cfg

    async def chat(self, req: ChatRequest) -> ChatResult:
        api_key = ANTHROPIC_CONFIG.api_key(self._settings)
        if not api_key:
            raise ConfigurationError(code="MISSING_API_KEY", message="Anthropic API Key not set.")
        payload = self._build_payload(req)
        data = await post_json(
            self.name,
            f"{ANTHROPIC_CONFIG.resolve_base_url(self._settings)}/messages",
            payload,
            headers={
                "Content-Type": "application/json",
                "x-api-key": api_key,
                "anthropic-version": getattr(self._settings, "anthropic_version", None) or ANTHROPIC_VERSION,
            },
            timeout=getattr(self._settings, "http_timeout", None),
        )
        return self._parse_response(data, req)

    def _build_payload(self, req: ChatRequest) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "model": req.model,
            "max_tokens": getattr(self._settings, "anthropic_max_tokens", None) or MAX_TOKENS,
            "messages": [{"role": t.role, "content": t.content} for t in req.messages],
        }
        if req.system:
            payload["system"] = req.system
        return payload

    def _parse_response(self, data: Dict[str, Any], req: ChatRequest) -> ChatResult:
        try:
            content = data["content"][0]["text"]
        except (KeyError, IndexError, TypeError):
            raise RequestError(self.name, 200, str(data), code="MALFORMED_RESPONSE")
        return ChatResult(provider=self.name, model=req.model, content=content or "", raw=data)
