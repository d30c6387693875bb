"""OpenAI Provider 适配器（Chat Completions）。

- URL: {base_url}/chat/completions
- 认证: Authorization: Bearer <api_key>
- system 指令作为 role="system" 的消息插在 messages 最前面，不单独传字段。

请求体只包含 model/messages 两个字段；回复取 choices[0].message.content。
"""

from typing import Any, Dict, List

from note_chat.config.settings import settings
from note_chat.domain.exceptions import ConfigurationError, RequestError
from note_chat.domain.models import ChatRequest, ChatResult
from note_chat.providers.base import post_json
from note_chat.providers.registry import OPENAI_CONFIG


class OpenAIClient:
    """OpenAI Provider 客户端实现。"""

    name = "openai"

    def __init__(self, cfg=settings):
        self._settings = cfg

    async def chat(self, req: ChatRequest) -> ChatResult:
        api_key = OPENAI_CONFIG.api_key(self._settings)
        if not api_key:
            raise ConfigurationError(code="MISSING_API_KEY", message="OpenAI API Key not set.")
        payload = self._build_payload(req)
        data = await post_json(
            self.name,
            f"{OPENAI_CONFIG.resolve_base_url(self._settings)}/chat/completions",
            payload,
            headers={
                "Content-Type": "application/json",
                "Authorization": f"Bearer {api_key}",
            },
            timeout=getattr(self._settings, "http_timeout", None),
        )
        return self._parse_response(data, req)

    # ---- 辅助方法 ----

    def _build_payload(self, req: ChatRequest) -> Dict[str, Any]:
        messages: List[Dict[str, str]] = [{"role": t.role, "content": t.content} for t in req.messages]
        if req.system:
            messages.insert(0, {"role": "system", "content": req.system})
        return {"model": req.model, "messages": messages}

    def _parse_response(self, data: Dict[str, Any], req: ChatRequest) -> ChatResult:
        try:
            content = data["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError):
            raise RequestError(self.name, 200, str(data), code="MALFORMED_RESPONSE")
        return ChatResult(provider=self.name, model=req.model, content=content or "", raw=data)
