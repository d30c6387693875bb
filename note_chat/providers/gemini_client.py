"""Google Gemini Provider 适配器（generateContent）。

- URL: {base_url}/models/{model}:generateContent?key=<api_key>
- 认证: API Key 放在 URL 查询参数中，不使用请求头。
- 每个 Turn 映射为 {"role": "model"|"user", "parts": [{"text": ...}]}，
  assistant 改名为 model；system 指令作为顶层 systemInstruction 字段。

响应中没有 candidates 时不视为错误，返回固定的提示文本；结构不符合预期时
抛出 MALFORMED_RESPONSE。
"""

from typing import Any, Dict

from note_chat.config.settings import settings
from note_chat.domain.exceptions import ConfigurationError, RequestError
from note_chat.domain.models import ChatRequest, ChatResult
from note_chat.providers.base import post_json
from note_chat.providers.registry import GEMINI_CONFIG

NO_RESPONSE_TEXT = "(No response text found)"


class GeminiClient:
    """Gemini Provider 客户端实现。"""

    name = "gemini"

    def __init__(self, cfg=settings):
        self._settings = cfg

    async def chat(self, req: ChatRequest) -> ChatResult:
        api_key = GEMINI_CONFIG.api_key(self._settings)
        if not api_key:
            raise ConfigurationError(code="MISSING_API_KEY", message="Gemini API Key not set.")
        payload = self._build_payload(req)
        data = await post_json(
            self.name,
            f"{GEMINI_CONFIG.resolve_base_url(self._settings)}/models/{req.model}:generateContent",
            payload,
            headers={"Content-Type": "application/json"},
            timeout=getattr(self._settings, "http_timeout", None),
            params={"key": api_key},
        )
        return ChatResult(provider=self.name, model=req.model, content=self._extract_text(data), raw=data)

    def _build_payload(self, req: ChatRequest) -> Dict[str, Any]:
        contents = [
            {
                "role": "model" if t.role == "assistant" else "user",
                "parts": [{"text": t.content}],
            }
            for t in req.messages
        ]
        payload: Dict[str, Any] = {"contents": contents}
        if req.system:
            payload["systemInstruction"] = {"parts": [{"text": req.system}]}
        return payload

    def _extract_text(self, data: Dict[str, Any]) -> str:
        # candidates[0].content.parts[0].text；缺失或为空时返回提示文本，结构不对视为异常响应
        try:
            candidates = data.get("candidates") or []
            if not candidates:
                return NO_RESPONSE_TEXT
            parts = (candidates[0].get("content") or {}).get("parts") or []
            if not parts:
                return NO_RESPONSE_TEXT
            text = parts[0].get("text")
        except (AttributeError, KeyError, TypeError):
            raise RequestError(self.name, 200, str(data), code="MALFORMED_RESPONSE")
        if text is not None and not isinstance(text, str):
            raise RequestError(self.name, 200, str(data), code="MALFORMED_RESPONSE")
        return text or ""
