"""Provider Gateway：统一的调度入口。

dispatch() 每次调用只解析一次 Provider，之后完全通过 ProviderClient 协议交互，
不在其它地方按 Provider 名称分支。

覆盖项的解析（resolve_context / merge_overrides）是纯函数，可单独测试：
调用方显式覆盖 > 笔记 frontmatter > 全局配置。
"""

from typing import Any, Callable, List, Mapping, Optional

from note_chat.config.settings import settings
from note_chat.domain.exceptions import ConfigurationError, EmptyInputError
from note_chat.domain.models import ChatContext, ChatRequest, ResolvedContext, Turn
from note_chat.infrastructure.logging.logger import logger
from note_chat.providers import create_provider
from note_chat.providers.base import ProviderClient
from note_chat.providers.registry import get_provider_config

APPEND_SENTINEL = "+++"
OVERRIDE_KEYS = ("provider", "model", "system")


def merge_overrides(call_site: Optional[ChatContext], frontmatter: Optional[Mapping[str, Any]]) -> ChatContext:
    """把调用方覆盖叠加在 frontmatter 之上；空值视为未设置。"""

    merged = ChatContext()
    for key in OVERRIDE_KEYS:
        value = (frontmatter or {}).get(key)
        if value:
            setattr(merged, key, str(value))
        explicit = getattr(call_site, key, None) if call_site is not None else None
        if explicit:
            setattr(merged, key, explicit)
    return merged


def resolve_system(override: Optional[str], default: Optional[str]) -> Optional[str]:
    """system 覆盖以 "+++" 开头时追加到默认指令之后，否则直接替换。"""

    default = default or ""
    if override and override.startswith(APPEND_SENTINEL):
        return f"{default}\n{override[len(APPEND_SENTINEL):].strip()}"
    return override or default or None


def resolve_context(context: Optional[ChatContext], cfg=None) -> ResolvedContext:
    """计算本次调用实际使用的 provider/model/system。"""

    cfg = cfg if cfg is not None else settings
    context = context or ChatContext()
    provider = (context.provider or getattr(cfg, "selected_provider", "openai")).strip().lower()
    try:
        provider_cfg = get_provider_config(provider)
    except KeyError:
        raise ConfigurationError(code="UNKNOWN_PROVIDER", message=f"Unknown provider selected: {provider!r}")
    return ResolvedContext(
        provider=provider_cfg.name,
        model=context.model or provider_cfg.default_model(cfg),
        system=resolve_system(context.system, getattr(cfg, "system_prompt", None)),
    )


class ProviderGateway:
    """把 Turn 列表发给当前生效的 Provider 并返回回复文本。"""

    def __init__(self, cfg=None, client_factory: Optional[Callable[..., ProviderClient]] = None):
        self._settings = cfg if cfg is not None else settings
        self._client_factory = client_factory or create_provider

    def resolve(self, context: Optional[ChatContext]) -> ResolvedContext:
        return resolve_context(context, self._settings)

    async def dispatch(
        self,
        turns: List[Turn],
        context: Optional[ChatContext] = None,
        *,
        instruction_suffix: Optional[str] = None,
    ) -> str:
        if not turns:
            raise EmptyInputError()
        resolved = self.resolve(context)
        system = resolved.system
        if instruction_suffix:
            system = f"{system}\n\n{instruction_suffix}" if system else instruction_suffix

        client = self._client_factory(resolved.provider, self._settings)
        req = ChatRequest(provider=resolved.provider, model=resolved.model, messages=list(turns), system=system)
        logger.info(
            "Dispatching chat request",
            extra={"extra": {"provider": resolved.provider, "model": resolved.model, "message_count": len(turns)}},
        )
        result = await client.chat(req)
        logger.info(
            "Received chat reply",
            extra={"extra": {"provider": result.provider, "model": result.model, "reply_chars": len(result.content)}},
        )
        return result.content
