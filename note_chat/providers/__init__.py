"""LLM Provider 集成层。

该包下的模块负责：
- 定义 Provider 抽象接口 (base)。
- 维护 Provider 与配置字段的对应关系 (registry)。
- 提供各厂商的具体实现 (openai_client、anthropic_client、gemini_client)。
- 统一的调度入口 (gateway)：解析覆盖项、选择适配器、返回纯文本回复。
"""

from typing import Callable, Dict, Optional

from note_chat.config.settings import settings
from note_chat.domain.exceptions import ConfigurationError
from note_chat.providers.anthropic_client import AnthropicClient
from note_chat.providers.base import ProviderClient
from note_chat.providers.gemini_client import GeminiClient
from note_chat.providers.openai_client import OpenAIClient

PROVIDER_CLIENTS: Dict[str, Callable[..., ProviderClient]] = {
    "openai": OpenAIClient,
    "anthropic": AnthropicClient,
    "gemini": GeminiClient,
}


def create_provider(name: Optional[str] = None, cfg=None) -> ProviderClient:
    """根据名称创建 Provider 实例，默认取配置中的 selected_provider。"""

    cfg = cfg if cfg is not None else settings
    provider_name = (name or getattr(cfg, "selected_provider", "openai")).strip().lower()
    factory = PROVIDER_CLIENTS.get(provider_name)
    if factory is None:
        raise ConfigurationError(code="UNKNOWN_PROVIDER", message=f"Unknown provider selected: {provider_name!r}")
    return factory(cfg)
