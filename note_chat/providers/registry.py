"""Provider 配置登记表。

每个 Provider 对应一组配置字段名（API Key、默认模型、基础 URL），
具体取值从 Settings 中读取。上层只关心 Provider 名称，
"用哪个字段"由这里集中维护，新增厂商只需在此登记。"""

from dataclasses import dataclass
from typing import Any, Mapping, Optional


@dataclass
class ProviderConfig:
    """某个 Provider 的整体配置。"""

    name: str
    base_url: str
    api_key_field: str
    model_field: str
    base_url_field: str

    def api_key(self, cfg: Any) -> Optional[str]:
        return getattr(cfg, self.api_key_field, None) or None

    def default_model(self, cfg: Any) -> str:
        return getattr(cfg, self.model_field, None) or ""

    def resolve_base_url(self, cfg: Any) -> str:
        return (getattr(cfg, self.base_url_field, None) or self.base_url).rstrip("/")


OPENAI_CONFIG = ProviderConfig(
    name="openai",
    base_url="https://api.openai.com/v1",
    api_key_field="openai_api_key",
    model_field="openai_model",
    base_url_field="openai_base_url",
)

ANTHROPIC_CONFIG = ProviderConfig(
    name="anthropic",
    base_url="https://api.anthropic.com/v1",
    api_key_field="anthropic_api_key",
    model_field="anthropic_model",
    base_url_field="anthropic_base_url",
)

GEMINI_CONFIG = ProviderConfig(
    name="gemini",
    base_url="https://generativelanguage.googleapis.com/v1beta",
    api_key_field="gemini_api_key",
    model_field="gemini_model",
    base_url_field="gemini_base_url",
)


PROVIDER_REGISTRY: Mapping[str, ProviderConfig] = {
    "openai": OPENAI_CONFIG,
    "anthropic": ANTHROPIC_CONFIG,
    "gemini": GEMINI_CONFIG,
}


def get_provider_config(name: str) -> ProviderConfig:
    """根据名称获取 ProviderConfig，名称不区分大小写。"""

    key = (name or "").strip().lower()
    for k, cfg in PROVIDER_REGISTRY.items():
        if k.lower() == key:
            return cfg
    raise KeyError(f"Unknown provider: {name!r}")
