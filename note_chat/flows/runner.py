"""High-level entry point for the chat pipeline graph."""

from __future__ import annotations

from typing import Optional
from uuid import uuid4

from note_chat.config.settings import settings
from note_chat.domain.models import ChatContext
from note_chat.domain.vault import ChatCollaborators, DocumentSurface
from note_chat.flows.graph import ChatDeps, build_graph
from note_chat.flows.state import ChatState
from note_chat.providers.gateway import ProviderGateway


async def run_pipeline(
    surface: DocumentSurface,
    collaborators: ChatCollaborators,
    *,
    cfg=None,
    write_mode: bool = False,
    overrides: Optional[ChatContext] = None,
    gateway: Optional[ProviderGateway] = None,
) -> ChatState:
    """Run parse -> enrich -> dispatch -> directives -> publish once.

    Args:
        surface: 当前编辑的笔记缓冲区
        collaborators: 笔记库、链接解析、frontmatter、提示
        cfg: 全局配置，默认使用 settings
        write_mode: True 时直接追加回复，不加分隔线与 ai:: 标记
        overrides: 调用方显式覆盖（优先于 frontmatter）
        gateway: 自定义 ProviderGateway（测试时注入）
    """

    cfg = cfg if cfg is not None else settings
    deps = ChatDeps(
        surface=surface,
        collaborators=collaborators,
        gateway=gateway or ProviderGateway(cfg),
    )
    state: ChatState = {
        "trace_id": f"tr-{uuid4().hex}",
        "text": await surface.current_text(),
        "write_mode": write_mode,
        "overrides": overrides,
    }
    return await build_graph(deps).ainvoke(state)
