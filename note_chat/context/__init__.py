"""用户 Turn 的上下文补全：笔记标题、项目同级笔记、链接展开。"""

from note_chat.context.enricher import (
    PROJECT_PREFIX,
    build_conversation,
    enrich_turns,
    expand_links,
    find_cross_references,
    project_context,
)

__all__ = [
    "PROJECT_PREFIX",
    "build_conversation",
    "enrich_turns",
    "expand_links",
    "find_cross_references",
    "project_context",
]
