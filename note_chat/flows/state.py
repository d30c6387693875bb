"""State definition for the chat pipeline graph."""

from __future__ import annotations

from typing import List, Optional, TypedDict

from note_chat.domain.models import ChatContext, Turn


class ChatState(TypedDict, total=False):
    """State shared across LangGraph nodes."""

    trace_id: str
    text: str
    write_mode: bool
    overrides: Optional[ChatContext]
    context: ChatContext
    turns: List[Turn]
    provider: str
    model: str
    reply: str
    output: str
