"""笔记文本 -> 对话 Turn 列表。"""

from note_chat.parsing.transcript import parse_transcript

__all__ = ["parse_transcript"]
