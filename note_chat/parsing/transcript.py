"""把一篇笔记的纯文本切分为有序的对话 Turn。

笔记格式约定：
- 各轮对话之间用三个及以上下划线组成的分隔线隔开，下划线之间允许夹杂空白
  （编辑器自动格式化常会插入空格，如 "_ _ _"）。
- 含有 "ai::" 标记的段落是助手回复，形如 "ai::<模型名>\\n<正文>"，其余为用户内容。

解析永不抛异常：格式不规范的输入按尽力而为的方式降级。
"""

import re
from typing import List

from note_chat.domain.models import Turn

SEPARATOR_RE = re.compile(r"_(?:\s*_){2,}")
ASSISTANT_MARKER = "ai::"
# 单行助手段落的降级规则：去掉标记、模型名（可含 "-" 与 "."）及其后的第一个分隔字符
_SINGLE_LINE_LABEL_RE = re.compile(r"^ai::[\w.-]*[^\w.-]")


def parse_transcript(text: str) -> List[Turn]:
    """将笔记文本解析为 Turn 列表，空段落不会产生 Turn。"""

    turns: List[Turn] = []
    for part in SEPARATOR_RE.split(text or ""):
        part = part.strip()
        if not part:
            continue
        if ASSISTANT_MARKER in part:
            turns.append(Turn(role="assistant", content=_assistant_content(part)))
        else:
            turns.append(Turn(role="user", content=part))
    return turns


def _assistant_content(segment: str) -> str:
    newline_index = segment.find("\n")
    if newline_index > 0:
        return segment[newline_index + 1:].strip()
    return _SINGLE_LINE_LABEL_RE.sub("", segment, count=1).strip()
