"""Directive Processor。

模型回复中可以嵌入：

    <create-note name="Note Title">Content to go in the note</create-note>

处理规则：
- 先收集全部匹配，再依次执行，替换偏移始终基于原始回复文本。
- 目标路径为当前笔记所在文件夹下的 "<name>.md"（根目录时只有文件名）。
- 笔记已存在则追加 "\\n" + 正文，否则以正文新建；重复运行会重复追加，不去重。
- 成功后该指令替换为 [[name]]；失败时保留原始指令文本，记录错误并继续处理后续指令。
"""

import re
from typing import List, Optional

from note_chat.domain.exceptions import BusinessError, DirectiveMutationError
from note_chat.domain.models import Directive, Document
from note_chat.domain.vault import DocumentStore, Notifier
from note_chat.infrastructure.logging.logger import logger
from note_chat.infrastructure.notifier import safe_notify

DIRECTIVE_RE = re.compile(r'<create-note name="([^"]+)">([\s\S]*?)</create-note>')


def find_directives(text: str) -> List[Directive]:
    return [
        Directive(name=m.group(1), body=m.group(2), raw=m.group(0), start=m.start(), end=m.end())
        for m in DIRECTIVE_RE.finditer(text)
    ]


def target_path(parent: Optional[str], name: str) -> str:
    file_name = f"{name}.md"
    if not parent or parent == "/":
        return file_name
    return f"{parent.rstrip('/')}/{file_name}"


class DirectiveProcessor:
    """执行回复中的指令并把它们改写为链接。

    failures 保存最近一次 process() 中失败的指令，便于调用方检查。
    """

    def __init__(self, store: DocumentStore, notifier: Optional[Notifier] = None):
        self._store = store
        self._notifier = notifier
        self.failures: List[DirectiveMutationError] = []

    async def process(self, text: str, current: Document) -> str:
        self.failures = []
        pieces: List[str] = []
        cursor = 0
        for directive in find_directives(text):
            pieces.append(text[cursor:directive.start])
            cursor = directive.end
            if await self._apply(directive, current):
                pieces.append(f"[[{directive.name}]]")
            else:
                pieces.append(directive.raw)
        pieces.append(text[cursor:])
        return "".join(pieces)

    async def _apply(self, directive: Directive, current: Document) -> bool:
        path = target_path(current.parent, directive.name)
        file_name = f"{directive.name}.md"
        try:
            existing = await self._store.get(path)
            if existing is not None:
                await self._store.append(existing, f"\n{directive.body}")
                self._notify(f"Appended to {file_name}")
            else:
                await self._store.create(path, directive.body)
                self._notify(f"Created {file_name}")
        except BusinessError as exc:
            error = DirectiveMutationError(directive.name, path, exc)
            self.failures.append(error)
            logger.error(
                "Directive mutation failed",
                extra={"extra": {"note": directive.name, "path": path, "error": exc.message}},
            )
            self._notify(error.message)
            return False
        logger.info("Directive applied", extra={"extra": {"note": directive.name, "path": path}})
        return True

    def _notify(self, message: str) -> None:
        safe_notify(self._notifier, message)
