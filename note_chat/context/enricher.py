"""Context Enricher。

给发送前的对话补充笔记库中的内容：

1. 项目上下文：当前笔记名以 "Project " 开头时，把同一文件夹下其它文本笔记整体注入。
2. 链接展开：用户 Turn 中的 [[Name]] / [[Name|Alias]] 与 [Label](Target)
   解析到笔记后，将其全文追加在 Turn 末尾。
3. 标题 Turn：在对话最前面插入 "Note Title: <笔记名>"。

这里的所有步骤都不抛业务异常：解析不到、读取失败的笔记直接跳过。
笔记读取按顺序逐个 await，保证追加顺序确定。
"""

import re
from typing import List

from note_chat.domain.exceptions import BusinessError
from note_chat.domain.models import CrossReference, Document, Turn
from note_chat.domain.vault import DocumentStore, LinkResolver
from note_chat.infrastructure.logging.logger import logger

PROJECT_PREFIX = "Project "

# [[Link]] 或 [[Link|Alias]]
WIKI_LINK_RE = re.compile(r"\[\[([^\]|]+)(?:\|[^\]]+)?\]\]")
# [Text](Path)
MD_LINK_RE = re.compile(r"\[([^\]]+)\]\(([^)]+)\)")


def wrap_note(name: str, content: str, *, padded: bool = False) -> str:
    """用 <existing-note> 包裹一篇笔记的内容。"""

    if padded:
        return f'\n<existing-note name="{name}">\n{content}\n</existing-note>\n'
    return f'\n<existing-note name="{name}">{content}\n</existing-note>\n'


def is_project_note(document: Document) -> bool:
    return document.basename.startswith(PROJECT_PREFIX)


async def project_context(document: Document, store: DocumentStore) -> str:
    """项目笔记的同级笔记上下文；非项目笔记返回空字符串。"""

    if not is_project_note(document):
        return ""

    context = ""
    for child in await store.list_children(document.parent):
        # 跳过当前笔记
        if child.basename == document.basename or child.path == document.path:
            continue
        if not child.is_text:
            continue
        try:
            content = await store.read(child)
        except BusinessError as exc:
            logger.warning(
                "Skipped unreadable sibling note",
                extra={"extra": {"path": child.path, "error": exc.message}},
            )
            continue
        context += wrap_note(child.basename, content, padded=True)
    return context


def find_cross_references(content: str) -> List[CrossReference]:
    """先收集全部 wiki 链接，再收集全部 markdown 链接（均基于原始内容）。"""

    refs = [CrossReference(link_path=m.group(1), raw=m.group(0)) for m in WIKI_LINK_RE.finditer(content)]
    refs.extend(CrossReference(link_path=m.group(2), raw=m.group(0)) for m in MD_LINK_RE.finditer(content))
    return refs


async def expand_links(
    content: str,
    source: Document,
    store: DocumentStore,
    resolver: LinkResolver,
) -> str:
    """把 content 中链接指向的文本笔记追加到末尾。"""

    modified = content
    for ref in find_cross_references(content):
        target = await resolver.resolve(ref.link_path, source)
        if target is None or not target.is_text:
            continue
        try:
            note_text = await store.read(target)
        except BusinessError as exc:
            logger.warning(
                "Skipped unreadable linked note",
                extra={"extra": {"link": ref.link_path, "path": target.path, "error": exc.message}},
            )
            continue
        modified += wrap_note(target.basename, note_text)
    return modified


async def build_conversation(turns: List[Turn], document: Document, store: DocumentStore) -> List[Turn]:
    """在对话前插入标题 Turn，项目笔记再在最前插入项目上下文 Turn。"""

    conversation = [Turn(role="user", content=f"Note Title: {document.basename}")]
    ctx = await project_context(document, store)
    if ctx:
        conversation.insert(0, Turn(role="user", content=f"Project Context:\n{ctx}"))
    conversation.extend(turns)
    return conversation


async def enrich_turns(
    turns: List[Turn],
    source: Document,
    store: DocumentStore,
    resolver: LinkResolver,
) -> List[Turn]:
    """按顺序展开每个用户 Turn 中的链接（原地改写 content）。"""

    for turn in turns:
        if turn.role == "user":
            turn.content = await expand_links(turn.content, source, store, resolver)
    return turns
