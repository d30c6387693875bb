"""笔记库与编辑器的协作方协议。

流水线本身不直接操作文件系统或编辑器，而是依赖这些协议：
- DocumentStore: 读/建/追加笔记，列出文件夹内容。
- LinkResolver: 把链接文本解析为具体笔记。
- MetadataReader: 读取笔记 frontmatter（仅用于 provider/model/system 覆盖）。
- Notifier: 面向用户的状态提示，失败不影响流水线。
- DocumentSurface: 当前正在编辑的笔记缓冲区。

除 Notifier.notify 外均为异步接口。
"""

from dataclasses import dataclass
from typing import Any, List, Mapping, Optional, Protocol

from .models import Document


class DocumentStore(Protocol):
    async def read(self, document: Document) -> str:
        ...

    async def create(self, path: str, text: str) -> Document:
        ...

    async def append(self, document: Document, text: str) -> None:
        ...

    async def exists(self, path: str) -> bool:
        ...

    async def get(self, path: str) -> Optional[Document]:
        ...

    async def list_children(self, folder: str) -> List[Document]:
        ...

    async def create_folder(self, path: str) -> None:
        ...


class LinkResolver(Protocol):
    async def resolve(self, link_path: str, source: Document) -> Optional[Document]:
        ...


class MetadataReader(Protocol):
    async def frontmatter_of(self, document: Document) -> Mapping[str, Any]:
        ...


class Notifier(Protocol):
    def notify(self, message: str) -> None:
        ...


class DocumentSurface(Protocol):
    """可编辑的笔记缓冲区；document 为空表示缓冲区未关联到笔记库中的文件。"""

    document: Optional[Document]

    async def current_text(self) -> str:
        ...

    async def append_at_end(self, text: str) -> None:
        ...


@dataclass
class ChatCollaborators:
    """一次流水线运行所需的全部外部协作方。"""

    store: DocumentStore
    resolver: LinkResolver
    metadata: MetadataReader
    notifier: Notifier
