"""基于本地目录的笔记库实现。

FsVault 同时实现 DocumentStore、LinkResolver 与 MetadataReader：
- 所有路径均为相对笔记库根目录的 POSIX 字符串，根目录记为 "/"。
- frontmatter 使用 PyYAML 解析。
- 链接解析顺序：相对当前笔记所在文件夹 -> 相对根目录 -> 按文件名全库查找
  （同文件夹优先，其次路径最短）。无扩展名时优先匹配 ".md"。
"""

import re
from pathlib import Path, PurePosixPath
from typing import Any, Dict, List, Optional
from urllib.parse import unquote

import yaml

from note_chat.domain.exceptions import StoreError
from note_chat.domain.models import Document

FRONTMATTER_RE = re.compile(r"\A---\r?\n(.*?)\r?\n---\s*(?:\r?\n|\Z)", re.DOTALL)


class FsVault:
    def __init__(self, root: str | Path):
        self._root = Path(root).expanduser().resolve()
        self._root.mkdir(parents=True, exist_ok=True)

    @property
    def root(self) -> Path:
        return self._root

    # ---- 路径工具 ----

    def document_for(self, path: str) -> Document:
        rel = PurePosixPath(path.strip("/"))
        parent = str(rel.parent)
        return Document(
            path=str(rel),
            basename=rel.stem,
            extension=rel.suffix.lstrip("."),
            parent="/" if parent in ("", ".") else parent,
        )

    def _abs(self, path: str) -> Optional[Path]:
        candidate = (self._root / path.strip("/")).resolve()
        try:
            candidate.relative_to(self._root)
        except ValueError:
            return None
        return candidate

    def _rel(self, path: Path) -> str:
        return path.relative_to(self._root).as_posix()

    def _require(self, path: str) -> Path:
        target = self._abs(path)
        if target is None:
            raise StoreError(code="PATH_OUTSIDE_VAULT", message=path)
        return target

    # ---- DocumentStore ----

    async def read(self, document: Document) -> str:
        try:
            return self._require(document.path).read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise StoreError(code="STORE_READ_ERROR", message=str(e), path=document.path)

    async def create(self, path: str, text: str) -> Document:
        target = self._require(path)
        if target.exists():
            raise StoreError(code="ALREADY_EXISTS", message=f"File already exists: {path}", path=path)
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(text, encoding="utf-8")
        except OSError as e:
            raise StoreError(code="STORE_WRITE_ERROR", message=str(e), path=path)
        return self.document_for(self._rel(target))

    async def append(self, document: Document, text: str) -> None:
        try:
            with self._require(document.path).open("a", encoding="utf-8") as f:
                f.write(text)
        except OSError as e:
            raise StoreError(code="STORE_WRITE_ERROR", message=str(e), path=document.path)

    async def exists(self, path: str) -> bool:
        target = self._abs(path)
        return target is not None and target.exists()

    async def get(self, path: str) -> Optional[Document]:
        target = self._abs(path)
        if target is None or not target.is_file():
            return None
        return self.document_for(self._rel(target))

    async def list_children(self, folder: str) -> List[Document]:
        base = self._root if folder in ("", "/") else self._abs(folder)
        if base is None or not base.is_dir():
            return []
        return [self.document_for(self._rel(p)) for p in sorted(base.iterdir()) if p.is_file()]

    async def create_folder(self, path: str) -> None:
        try:
            self._require(path).mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StoreError(code="STORE_WRITE_ERROR", message=str(e), path=path)

    # ---- LinkResolver ----

    async def resolve(self, link_path: str, source: Document) -> Optional[Document]:
        link = unquote(link_path).split("#", 1)[0].strip()
        if not link:
            return None
        names = [link] if PurePosixPath(link).suffix else [f"{link}.md", link]
        folder = "" if source.parent == "/" else source.parent

        for name in names:
            for base in (folder, ""):
                target = self._abs(f"{base}/{name}" if base else name)
                if target is not None and target.is_file():
                    return self.document_for(self._rel(target))

        for name in names:
            found = self._find_by_name(name, folder)
            if found is not None:
                return found
        return None

    def _find_by_name(self, name: str, prefer_folder: str) -> Optional[Document]:
        wanted = PurePosixPath(name)
        matches: List[str] = []
        for p in self._root.rglob("*"):
            if p.name != wanted.name:
                continue
            rel = self._rel(p)
            if not p.is_file() or any(part.startswith(".") for part in PurePosixPath(rel).parts):
                continue
            if rel == str(wanted) or rel.endswith(f"/{wanted}"):
                matches.append(rel)
        if not matches:
            return None
        matches.sort(key=lambda rel: (str(PurePosixPath(rel).parent) != (prefer_folder or "."), len(rel), rel))
        return self.document_for(matches[0])

    # ---- MetadataReader ----

    async def frontmatter_of(self, document: Document) -> Dict[str, Any]:
        try:
            text = await self.read(document)
        except StoreError:
            return {}
        m = FRONTMATTER_RE.match(text)
        if not m:
            return {}
        try:
            data = yaml.safe_load(m.group(1)) or {}
        except yaml.YAMLError:
            return {}
        return data if isinstance(data, dict) else {}


class FileSurface:
    """把笔记库中的一个文件当作可编辑缓冲区。"""

    def __init__(self, vault: FsVault, path: str):
        self._vault = vault
        self.document: Optional[Document] = vault.document_for(path)

    async def current_text(self) -> str:
        if not await self._vault.exists(self.document.path):
            return ""
        return await self._vault.read(self.document)

    async def append_at_end(self, text: str) -> None:
        await self._vault.append(self.document, text)
