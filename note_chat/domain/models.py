"""统一的对话与结果数据模型。

本模块定义了流水线各阶段之间共享的标准数据结构：

- Turn: 一条带角色的对话内容（user/assistant/system）。
- ChatContext: 单次调用的 provider/model/system 覆盖项。
- ChatRequest: 发给底层 Provider 的完整请求（system 指令单独存放）。
- ChatResult: 从 Provider 解析后的统一响应结果（纯文本）。
- Directive / CrossReference: 回复中的指令与笔记中的链接。

所有 Provider 适配器都只依赖这些模型，
并负责在各自的 API JSON 和这些模型之间做转换。
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Literal, Optional


# 对话角色（与 OpenAI / Anthropic 的 role 字段对应，Gemini 在适配器中重命名）
Role = Literal["system", "user", "assistant"]


@dataclass
class Turn:
    """一条对话内容。顺序即对话顺序，只有链接展开会原地改写 content。"""

    role: Role
    content: str


Conversation = List[Turn]


@dataclass
class ChatContext:
    """单次调用的可选覆盖项。

    解析顺序：调用方显式覆盖 > 笔记 frontmatter > 全局配置。
    system 以 "+++" 开头时表示追加到默认 system prompt 之后而非替换。
    """

    provider: Optional[str] = None
    model: Optional[str] = None
    system: Optional[str] = None


@dataclass
class ResolvedContext:
    """解析完成后的有效 provider/model/system。"""

    provider: str
    model: str
    system: Optional[str] = None


@dataclass
class ChatRequest:
    """一次完整的聊天请求。

    system 不计入 messages，由各适配器决定内联（OpenAI）还是作为独立字段（Anthropic/Gemini）。
    """

    provider: str
    model: str  # 厂商实际模型名，如 "gpt-5-mini"
    messages: List[Turn]
    system: Optional[str] = None


@dataclass
class ChatResult:
    """一次对话调用的最终结果。

    - content: 归一化后的回复文本。
    - raw: 原始响应 JSON，用于调试或日志记录。
    """

    provider: str
    model: str
    content: str
    raw: Optional[Dict[str, Any]] = None


@dataclass
class Directive:
    """回复中的一条 <create-note name="X">BODY</create-note> 指令。

    start/end 是在原始回复文本中的偏移。
    """

    name: str
    body: str
    raw: str
    start: int
    end: int


@dataclass
class CrossReference:
    """笔记中的一个链接（[[Name|Alias]] 或 [Label](Target)）。"""

    link_path: str
    raw: str


@dataclass
class Document:
    """笔记库中的一个文件。

    - path: 相对笔记库根目录的 POSIX 路径，如 "Project X/Notes.md"。
    - parent: 所在文件夹路径，根目录为 "/"。
    """

    path: str
    basename: str
    extension: str
    parent: str = "/"

    @property
    def is_text(self) -> bool:
        return self.extension.lower() in TEXT_EXTENSIONS


TEXT_EXTENSIONS = ("md", "txt")
