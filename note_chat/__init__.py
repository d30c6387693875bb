"""Note Chat 顶层包。

把一篇纯文本笔记当作与 LLM 的多轮对话：解析对话、补充链接笔记上下文、
通过 OpenAI / Anthropic / Gemini 任一 Provider 发送，
再执行回复中的 <create-note> 指令并把回复追加回笔记。
"""

from note_chat.api.service import create_project, run_chat

__all__ = ["create_project", "run_chat"]
