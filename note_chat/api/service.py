"""对外 API 服务模块。

提供简化的函数接口供宿主（编辑器插件、命令行脚本等）调用：
- run_chat: "Chat with AI" / "Write with AI" 命令。
- create_project: "New Project" 命令。
"""

from datetime import date
from typing import Optional

from note_chat.domain.exceptions import BusinessError
from note_chat.domain.models import ChatContext, Document
from note_chat.domain.vault import ChatCollaborators, DocumentStore, DocumentSurface, Notifier
from note_chat.flows.runner import run_pipeline
from note_chat.infrastructure.logging.logger import logger
from note_chat.infrastructure.notifier import safe_notify
from note_chat.prompts import load_prompt
from note_chat.providers.gateway import ProviderGateway


async def run_chat(
    surface: DocumentSurface,
    collaborators: ChatCollaborators,
    *,
    cfg=None,
    write_mode: bool = False,
    overrides: Optional[ChatContext] = None,
    gateway: Optional[ProviderGateway] = None,
) -> Optional[str]:
    """运行一次完整对话并把回复追加到笔记末尾。

    Args:
        surface: 当前编辑的笔记缓冲区
        collaborators: 笔记库、链接解析、frontmatter、提示
        cfg: 全局配置（可选，默认 settings）
        write_mode: 是否为 "Write with AI" 模式
        overrides: 调用方显式指定的 provider/model/system
        gateway: 自定义 ProviderGateway（可选）

    Returns:
        追加到笔记中的文本；失败时返回 None，错误已通过 Notifier 提示用户。
    """
    try:
        state = await run_pipeline(
            surface,
            collaborators,
            cfg=cfg,
            write_mode=write_mode,
            overrides=overrides,
            gateway=gateway,
        )
    except BusinessError as e:
        document = surface.document
        logger.error(f"Chat failed: {e.message}", extra={"extra": {
            "code": e.code,
            "path": document.path if document else None,
            "error": str(e),
        }})
        if e.code == "EMPTY_INPUT":
            safe_notify(collaborators.notifier, e.message)
        else:
            safe_notify(collaborators.notifier, f"Error: {e.message}")
        return None
    return state.get("output")


def render_project_template(project_name: str, today: Optional[date] = None) -> str:
    content = load_prompt("project_template")
    content = content.replace("[[Project Chat]]", f"[[Project {project_name}/Project {project_name} - Chat]]", 1)
    return content.replace("{{date}}", (today or date.today()).isoformat(), 1)


async def create_project(
    store: DocumentStore,
    project_name: str,
    notifier: Optional[Notifier] = None,
    today: Optional[date] = None,
) -> Optional[Document]:
    """创建 "Project <name>" 文件夹及同名项目笔记。

    Returns:
        新建的项目笔记；失败时返回 None 并提示用户。
    """
    folder_path = f"Project {project_name}"
    file_path = f"{folder_path}/Project {project_name}.md"
    try:
        if not await store.exists(folder_path):
            await store.create_folder(folder_path)
        document = await store.create(file_path, render_project_template(project_name, today))
    except BusinessError as e:
        logger.error(f"Failed to create project: {e.message}", extra={"extra": {
            "project": project_name,
            "error": str(e),
        }})
        safe_notify(notifier, f"Error creating project: {e.message}")
        return None
    safe_notify(notifier, f"Created project: {project_name}")
    return document
