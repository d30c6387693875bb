"""提示词与模板加载工具。

按语言(locale) 从 prompts/<locale> 目录读取文本：
- system: 默认 system prompt。
- create_note_tool: 追加到 system 指令末尾的 <create-note> 使用说明。
- project_template: "New Project" 命令使用的项目笔记模板。
"""

from pathlib import Path


PROMPTS_DIR = Path(__file__).resolve().parent


def load_prompt(name: str, locale: str = "en") -> str:
    """根据名称和语言加载提示词文本（去掉文件末尾换行）。"""

    fname = PROMPTS_DIR / locale / f"{name}.md"
    return fname.read_text(encoding="utf-8").rstrip("\n")
