"""回复中的 <create-note> 指令处理。"""

from note_chat.directives.processor import DirectiveProcessor, find_directives, target_path

__all__ = ["DirectiveProcessor", "find_directives", "target_path"]
