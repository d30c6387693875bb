"""用户提示（Notifier）的默认实现与安全调用封装。"""

from typing import List, Optional

from note_chat.domain.vault import Notifier
from note_chat.infrastructure.logging.logger import logger


class LoggingNotifier:
    """把提示写入日志，并保留在内存中（无 UI 的环境下使用）。"""

    def __init__(self, echo: bool = False):
        self.messages: List[str] = []
        self._echo = echo

    def notify(self, message: str) -> None:
        self.messages.append(message)
        logger.info("Notice", extra={"extra": {"notice": message}})
        if self._echo:
            print(message)


def safe_notify(notifier: Optional[Notifier], message: str) -> None:
    """发送提示；提示本身失败只记日志，不影响流水线。"""

    if notifier is None:
        return
    try:
        notifier.notify(message)
    except Exception as exc:  # noqa: BLE001 - 提示失败不能中断流水线
        logger.warning("Notifier failed", extra={"extra": {"notice": message, "error": str(exc)}})
