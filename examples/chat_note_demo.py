"""Minimal demonstration: chat with one note of a local vault."""

import asyncio
import sys

from note_chat import run_chat
from note_chat.domain.vault import ChatCollaborators
from note_chat.infrastructure.notifier import LoggingNotifier
from note_chat.infrastructure.storage.fs_vault import FileSurface, FsVault

if __name__ == "__main__":
    vault_root, note_path = sys.argv[1], sys.argv[2]
    vault = FsVault(vault_root)
    notifier = LoggingNotifier(echo=True)
    collaborators = ChatCollaborators(store=vault, resolver=vault, metadata=vault, notifier=notifier)
    reply = asyncio.run(run_chat(FileSurface(vault, note_path), collaborators, write_mode="--write" in sys.argv))
    if reply:
        print(reply)
