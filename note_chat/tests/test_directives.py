import asyncio
import tempfile
from pathlib import Path

from note_chat.directives.processor import DirectiveProcessor, find_directives, target_path
from note_chat.domain.exceptions import StoreError
from note_chat.infrastructure.notifier import LoggingNotifier
from note_chat.infrastructure.storage.fs_vault import FsVault


def test_target_path_root_and_folder():
    assert target_path("/", "Idea") == "Idea.md"
    assert target_path("Project X", "Idea") == "Project X/Idea.md"


def test_find_directives_is_non_greedy():
    text = '<create-note name="A">one</create-note> mid <create-note name="B">two\nlines</create-note>'
    found = find_directives(text)
    assert [(d.name, d.body) for d in found] == [("A", "one"), ("B", "two\nlines")]


def test_creates_note_and_rewrites_link():
    with tempfile.TemporaryDirectory() as d:
        vault = FsVault(d)
        notifier = LoggingNotifier()
        current = vault.document_for("Chat.md")
        out = asyncio.run(
            DirectiveProcessor(vault, notifier).process('See <create-note name="Idea">Spark</create-note> now', current)
        )
        assert out == "See [[Idea]] now"
        assert (Path(d) / "Idea.md").read_text(encoding="utf-8") == "Spark"
        assert notifier.messages == ["Created Idea.md"]


def test_second_run_appends_again():
    with tempfile.TemporaryDirectory() as d:
        vault = FsVault(d)
        current = vault.document_for("Chat.md")
        processor = DirectiveProcessor(vault)
        text = 'See <create-note name="Idea">Spark</create-note> now'
        asyncio.run(processor.process(text, current))
        out = asyncio.run(processor.process(text, current))
        assert out == "See [[Idea]] now"
        assert (Path(d) / "Idea.md").read_text(encoding="utf-8") == "Spark\nSpark"


def test_directive_targets_current_folder():
    with tempfile.TemporaryDirectory() as d:
        vault = FsVault(d)
        (Path(d) / "Project X").mkdir()
        current = vault.document_for("Project X/Project X.md")
        asyncio.run(DirectiveProcessor(vault).process('<create-note name="Todo">- a</create-note>', current))
        assert (Path(d) / "Project X" / "Todo.md").read_text(encoding="utf-8") == "- a"


def test_failure_keeps_raw_span_and_continues():
    with tempfile.TemporaryDirectory() as d:
        vault = FsVault(d)

        class PartlyBrokenStore:
            async def get(self, path):
                return await vault.get(path)

            async def create(self, path, text):
                if path == "Bad.md":
                    raise StoreError(code="STORE_WRITE_ERROR", message="read-only")
                return await vault.create(path, text)

            async def append(self, document, text):
                await vault.append(document, text)

        notifier = LoggingNotifier()
        processor = DirectiveProcessor(PartlyBrokenStore(), notifier)
        current = vault.document_for("Chat.md")
        bad = '<create-note name="Bad">x</create-note>'
        out = asyncio.run(processor.process(f'{bad} and <create-note name="Good">y</create-note>', current))
        assert out == f"{bad} and [[Good]]"
        assert [f.name for f in processor.failures] == ["Bad"]
        assert "Failed to write note Bad" in notifier.messages
        assert (Path(d) / "Good.md").exists()


def test_text_without_directives_is_unchanged():
    with tempfile.TemporaryDirectory() as d:
        vault = FsVault(d)
        text = 'a <create-note name="x">unterminated'
        assert asyncio.run(DirectiveProcessor(vault).process(text, vault.document_for("Chat.md"))) == text
