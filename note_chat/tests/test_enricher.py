import asyncio
import tempfile
from pathlib import Path

from note_chat.context.enricher import (
    build_conversation,
    enrich_turns,
    expand_links,
    find_cross_references,
    project_context,
)
from note_chat.domain.exceptions import StoreError
from note_chat.domain.models import Turn
from note_chat.infrastructure.storage.fs_vault import FsVault


def _vault(d, files):
    root = Path(d)
    for rel, text in files.items():
        p = root / rel
        p.parent.mkdir(parents=True, exist_ok=True)
        p.write_text(text, encoding="utf-8")
    return FsVault(root)


def test_find_cross_references_wiki_first_then_markdown():
    refs = find_cross_references("see [x](B.md) and [[A|alias]] then [[C]]")
    assert [r.link_path for r in refs] == ["A", "C", "B.md"]
    assert refs[0].raw == "[[A|alias]]"


def test_expand_wiki_link_appends_wrapped_note():
    with tempfile.TemporaryDirectory() as d:
        vault = _vault(d, {"Alpha.md": "Beta", "Chat.md": ""})
        source = vault.document_for("Chat.md")
        out = asyncio.run(expand_links("ask about [[Alpha]]", source, vault, vault))
        assert out.startswith("ask about [[Alpha]]")
        assert out.endswith('\n<existing-note name="Alpha">Beta\n</existing-note>\n')


def test_unresolved_link_leaves_content_unchanged():
    with tempfile.TemporaryDirectory() as d:
        vault = _vault(d, {"Chat.md": ""})
        source = vault.document_for("Chat.md")
        content = "where is [[Ghost]] and [site](https://example.com)"
        assert asyncio.run(expand_links(content, source, vault, vault)) == content


def test_non_text_target_is_skipped():
    with tempfile.TemporaryDirectory() as d:
        vault = _vault(d, {"Chat.md": "", "diagram.png": "binary"})
        source = vault.document_for("Chat.md")
        content = "look at [[diagram.png]]"
        assert asyncio.run(expand_links(content, source, vault, vault)) == content


def test_markdown_link_and_order_of_grammars():
    with tempfile.TemporaryDirectory() as d:
        vault = _vault(d, {"notes/One.md": "first", "notes/Two.txt": "second", "notes/Chat.md": ""})
        source = vault.document_for("notes/Chat.md")
        out = asyncio.run(expand_links("[t](Two.txt) then [[One]]", source, vault, vault))
        assert out.index('name="One"') < out.index('name="Two"')
        assert "first" in out and "second" in out


def test_project_context_reads_text_siblings_only():
    with tempfile.TemporaryDirectory() as d:
        vault = _vault(d, {
            "Project X/Project X.md": "main",
            "Project X/Ideas.md": "idea body",
            "Project X/Log.txt": "log body",
            "Project X/image.png": "png",
            "Elsewhere.md": "outside",
        })
        doc = vault.document_for("Project X/Project X.md")
        ctx = asyncio.run(project_context(doc, vault))
        assert '<existing-note name="Ideas">\nidea body\n</existing-note>' in ctx
        assert '<existing-note name="Log">\nlog body\n</existing-note>' in ctx
        assert "main" not in ctx
        assert "png" not in ctx
        assert "outside" not in ctx


def test_project_context_requires_prefix():
    with tempfile.TemporaryDirectory() as d:
        vault = _vault(d, {"Notes/Plain.md": "x", "Notes/Other.md": "y"})
        doc = vault.document_for("Notes/Plain.md")
        assert asyncio.run(project_context(doc, vault)) == ""


def test_project_context_skips_unreadable_sibling():
    with tempfile.TemporaryDirectory() as d:
        vault = _vault(d, {"Project Y.md": "", "Broken.md": "b", "Fine.md": "ok"})

        class FlakyStore:
            async def list_children(self, folder):
                return await vault.list_children(folder)

            async def read(self, document):
                if document.basename == "Broken":
                    raise StoreError(code="STORE_READ_ERROR", message="denied")
                return await vault.read(document)

        doc = vault.document_for("Project Y.md")
        ctx = asyncio.run(project_context(doc, FlakyStore()))
        assert 'name="Fine"' in ctx
        assert 'name="Broken"' not in ctx


def test_build_conversation_prepends_project_then_title():
    with tempfile.TemporaryDirectory() as d:
        vault = _vault(d, {"Project Z/Project Z.md": "", "Project Z/Spec.md": "spec"})
        doc = vault.document_for("Project Z/Project Z.md")
        turns = asyncio.run(build_conversation([Turn(role="user", content="hi")], doc, vault))
        assert turns[0].content.startswith("Project Context:\n")
        assert turns[1].content == "Note Title: Project Z"
        assert turns[2].content == "hi"


def test_enrich_turns_only_touches_user_turns():
    with tempfile.TemporaryDirectory() as d:
        vault = _vault(d, {"Alpha.md": "Beta", "Chat.md": ""})
        source = vault.document_for("Chat.md")
        turns = [
            Turn(role="user", content="[[Alpha]]"),
            Turn(role="assistant", content="[[Alpha]]"),
        ]
        asyncio.run(enrich_turns(turns, source, vault, vault))
        assert "Beta" in turns[0].content
        assert turns[1].content == "[[Alpha]]"


def test_non_utf8_sibling_is_skipped():
    with tempfile.TemporaryDirectory() as d:
        vault = _vault(d, {"Project X/Project X.md": "", "Project X/Fine.md": "ok"})
        (Path(d) / "Project X" / "Legacy.txt").write_bytes(b"caf\xe9")
        doc = vault.document_for("Project X/Project X.md")
        ctx = asyncio.run(project_context(doc, vault))
        assert 'name="Fine"' in ctx
        assert 'name="Legacy"' not in ctx


def test_non_utf8_linked_note_is_skipped():
    with tempfile.TemporaryDirectory() as d:
        vault = _vault(d, {"Chat.md": "", "Alpha.md": "Beta"})
        (Path(d) / "Legacy.md").write_bytes(b"caf\xe9")
        source = vault.document_for("Chat.md")
        out = asyncio.run(expand_links("see [[Legacy]] and [[Alpha]]", source, vault, vault))
        assert 'name="Legacy"' not in out
        assert out.endswith('\n<existing-note name="Alpha">Beta\n</existing-note>\n')
