"""LangGraph construction and node implementations.

流水线为一条线性的异步节点链：

    parse -> context -> links -> dispatch -> directives -> publish

任一节点抛出的 BusinessError 会直接中断整个图，publish 之前不会写入笔记。
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict

from langgraph.graph import END, StateGraph
from langgraph.graph.state import CompiledStateGraph

from note_chat.context.enricher import build_conversation, enrich_turns
from note_chat.directives.processor import DirectiveProcessor
from note_chat.domain.exceptions import EmptyInputError
from note_chat.domain.vault import ChatCollaborators, DocumentSurface
from note_chat.flows.state import ChatState
from note_chat.infrastructure.logging.logger import logger
from note_chat.infrastructure.notifier import safe_notify
from note_chat.parsing.transcript import parse_transcript
from note_chat.prompts import load_prompt
from note_chat.providers.gateway import ProviderGateway, merge_overrides


@dataclass
class ChatDeps:
    surface: DocumentSurface
    collaborators: ChatCollaborators
    gateway: ProviderGateway


def _log(level: int, message: str, state: ChatState, **fields: Any) -> None:
    payload: Dict[str, Any] = {"trace_id": state.get("trace_id")}
    payload.update(fields)
    logger.log(level, message, extra={"extra": payload})


def format_reply(reply: str, model: str, write_mode: bool) -> str:
    if write_mode:
        return f"\n{reply}\n"
    return f"\n___\nai::{model}\n{reply}\n___\n"


def parse_node(state: ChatState) -> ChatState:
    text = state.get("text") or ""
    if not text.strip():
        raise EmptyInputError()
    turns = parse_transcript(text)
    if not turns:
        raise EmptyInputError()
    state["turns"] = turns
    _log(logging.INFO, "parse_node.end", state, turns=len(turns))
    return state


async def context_node(state: ChatState, deps: ChatDeps) -> ChatState:
    document = deps.surface.document
    frontmatter = None
    if document is not None:
        frontmatter = await deps.collaborators.metadata.frontmatter_of(document)
        state["turns"] = await build_conversation(state["turns"], document, deps.collaborators.store)
    state["context"] = merge_overrides(state.get("overrides"), frontmatter)
    _log(logging.INFO, "context_node.end", state, turns=len(state["turns"]))
    return state


async def links_node(state: ChatState, deps: ChatDeps) -> ChatState:
    document = deps.surface.document
    if document is not None:
        await enrich_turns(state["turns"], document, deps.collaborators.store, deps.collaborators.resolver)
    return state


async def dispatch_node(state: ChatState, deps: ChatDeps) -> ChatState:
    resolved = deps.gateway.resolve(state.get("context"))
    state["provider"] = resolved.provider
    state["model"] = resolved.model
    safe_notify(deps.collaborators.notifier, f"Asking {resolved.provider}...")
    _log(
        logging.DEBUG,
        "Sending messages to AI",
        state,
        messages=[{"role": t.role, "content": t.content} for t in state["turns"]],
    )
    state["reply"] = await deps.gateway.dispatch(
        state["turns"],
        state.get("context"),
        instruction_suffix=load_prompt("create_note_tool"),
    )
    _log(logging.INFO, "dispatch_node.end", state, provider=resolved.provider, model=resolved.model)
    return state


async def directives_node(state: ChatState, deps: ChatDeps) -> ChatState:
    document = deps.surface.document
    if document is not None:
        processor = DirectiveProcessor(deps.collaborators.store, deps.collaborators.notifier)
        state["reply"] = await processor.process(state["reply"], document)
        if processor.failures:
            _log(logging.WARNING, "directives_node.failures", state, failed=[f.name for f in processor.failures])
    return state


async def publish_node(state: ChatState, deps: ChatDeps) -> ChatState:
    output = format_reply(state["reply"], state["model"], bool(state.get("write_mode")))
    await deps.surface.append_at_end(output)
    state["output"] = output
    _log(logging.INFO, "publish_node.end", state, chars=len(output))
    return state


def build_graph(deps: ChatDeps) -> CompiledStateGraph:
    async def context(s: ChatState) -> ChatState:
        return await context_node(s, deps)

    async def links(s: ChatState) -> ChatState:
        return await links_node(s, deps)

    async def dispatch(s: ChatState) -> ChatState:
        return await dispatch_node(s, deps)

    async def directives(s: ChatState) -> ChatState:
        return await directives_node(s, deps)

    async def publish(s: ChatState) -> ChatState:
        return await publish_node(s, deps)

    graph = StateGraph(ChatState)
    graph.add_node("parse", parse_node)
    graph.add_node("context", context)
    graph.add_node("links", links)
    graph.add_node("dispatch", dispatch)
    graph.add_node("directives", directives)
    graph.add_node("publish", publish)
    graph.set_entry_point("parse")
    graph.add_edge("parse", "context")
    graph.add_edge("context", "links")
    graph.add_edge("links", "dispatch")
    graph.add_edge("dispatch", "directives")
    graph.add_edge("directives", "publish")
    graph.add_edge("publish", END)
    return graph.compile()
