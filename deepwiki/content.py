"""Helpers for MCP tool results and their content blocks.

A tool result carries an ordered list of typed blocks. Only ``text`` blocks
hold something the UI can show; the proxy forwards every block untouched and
the UI narrows them down with :func:`text_blocks` / :func:`join_text`.
"""

from __future__ import annotations

from typing import Any, Iterable

from deepwiki.errors import MalformedResponseError, RemoteToolError


def _block_to_dict(block: Any) -> dict[str, Any]:
    if hasattr(block, "model_dump"):
        data = block.model_dump(mode="json", by_alias=True, exclude_none=True)
    elif isinstance(block, dict):
        data = dict(block)
    else:
        raise MalformedResponseError(f"Unexpected content block: {block!r}")
    if not data.get("type"):
        raise MalformedResponseError(f"Content block without type: {data!r}")
    return data


def content_blocks(result: Any, *, tool_name: str = "") -> list[dict[str, Any]]:
    """Turn a ``CallToolResult`` into plain JSON-ready block dicts.

    Raises:
        RemoteToolError: the remote side flagged the result as an error.
        MalformedResponseError: content is not a list of typed blocks.
    """
    content = getattr(result, "content", None)
    if content is None:
        return []
    if not isinstance(content, list):
        raise MalformedResponseError(f"Unexpected tool result content: {type(content).__name__}")

    blocks = [_block_to_dict(b) for b in content]
    if getattr(result, "isError", False):
        message = join_text(blocks).strip()
        raise RemoteToolError(message or f"remote tool '{tool_name}' reported an error")
    return blocks


def text_blocks(blocks: Iterable[dict[str, Any]] | None) -> list[str]:
    return [str(b.get("text", "")) for b in (blocks or []) if b.get("type") == "text"]


def join_text(blocks: Iterable[dict[str, Any]] | None, separator: str = "\n\n") -> str:
    return separator.join(text_blocks(blocks))
