from __future__ import annotations

from typing import Any, Awaitable, Callable

from tools import ask_question, wiki_contents, wiki_structure
from tools.types import ToolContext


ToolRunner = Callable[[dict[str, Any], ToolContext], Awaitable[list[dict[str, Any]]]]

_RUNNERS: dict[str, ToolRunner] = {
    wiki_structure.SPEC.name: wiki_structure.run,
    wiki_contents.SPEC.name: wiki_contents.run,
    ask_question.SPEC.name: ask_question.run,
}


def get_tool_runner(name: str) -> ToolRunner | None:
    return _RUNNERS.get(name)


async def run_tool(name: str, args: dict[str, Any], ctx: ToolContext) -> list[dict[str, Any]]:
    runner = get_tool_runner(name)
    if runner is None:
        raise KeyError(f"Unknown tool: {name}")
    return await runner(args, ctx)
