from __future__ import annotations

from typing import Any

from tools.types import ToolContext, ToolSpec, require_arguments


SPEC = ToolSpec(name="ask_question", args=("owner", "repo", "question"))


async def run(args: dict[str, Any], ctx: ToolContext) -> list[dict[str, Any]]:
    return await ctx.connection.call_tool(SPEC.name, require_arguments(SPEC, args))
