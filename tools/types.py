from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Protocol


class ToolConnection(Protocol):
    async def call_tool(self, name: str, arguments: dict[str, Any]) -> list[dict[str, Any]]: ...


class MissingArgumentsError(ValueError):
    """A tool was invoked without one of its required arguments."""


@dataclass(frozen=True)
class ToolSpec:
    name: str
    # every argument is required and forwarded under the same key
    args: tuple[str, ...]


@dataclass(frozen=True)
class ToolContext:
    connection: ToolConnection


def clean_arguments(spec: ToolSpec, args: dict[str, Any]) -> dict[str, str]:
    return {name: str(args.get(name) or "").strip() for name in spec.args}


def missing_arguments(spec: ToolSpec, args: dict[str, Any]) -> list[str]:
    cleaned = clean_arguments(spec, args)
    return [name for name in spec.args if not cleaned[name]]


def required_message(spec: ToolSpec) -> str:
    names = list(spec.args)
    if len(names) == 2:
        return f"{names[0]} and {names[1]} are required"
    return f"{', '.join(names)} are required"


def require_arguments(spec: ToolSpec, args: dict[str, Any]) -> dict[str, str]:
    """Return the stripped arguments for *spec*, or raise if any is blank."""
    if missing_arguments(spec, args):
        raise MissingArgumentsError(required_message(spec))
    return clean_arguments(spec, args)
