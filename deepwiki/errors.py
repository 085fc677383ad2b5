from __future__ import annotations


class DeepWikiError(RuntimeError):
    """Base class for failures talking to the DeepWiki MCP server."""


class RemoteToolError(DeepWikiError):
    """The remote tool ran but flagged its result as an error."""


class MalformedResponseError(DeepWikiError):
    """The remote tool returned something that is not a list of content blocks."""


def error_message(exc: BaseException) -> str:
    """Message of *exc*, looking through exception groups raised by task groups."""
    while isinstance(exc, BaseExceptionGroup) and exc.exceptions:
        exc = exc.exceptions[0]
    return str(exc).strip() or type(exc).__name__
