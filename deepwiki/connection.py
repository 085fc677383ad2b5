"""Process-wide connection to the DeepWiki MCP server.

One MCP session is opened lazily and shared by every request. The session
lives inside a dedicated asyncio task: the transport and ``ClientSession``
context managers are entered and exited by that task only, while request
handlers just borrow the session object to call tools.
"""

from __future__ import annotations

import asyncio
from contextlib import AbstractAsyncContextManager, asynccontextmanager
from datetime import timedelta
from typing import Any, AsyncIterator, Callable

from mcp import ClientSession
from mcp.client.sse import sse_client
from mcp.client.streamable_http import streamablehttp_client
from mcp.types import Implementation

from deepwiki.content import content_blocks
from deepwiki.errors import DeepWikiError, error_message
from deepwiki.settings import CLIENT_VERSION, Settings
from tracing.logger import get_logger

logger = get_logger()

Connector = Callable[[Settings], AbstractAsyncContextManager[Any]]


@asynccontextmanager
async def open_session(settings: Settings) -> AsyncIterator[ClientSession]:
    """Open the configured transport and run the MCP handshake."""
    if settings.transport == "streamable-http":
        transport = streamablehttp_client(settings.mcp_url)
    else:
        transport = sse_client(settings.mcp_url)

    async with transport as streams:
        read_stream, write_stream = streams[0], streams[1]
        client_info = Implementation(name=settings.client_name, version=CLIENT_VERSION)
        async with ClientSession(read_stream, write_stream, client_info=client_info) as session:
            await session.initialize()
            yield session


class DeepWikiConnection:
    """Lazily opened, shared MCP session with guarded initialization.

    Args:
        settings: Remote endpoint, transport and timeout configuration.
        connector: Factory returning an async context manager that yields a
            ready session. Defaults to :func:`open_session`.
    """

    def __init__(self, settings: Settings, connector: Connector = open_session) -> None:
        self._settings = settings
        self._connector = connector
        self._lock = asyncio.Lock()
        self._session: Any = None
        self._owner: asyncio.Task | None = None
        self._closing: asyncio.Event | None = None
        self._attempts = 0
        self._last_error: Exception | None = None

    @property
    def connected(self) -> bool:
        return self._session is not None and self._owner is not None and not self._owner.done()

    async def session(self) -> Any:
        """Return the shared session, opening it on first use.

        Concurrent first callers wait on the same lock, so only one handshake
        happens. Callers that queued behind a failed handshake get its error
        instead of starting their own; later calls try again. A session whose
        owner task has ended is replaced.
        """
        attempt = self._attempts
        async with self._lock:
            if self.connected:
                return self._session
            if self._attempts != attempt and self._last_error is not None:
                raise self._last_error
            if self._owner is not None:
                logger.warning("DeepWiki connection was lost; reconnecting to %s", self._settings.mcp_url)
            self._session = None
            self._last_error = None
            try:
                self._session = await self._start()
            except Exception as exc:
                self._last_error = exc
                raise
            finally:
                self._attempts += 1
            return self._session

    async def call_tool(self, name: str, arguments: dict[str, Any]) -> list[dict[str, Any]]:
        session = await self.session()
        timeout = None
        if self._settings.tool_timeout_s:
            timeout = timedelta(seconds=self._settings.tool_timeout_s)
        result = await session.call_tool(name, arguments, read_timeout_seconds=timeout)
        return content_blocks(result, tool_name=name)

    async def close(self) -> None:
        async with self._lock:
            owner, closing = self._owner, self._closing
            self._session = None
            self._owner = None
            self._closing = None
        if owner is None or closing is None:
            return
        closing.set()
        await asyncio.gather(owner, return_exceptions=True)

    async def _start(self) -> Any:
        ready: asyncio.Future = asyncio.get_running_loop().create_future()
        closing = asyncio.Event()
        owner = asyncio.create_task(self._own(ready, closing), name="deepwiki-connection")
        try:
            session = await ready
        except BaseException:
            closing.set()
            raise
        self._owner = owner
        self._closing = closing
        return session

    async def _own(self, ready: asyncio.Future, closing: asyncio.Event) -> None:
        try:
            async with self._connector(self._settings) as session:
                if ready.done():
                    # whoever asked for the session stopped waiting
                    return
                ready.set_result(session)
                logger.info("Connected to DeepWiki MCP at %s (%s)", self._settings.mcp_url, self._settings.transport)
                await closing.wait()
        except Exception as exc:
            if not ready.done():
                ready.set_exception(exc)
            else:
                logger.warning("DeepWiki connection dropped: %s", error_message(exc))
        finally:
            if not ready.done():
                ready.set_exception(DeepWikiError("DeepWiki connection closed before it was ready"))
        logger.info("DeepWiki connection closed")
