"""Lifecycle wrapper around an MCP browser-automation server."""

from __future__ import annotations

from contextlib import AsyncExitStack
from typing import Any

from mcp import ClientSession, StdioServerParameters
from mcp.client.stdio import stdio_client
from mcp.types import CallToolResult, Implementation

from browser_bench import cli
from browser_bench.config import ClientConfig


class SessionStateError(RuntimeError):
    """Raised when the session is used in the wrong lifecycle state."""


class BrowserSession:
    """One MCP connection, explicitly opened and closed by its owner.

    The server subprocess lives inside an exit stack so ``close`` always
    terminates it. Create one session per benchmark run; instances are not
    safe to share across concurrent runs.

    Usage::

        async with BrowserSession(config) as session:
            await session.call_tool("navigate_page", {"url": url, "type": "url"})
    """

    def __init__(self, config: ClientConfig | None = None):
        self.config = config or ClientConfig()
        self._session: ClientSession | None = None
        self._stack: AsyncExitStack | None = None
        self.tool_names: list[str] = []

    @property
    def is_connected(self) -> bool:
        return self._session is not None

    async def connect(self, headless: bool | None = None) -> BrowserSession:
        """Start the server, handshake, and normalize the viewport.

        On failure everything opened so far is torn down and the error
        propagates; the session stays disconnected.
        """
        if self._session is not None:
            raise SessionStateError("MCP client already connected. Call close() first.")

        cli.info("Starting MCP browser server...")
        params = StdioServerParameters(
            command=self.config.command,
            args=self.config.server_args(headless),
        )
        stack = AsyncExitStack()
        try:
            read_stream, write_stream = await stack.enter_async_context(stdio_client(params))
            session = await stack.enter_async_context(
                ClientSession(
                    read_stream,
                    write_stream,
                    client_info=Implementation(
                        name=self.config.client_name,
                        version=self.config.client_version,
                    ),
                )
            )
            await session.initialize()
            cli.success("MCP client connected")

            tools = await session.list_tools()
            tool_names = [t.name for t in tools.tools]
            cli.info(f"Available MCP tools: {len(tool_names)}")

            viewport = self.config.viewport
            await session.call_tool(
                "resize_page", {"width": viewport.width, "height": viewport.height}
            )
            cli.info(f"Browser viewport set to {viewport.width}x{viewport.height}")
        except BaseException:
            await stack.aclose()
            raise

        self._stack = stack
        self._session = session
        self.tool_names = tool_names
        return self

    async def call_tool(
        self,
        name: str,
        arguments: dict[str, Any] | None = None,
    ) -> CallToolResult:
        """Forward a tool call; the result is returned uninterpreted."""
        if self._session is None:
            raise SessionStateError("MCP client not initialized. Call connect() first.")
        return await self._session.call_tool(name, arguments or {})

    async def close(self) -> None:
        """Terminate the server. Safe to call more than once."""
        stack = self._stack
        self._session = None
        self._stack = None
        self.tool_names = []
        if stack is not None:
            await stack.aclose()

    async def __aenter__(self) -> BrowserSession:
        return await self.connect()

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()
