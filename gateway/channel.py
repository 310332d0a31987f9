"""
Channel adapter — binds the dispatcher to an MCP server over stdio.

Only one tool call is dispatched at a time: a lock is held for the whole
call, including any long-running-operation wait. The synchronous dispatcher
runs in a worker thread so the event loop keeps servicing the transport.
Calls are not cancellable; a cancelled request still runs to completion
before the next call starts.
"""

from __future__ import annotations

import logging
from typing import Any

import anyio
import anyio.to_thread
from mcp import types
from mcp.server import Server
from mcp.server.stdio import stdio_server

from gateway import __version__
from gateway.dispatcher import Dispatcher
from gateway.envelope import ResponseEnvelope

logger = logging.getLogger("azure-gateway.channel")

SERVER_NAME = "azure-mcp-server"


def to_mcp_tool(descriptor) -> types.Tool:
    data = descriptor.to_dict()
    return types.Tool(name=data["name"], description=data["description"], inputSchema=data["inputSchema"])


def to_call_tool_result(envelope: ResponseEnvelope) -> types.CallToolResult:
    return types.CallToolResult(
        content=[types.TextContent(type="text", text=item.text) for item in envelope.content],
        isError=envelope.is_error,
    )


class ChannelAdapter:
    """MCP ``tools/list`` and ``tools/call`` handlers around a Dispatcher."""

    def __init__(self, dispatcher: Dispatcher, name: str = SERVER_NAME, version: str = __version__) -> None:
        self._dispatcher = dispatcher
        self._lock = anyio.Lock()
        self.server = Server(name, version=version)
        self.server.list_tools()(self.list_tools)
        # The dispatcher validates arguments itself so failures use the
        # gateway's error envelope.
        self.server.call_tool(validate_input=False)(self.call_tool)

    async def list_tools(self) -> list[types.Tool]:
        return [to_mcp_tool(descriptor) for descriptor in self._dispatcher.list_tools()]

    async def call_tool(self, name: str, arguments: dict[str, Any] | None) -> types.CallToolResult:
        async with self._lock:
            # A client cancel must not release the lock while the worker
            # thread is still talking to Azure; it is delivered after the
            # call returns.
            with anyio.CancelScope(shield=True):
                envelope = await anyio.to_thread.run_sync(self._dispatcher.call_tool, name, arguments or {})
        return to_call_tool_result(envelope)

    async def run(self) -> None:
        """Serve on stdin/stdout until the client closes the stream."""
        async with stdio_server() as (read_stream, write_stream):
            logger.info("Azure MCP server running on stdio")
            await self.server.run(read_stream, write_stream, self.server.create_initialization_options())
