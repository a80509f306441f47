"""MCP stdio server in front of the browser tool registry.

The server owns the BrowserSession: it is created with the server and closed
when the transport shuts down. Tool failures never surface as protocol
errors; they come back as text results flagged ``isError``.
"""

from __future__ import annotations

import logging
from typing import Any

import mcp.types as types
from mcp.server import NotificationOptions, Server
from mcp.server.lowlevel.helper_types import ReadResourceContents
from mcp.server.models import InitializationOptions
from mcp.server.stdio import stdio_server
from mcp.shared.exceptions import McpError
from pydantic import AnyUrl

from browser_session import BrowserSession
from browser_tools import BrowserToolProvider
from config import ServerConfig
from errors import BrowserToolError
from tool_registry import ToolRegistry, ToolResult

logger = logging.getLogger(__name__)

PAGE_CONTENT_URI = "playwright://page/content"


def to_mcp_tools(schemas: list[dict[str, Any]]) -> list[types.Tool]:
    return [
        types.Tool(name=s["name"], description=s.get("description", ""), inputSchema=s["input_schema"])
        for s in schemas
    ]


def to_call_tool_result(result: ToolResult) -> types.CallToolResult:
    return types.CallToolResult(
        content=[types.TextContent(type="text", text=result.text)],
        isError=result.is_error,
    )


class BrowserMCPServer:
    def __init__(self, config: ServerConfig | None = None, session: BrowserSession | None = None):
        self.config = config or ServerConfig()
        self.session = session or BrowserSession(self.config)
        self.registry = ToolRegistry()
        self.registry.register(BrowserToolProvider(self.session, output_limit=self.config.max_output_chars))
        self._server = Server(self.config.server_name, version=self.config.server_version)
        self._setup_handlers()

    def _setup_handlers(self) -> None:
        @self._server.list_tools()
        async def _list_tools() -> list[types.Tool]:
            return to_mcp_tools(self.registry.get_tool_schemas())

        @self._server.call_tool(validate_input=False)
        async def _call_tool(name: str, arguments: dict[str, Any] | None) -> types.CallToolResult:
            return to_call_tool_result(await self.registry.call(name, arguments))

        @self._server.list_resources()
        async def _list_resources() -> list[types.Resource]:
            return [
                types.Resource(
                    uri=AnyUrl(PAGE_CONTENT_URI),
                    name="Page Content",
                    mimeType="text/html",
                )
            ]

        @self._server.read_resource()
        async def _read_resource(uri: AnyUrl) -> list[ReadResourceContents]:
            return [ReadResourceContents(content=await self.read_page_content(str(uri)), mime_type="text/html")]

    async def read_page_content(self, uri: str) -> str:
        if uri != PAGE_CONTENT_URI:
            raise McpError(types.ErrorData(code=types.INVALID_REQUEST, message="Not found"))
        try:
            return await self.session.content()
        except BrowserToolError as e:
            raise McpError(types.ErrorData(code=types.INTERNAL_ERROR, message="Not ready")) from e

    async def run(self) -> None:
        logger.info(f"Starting {self.config.server_name} {self.config.server_version} on stdio")
        try:
            async with stdio_server() as (read_stream, write_stream):
                await self._server.run(
                    read_stream,
                    write_stream,
                    InitializationOptions(
                        server_name=self.config.server_name,
                        server_version=self.config.server_version,
                        capabilities=self._server.get_capabilities(
                            notification_options=NotificationOptions(),
                            experimental_capabilities={},
                        ),
                    ),
                )
        finally:
            await self.registry.close()
            logger.info("Server stopped")


async def run_server(config: ServerConfig) -> None:
    await BrowserMCPServer(config).run()
