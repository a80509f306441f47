"""Tests for the MCP front-end: result conversion, registered handlers and the page-content resource."""

from __future__ import annotations

import asyncio

import mcp.types as types
import pytest
from mcp.shared.exceptions import McpError
from pydantic import AnyUrl

from fakes import make_session
from server import PAGE_CONTENT_URI, BrowserMCPServer, to_call_tool_result, to_mcp_tools
from tool_registry import ToolResult


def _server():
    session, pw = make_session()
    return BrowserMCPServer(session=session), session


def test_tool_results_become_single_text_block():
    ok = to_call_tool_result(ToolResult("ok"))
    failed = to_call_tool_result(ToolResult("Error: nope", is_error=True))

    assert ok.isError is False
    assert [c.text for c in ok.content] == ["ok"]
    assert failed.isError is True
    assert isinstance(failed.content[0], types.TextContent)
    assert failed.content[0].text == "Error: nope"


def test_tools_are_listed_from_registry():
    server, _ = _server()

    tools = to_mcp_tools(server.registry.get_tool_schemas())

    names = [t.name for t in tools]
    assert "smart_click" in names and "close_browser" in names
    smart = next(t for t in tools if t.name == "smart_click")
    assert smart.inputSchema["required"] == ["selector"]


def test_page_content_resource_not_ready_before_launch():
    server, _ = _server()

    with pytest.raises(McpError) as exc_info:
        asyncio.run(server.read_page_content(PAGE_CONTENT_URI))

    assert exc_info.value.error.code == types.INTERNAL_ERROR
    assert exc_info.value.error.message == "Not ready"


def test_unknown_resource_uri():
    server, _ = _server()

    with pytest.raises(McpError) as exc_info:
        asyncio.run(server.read_page_content("playwright://page/cookies"))

    assert exc_info.value.error.code == types.INVALID_REQUEST


def test_page_content_resource_after_launch():
    server, session = _server()

    async def scenario():
        await server.registry.call("launch_browser", {})
        session.current_page.html = "<html><h1>Hi</h1></html>"
        return await server.read_page_content(PAGE_CONTENT_URI)

    assert asyncio.run(scenario()) == "<html><h1>Hi</h1></html>"


# ---------------------------------------------------------------------------
# Requests through the handlers registered on the MCP server
# ---------------------------------------------------------------------------

def _handle(server: BrowserMCPServer, request):
    handler = server._server.request_handlers[type(request)]
    return asyncio.run(handler(request)).root


def _call_tool_request(name: str, arguments: dict | None = None) -> types.CallToolRequest:
    return types.CallToolRequest(
        method="tools/call",
        params=types.CallToolRequestParams(name=name, arguments=arguments or {}),
    )


def test_call_tool_handler_returns_text_result():
    server, _ = _server()

    result = _handle(server, _call_tool_request("get_console_logs"))

    assert isinstance(result, types.CallToolResult)
    assert result.isError is False
    assert [c.text for c in result.content] == ["[]"]


def test_call_tool_handler_flags_page_scoped_tool_before_launch():
    server, _ = _server()

    result = _handle(server, _call_tool_request("get_page_state"))

    assert isinstance(result, types.CallToolResult)
    assert result.isError is True
    assert result.content[0].text == "Error: Browser not initialized or page closed"


def test_call_tool_handler_unknown_tool():
    server, _ = _server()

    result = _handle(server, _call_tool_request("teleport"))

    assert result.isError is True
    assert result.content[0].text == "Error: Unknown tool: teleport"


def test_list_tools_handler():
    server, _ = _server()

    result = _handle(server, types.ListToolsRequest(method="tools/list"))

    assert isinstance(result, types.ListToolsResult)
    assert {t.name for t in result.tools} >= {"launch_browser", "smart_click", "close_browser"}


def test_read_resource_handler_after_launch():
    server, session = _server()
    asyncio.run(server.registry.call("launch_browser", {}))
    session.current_page.html = "<html><p>ready</p></html>"

    result = _handle(
        server,
        types.ReadResourceRequest(
            method="resources/read",
            params=types.ReadResourceRequestParams(uri=AnyUrl(PAGE_CONTENT_URI)),
        ),
    )

    assert isinstance(result, types.ReadResourceResult)
    assert result.contents[0].text == "<html><p>ready</p></html>"
    assert result.contents[0].mimeType == "text/html"
