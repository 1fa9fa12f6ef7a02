#!/usr/bin/env python3
"""
MCP Tools for Screenshot Module

This module registers the screenshot tools on an MCP server. Handlers are
thin: listing and calling both delegate to a ToolDispatcher.

This module is part of the Integration Layer and can depend on both
Core Layer and Presentation Layer components.

Third-party package documentation:
- MCP Python SDK: https://github.com/modelcontextprotocol/python-sdk

Sample input:
- create_mcp_server(ToolDispatcher(ScreenshotCapture()))

Expected output:
- Configured MCP server with capture_screenshot, capture_element and
  list_device_presets registered
"""

from typing import Any, Dict, List, Optional

from loguru import logger
from mcp.server import Server
from mcp.types import Tool

from screenshot_mcp.core.constants import SERVER_NAME, SERVER_VERSION
from screenshot_mcp.mcp.dispatcher import ToolDispatcher


class ToolCallError(Exception):
    """Carries the text of a failed tool result back through the MCP server."""


def create_mcp_server(
    dispatcher: Optional[ToolDispatcher] = None,
    name: str = SERVER_NAME,
) -> Server:
    """
    Create and configure MCP server with screenshot tools

    Args:
        dispatcher: Tool dispatcher; one with a default orchestrator is created when omitted
        name: Name for the MCP server

    Returns:
        Server: Configured MCP server instance
    """
    dispatcher = dispatcher or ToolDispatcher()
    server = Server(name, version=SERVER_VERSION)

    register_list_tools(server, dispatcher)
    register_call_tool(server, dispatcher)

    logger.info(f"Initialized MCP server: {name} {SERVER_VERSION}")
    return server


def register_list_tools(server: Server, dispatcher: ToolDispatcher) -> None:
    """
    Register the tool listing handler

    Args:
        server: MCP server instance
        dispatcher: Source of the tool descriptors
    """
    @server.list_tools()
    async def list_tools() -> List[Tool]:
        return dispatcher.list_tools()


def register_call_tool(server: Server, dispatcher: ToolDispatcher) -> None:
    """
    Register the tool call handler

    The dispatcher never raises; a result flagged isError is re-raised as
    ToolCallError so the server reports it as an error result with the same
    text.

    Args:
        server: MCP server instance
        dispatcher: Executes the tool calls
    """
    @server.call_tool()
    async def call_tool(name: str, arguments: Dict[str, Any]) -> List[Any]:
        result = await dispatcher.call_tool(name, arguments)
        if result.isError:
            raise ToolCallError("\n".join(part.text for part in result.content if part.type == "text"))
        return list(result.content)
