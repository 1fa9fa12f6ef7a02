"""
MCP Layer for Screenshot Module

This package contains the MCP (Model Context Protocol) layer for the screenshot functionality,
exposing the capture orchestrator as MCP tools over stdio.

The MCP layer is designed to:
1. Expose core operations as MCP tools
2. Publish camelCase input schemas generated from pydantic models
3. Turn every failure into an MCP error result
4. Manage server startup, logging and shutdown

Usage:
    # Start the MCP server
    python -m screenshot_mcp.mcp.mcp_server start

    # Use the dispatcher in Python
    from screenshot_mcp.mcp import ToolDispatcher
    result = await ToolDispatcher().call_tool("list_device_presets", {})
"""

# Tool dispatch
from screenshot_mcp.mcp.dispatcher import ToolDispatcher, format_device_presets

# MCP server creation
from screenshot_mcp.mcp.mcp_tools import create_mcp_server

# MCP server entry point
from screenshot_mcp.mcp.mcp_server import (
    main,
    health_check,
    configure_logging
)

__all__ = [
    # Dispatcher
    'ToolDispatcher',
    'format_device_presets',

    # MCP server
    'create_mcp_server',
    'main',
    'health_check',
    'configure_logging'
]

# Example configuration for .mcp.json
EXAMPLE_MCP_CONFIG = """
{
  "mcpServers": {
    "screenshot": {
      "command": "screenshot-mcp-server",
      "args": ["start"],
      "env": {
        "BROWSER_HEADLESS": "true",
        "MAX_CONCURRENT_SCREENSHOTS": "5"
      }
    }
  }
}
"""
