#!/usr/bin/env python3
"""
MCP Server Entry Point for Screenshot Tools

This is the main entry point for the screenshot MCP server, designed to be
directly referenced in the .mcp.json configuration. The server speaks MCP over
stdio, so logs go to stderr and to a rotating file, never to stdout.

This module is part of the Integration Layer and connects the MCP functionality
to the application core.
"""

import argparse
import asyncio
import json
import os
import signal
import sys
from typing import Any, Dict

from loguru import logger
from mcp.server.stdio import stdio_server

from screenshot_mcp.core.capture import ScreenshotCapture
from screenshot_mcp.core.config import get_server_info, load_settings
from screenshot_mcp.mcp.dispatcher import ToolDispatcher
from screenshot_mcp.mcp.mcp_tools import create_mcp_server


def ensure_log_directory() -> None:
    """Ensure log directory exists"""
    os.makedirs("logs", exist_ok=True)


def configure_logging(level: str = "INFO") -> None:
    """
    Configure logging with proper format and level.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR)
    """
    ensure_log_directory()

    # Remove default handlers
    logger.remove()

    # Add file logger
    logger.add(
        "logs/mcp_server.log",
        rotation="10 MB",
        retention="1 week",
        level=level,
        format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {message}"
    )

    # stdout carries the MCP protocol
    logger.add(
        sys.stderr,
        format="<level>{level: <8}</level> | {message}",
        level=level,
        colorize=True
    )


async def health_check() -> Dict[str, Any]:
    """
    Launch the browser, open a page and shut everything down again.

    Returns:
        Dict[str, Any]: Health check results
    """
    import platform

    import PIL

    capture = ScreenshotCapture()
    try:
        result = await capture.health_check()
    finally:
        await capture.shutdown()

    result.update({
        "platform": platform.system(),
        "python_version": platform.python_version(),
        "pil_version": getattr(PIL, "__version__", "unknown"),
    })
    return result


async def serve(capture: ScreenshotCapture) -> None:
    """
    Serve MCP over stdio until the client disconnects or the task is cancelled.

    The browser is always shut down before returning.

    Args:
        capture: Orchestrator used for every tool call
    """
    server = create_mcp_server(ToolDispatcher(capture))
    try:
        async with stdio_server() as (read_stream, write_stream):
            await server.run(read_stream, write_stream, server.create_initialization_options())
    finally:
        logger.info("Shutting down browser session")
        await capture.shutdown()


async def run_server() -> None:
    """Run serve() with SIGTERM mapped to cancellation."""
    capture = ScreenshotCapture()
    task = asyncio.ensure_future(serve(capture))

    loop = asyncio.get_running_loop()
    try:
        loop.add_signal_handler(signal.SIGTERM, task.cancel)
    except (NotImplementedError, RuntimeError):
        # Windows event loops do not support signal handlers
        logger.debug("SIGTERM handler not installed on this platform")

    try:
        await task
    except asyncio.CancelledError:
        logger.info("Server stopped by signal")


def print_schema(as_json: bool) -> None:
    dispatcher = ToolDispatcher(ScreenshotCapture())
    tools = dispatcher.list_tools()

    if as_json:
        schema = {tool.name: {"description": tool.description, "inputSchema": tool.inputSchema} for tool in tools}
        print(json.dumps(schema, indent=2))
        return

    for tool in tools:
        print(f"Tool: {tool.name}")
        print(f"  Description: {tool.description}")
        print("  Parameters:")
        for param_name, param_info in tool.inputSchema.get("properties", {}).items():
            param_type = param_info.get("type", "object")
            print(f"    {param_name}: {param_type} - {param_info.get('description', 'No description')}")
        print()


def main() -> int:
    """
    Main entry point for the MCP server.

    Returns:
        int: Exit code
    """
    parser = argparse.ArgumentParser(description="Screenshot MCP Server")
    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    # Start server command
    start_parser = subparsers.add_parser("start", help="Start the MCP server on stdio")
    start_parser.add_argument("--debug", action="store_true", help="Enable debug mode")

    # Health check command
    subparsers.add_parser("health", help="Check that a browser can be launched")

    # Info command
    subparsers.add_parser("info", help="Display server information")

    # Schema command
    schema_parser = subparsers.add_parser("schema", help="Display tool schemas")
    schema_parser.add_argument("--json", action="store_true", help="Output as JSON")

    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        return 1

    if args.command == "start":
        settings = load_settings()
        log_level = "DEBUG" if args.debug else settings.log_level
        configure_logging(log_level)

        logger.info("Starting MCP server for screenshot tools")
        logger.info(
            f"Headless: {settings.headless}, Timeout: {settings.timeout_ms}ms, "
            f"Max concurrent: {settings.max_concurrent}"
        )

        try:
            asyncio.run(run_server())
        except KeyboardInterrupt:
            logger.info("Server stopped by user")
            return 0
        except Exception as e:
            logger.opt(exception=True).error(f"Server failed: {str(e)}")
            return 1
        return 0

    elif args.command == "health":
        configure_logging("WARNING")
        result = asyncio.run(health_check())
        print(json.dumps(result, indent=2))
        return 0 if result["status"] == "healthy" else 1

    elif args.command == "info":
        print(json.dumps(get_server_info(), indent=2))
        return 0

    elif args.command == "schema":
        print_schema(args.json)
        return 0

    return 0


if __name__ == "__main__":
    """
    Direct entry point for the screenshot MCP server.
    This file is designed to be referenced in .mcp.json.

    Usage:
      python -m screenshot_mcp.mcp.mcp_server start [--debug]
      python -m screenshot_mcp.mcp.mcp_server health
      python -m screenshot_mcp.mcp.mcp_server info
      python -m screenshot_mcp.mcp.mcp_server schema [--json]
    """
    sys.exit(main())
