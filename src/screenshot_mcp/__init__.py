"""
Screenshot MCP Tool

Web page and element screenshots through a headless browser, exposed to AI
agents as MCP tools and to humans as a CLI.

This package implements a clean three-layer architecture for maximum maintainability,
testability, and extensibility:

1. Core Layer: Validation, capture orchestration, wait protocol, image normalization
2. Presentation Layer: CLI interface with rich formatting
3. Integration Layer: MCP server over stdio

Usage:
    # Direct API usage (Core Layer)
    from screenshot_mcp.core import ScreenshotCapture
    capture = ScreenshotCapture()
    result = await capture.capture_screenshot("https://example.com")

    # CLI usage (Presentation Layer)
    # screenshot-mcp capture https://example.com

    # MCP server usage (Integration Layer)
    # screenshot-mcp-server start
"""

# Core functionality
from screenshot_mcp.core import (
    ScreenshotCapture,
    CaptureRequest,
    CaptureResult,
    ScreenshotError
)

# CLI layer
from screenshot_mcp.cli import app as cli_app

# MCP layer
from screenshot_mcp.mcp import create_mcp_server, ToolDispatcher

__version__ = "1.0.0"

__all__ = [
    # Core
    'ScreenshotCapture',
    'CaptureRequest',
    'CaptureResult',
    'ScreenshotError',

    # CLI entrypoint
    'cli_app',

    # MCP server
    'create_mcp_server',
    'ToolDispatcher',

    # Version info
    '__version__'
]
