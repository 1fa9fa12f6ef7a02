#!/usr/bin/env python3
"""
MCP Tool Dispatcher for Screenshot Module

This module routes MCP tool calls to the capture orchestrator and turns the
outcome into MCP content. Every tool call returns a CallToolResult; capture
errors, argument errors and unknown tool names become a single
"Error: <message>" text part flagged with isError.

This module is part of the Integration Layer and can depend on both
Core Layer and Presentation Layer components.

Sample input:
- await dispatcher.call_tool("capture_screenshot", {"url": "https://example.com"})

Expected output:
- CallToolResult(content=[TextContent("Screenshot captured successfully from https://example.com"),
                          ImageContent(data=..., mimeType="image/png"),
                          TextContent("Metadata: {...}")], isError=False)
"""

import json
from typing import Any, Dict, List, Optional

from loguru import logger
from mcp.types import CallToolResult, ImageContent, TextContent, Tool
from pydantic import ValidationError

from screenshot_mcp.core.capture import ScreenshotCapture
from screenshot_mcp.core.constants import DEVICE_PRESETS, IMAGE_SETTINGS
from screenshot_mcp.core.models import CaptureRequest, CaptureResult
from screenshot_mcp.core.utils import truncate_large_value
from screenshot_mcp.mcp.schemas import (
    CaptureElementArgs,
    CaptureScreenshotArgs,
    ListDevicePresetsArgs,
    input_schema,
)


def format_validation_error(error: ValidationError) -> str:
    """Flattens a pydantic ValidationError into one line."""
    problems = []
    for item in error.errors():
        location = ".".join(str(part) for part in item.get("loc", ())) or "arguments"
        problems.append(f"{location}: {item.get('msg')}")
    return "Invalid arguments: " + "; ".join(problems)


def format_device_presets() -> str:
    """
    Renders the preset catalogue as the text returned by list_device_presets.

    Returns:
        str: "Available device presets:" followed by one block per preset
    """
    blocks = []
    for name, preset in DEVICE_PRESETS.items():
        blocks.append(
            f"**{name}**\n"
            f"- Dimensions: {preset['width']}x{preset['height']}\n"
            f"- Scale: {preset['device_scale_factor']}x\n"
            f"- Mobile: {str(preset['is_mobile']).lower()}\n"
            f"- Touch: {str(preset['has_touch']).lower()}\n"
        )
    return "Available device presets:\n\n" + "\n".join(blocks)


def error_result(message: str) -> CallToolResult:
    return CallToolResult(content=[TextContent(type="text", text=f"Error: {message}")], isError=True)


def _camel(key: str) -> str:
    head, *rest = key.split("_")
    return head + "".join(part.title() for part in rest)


def wire_metadata(metadata: Any) -> Any:
    """Renames metadata keys to the camelCase used by MCP clients (image_width -> imageWidth)."""
    if isinstance(metadata, dict):
        return {_camel(key): wire_metadata(value) for key, value in metadata.items()}
    return metadata


def capture_result_content(summary: str, result: CaptureResult) -> List[Any]:
    return [
        TextContent(type="text", text=summary),
        ImageContent(type="image", data=result.data, mimeType=IMAGE_SETTINGS["MIME_TYPE"]),
        TextContent(type="text", text=f"Metadata: {json.dumps(wire_metadata(result.metadata), indent=2)}"),
    ]


class ToolDispatcher:
    """
    Maps tool names to orchestrator operations.

    Args:
        capture: Orchestrator shared by every tool call
    """

    def __init__(self, capture: Optional[ScreenshotCapture] = None):
        self.capture = capture or ScreenshotCapture()
        self._handlers = {
            "capture_screenshot": self._capture_screenshot,
            "capture_element": self._capture_element,
            "list_device_presets": self._list_device_presets,
        }

    def list_tools(self) -> List[Tool]:
        return [
            Tool(
                name="capture_screenshot",
                description=(
                    "Capture a full-page screenshot of a webpage, with optional device "
                    "emulation and wait conditions. Images larger than 8000 pixels on a "
                    "side are scaled down."
                ),
                inputSchema=input_schema(CaptureScreenshotArgs),
            ),
            Tool(
                name="capture_element",
                description="Capture a screenshot of the first element matching a CSS selector",
                inputSchema=input_schema(CaptureElementArgs),
            ),
            Tool(
                name="list_device_presets",
                description="List the available device presets for viewport emulation",
                inputSchema=input_schema(ListDevicePresetsArgs),
            ),
        ]

    async def call_tool(self, name: str, arguments: Optional[Dict[str, Any]]) -> CallToolResult:
        """
        Runs one tool call. Never raises.

        Args:
            name: Tool name
            arguments: Raw arguments from the client

        Returns:
            CallToolResult: Content on success, "Error: ..." text with isError otherwise
        """
        logger.info(f"Tool call: {name} {truncate_large_value(json.dumps(arguments or {}, default=str))}")

        handler = self._handlers.get(name)
        if handler is None:
            logger.error(f"Unknown tool requested: {name}")
            return error_result(f"Unknown tool: {name}")

        try:
            return await handler(arguments or {})
        except ValidationError as e:
            message = format_validation_error(e)
            logger.error(f"{name} rejected: {message}")
            return error_result(message)
        except Exception as e:
            message = getattr(e, "message", None) or str(e) or type(e).__name__
            logger.error(f"{name} failed: {message}")
            return error_result(message)

    async def _capture_screenshot(self, arguments: Dict[str, Any]) -> CallToolResult:
        args = CaptureScreenshotArgs.model_validate(arguments)
        request = CaptureRequest.model_validate(args.model_dump(by_alias=True, exclude_none=True))
        result = await self.capture.capture_screenshot(request)
        return CallToolResult(
            content=capture_result_content(f"Screenshot captured successfully from {args.url}", result)
        )

    async def _capture_element(self, arguments: Dict[str, Any]) -> CallToolResult:
        args = CaptureElementArgs.model_validate(arguments)
        viewport = args.viewport.model_dump(exclude_none=True) if args.viewport else None
        result = await self.capture.capture_element(
            args.url, args.selector, viewport=viewport, standard_delay=args.standard_delay
        )
        return CallToolResult(
            content=capture_result_content(
                f"Element screenshot captured from {args.url} (selector: {args.selector})", result
            )
        )

    async def _list_device_presets(self, arguments: Dict[str, Any]) -> CallToolResult:
        ListDevicePresetsArgs.model_validate(arguments)
        return CallToolResult(content=[TextContent(type="text", text=format_device_presets())])
