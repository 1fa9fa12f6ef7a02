#!/usr/bin/env python3
"""
Unit tests for mcp/dispatcher.py and mcp/mcp_tools.py
"""

import json
import os
import sys
import unittest
from unittest.mock import AsyncMock, MagicMock

from mcp.types import CallToolRequest, CallToolRequestParams, ListToolsRequest

# Add src directory to path to import module
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '../..')))

from screenshot_mcp.core.capture import ScreenshotCapture
from screenshot_mcp.core.config import CaptureSettings
from screenshot_mcp.core.errors import ElementNotFoundError, RateLimitExceededError
from screenshot_mcp.core.models import CaptureResult
from screenshot_mcp.mcp.dispatcher import ToolDispatcher, format_device_presets, wire_metadata
from screenshot_mcp.mcp.mcp_tools import create_mcp_server
from screenshot_mcp.tests.fakes import FakeClock, FakeElement, FakePage, FakeSession, make_png


def texts(result):
    return [part.text for part in result.content if part.type == "text"]


class TestToolListing(unittest.TestCase):
    """Tool descriptors and input schemas"""

    def setUp(self):
        self.tools = {tool.name: tool for tool in ToolDispatcher(MagicMock()).list_tools()}

    def test_tool_names(self):
        self.assertEqual(set(self.tools), {"capture_screenshot", "capture_element", "list_device_presets"})

    def test_capture_screenshot_schema(self):
        schema = self.tools["capture_screenshot"].inputSchema
        self.assertEqual(schema["type"], "object")
        self.assertEqual(schema["required"], ["url"])
        for name in ["url", "viewport", "waitFor", "delay", "waitUntil", "standardDelay"]:
            self.assertIn(name, schema["properties"])
        self.assertEqual(schema["properties"]["waitUntil"]["default"], "networkidle2")
        self.assertEqual(
            schema["properties"]["waitUntil"]["enum"],
            ["load", "domcontentloaded", "networkidle0", "networkidle2"],
        )
        self.assertTrue(schema["properties"]["standardDelay"]["default"])

    def test_viewport_bounds_are_advertised(self):
        viewport = self.tools["capture_screenshot"].inputSchema["$defs"]["ViewportArgs"]["properties"]
        self.assertEqual((viewport["width"]["minimum"], viewport["width"]["maximum"]), (100, 5000))
        self.assertEqual((viewport["deviceScaleFactor"]["minimum"], viewport["deviceScaleFactor"]["maximum"]), (0.1, 3))
        self.assertEqual(viewport["preset"]["enum"], ["mobile", "tablet", "desktop"])
        self.assertIn("isMobile", viewport)

    def test_capture_element_schema(self):
        schema = self.tools["capture_element"].inputSchema
        self.assertEqual(sorted(schema["required"]), ["selector", "url"])

    def test_list_device_presets_schema(self):
        schema = self.tools["list_device_presets"].inputSchema
        self.assertEqual(schema["type"], "object")
        self.assertEqual(schema.get("properties", {}), {})


class TestToolCalls(unittest.IsolatedAsyncioTestCase):
    """Tool call routing and result shapes"""

    def make_dispatcher(self, page_factory=None):
        clock = FakeClock()
        self.session = FakeSession(page_factory)
        capture = ScreenshotCapture(
            settings=CaptureSettings(),
            session=self.session,
            sleep=clock.sleep,
            clock=clock,
        )
        return ToolDispatcher(capture)

    async def test_capture_screenshot_success(self):
        dispatcher = self.make_dispatcher()

        result = await dispatcher.call_tool("capture_screenshot", {
            "url": "https://example.com",
            "viewport": {"preset": "mobile"},
            "waitFor": {"type": "timeout", "value": 100},
            "waitUntil": "load",
            "standardDelay": False,
        })

        self.assertFalse(result.isError)
        self.assertEqual([part.type for part in result.content], ["text", "image", "text"])
        self.assertEqual(result.content[0].text, "Screenshot captured successfully from https://example.com")
        self.assertEqual(result.content[1].mimeType, "image/png")
        self.assertTrue(result.content[2].text.startswith("Metadata: "))

        metadata = json.loads(result.content[2].text[len("Metadata: "):])
        self.assertEqual(metadata["viewport"]["width"], 375)
        self.assertEqual(metadata["viewport"]["deviceScaleFactor"], 2)
        self.assertTrue(metadata["viewport"]["isMobile"])
        self.assertIn("imageWidth", metadata)
        self.assertIn("imageHeight", metadata)
        self.assertEqual(metadata["title"], "Example Domain")
        self.assertTrue(self.session.viewports[0].is_mobile)

    async def test_capture_element_success(self):
        dispatcher = self.make_dispatcher(lambda: FakePage(elements={"h1": FakeElement(make_png((30, 12)))}))

        result = await dispatcher.call_tool("capture_element", {"url": "https://example.com", "selector": "h1"})

        self.assertFalse(result.isError)
        self.assertEqual(result.content[0].text, "Element screenshot captured from https://example.com (selector: h1)")
        metadata = json.loads(result.content[2].text[len("Metadata: "):])
        self.assertEqual((metadata["imageWidth"], metadata["imageHeight"]), (30, 12))
        self.assertEqual(metadata["selector"], "h1")
        self.assertNotIn("image_width", metadata)

    async def test_capture_failure_becomes_error_result(self):
        dispatcher = self.make_dispatcher()

        result = await dispatcher.call_tool("capture_screenshot", {"url": "ftp://example.com"})

        self.assertTrue(result.isError)
        self.assertEqual(
            texts(result),
            ["Error: Screenshot capture failed: Invalid URL: Only HTTP and HTTPS URLs are supported"],
        )

    async def test_element_not_found(self):
        dispatcher = self.make_dispatcher()

        result = await dispatcher.call_tool(
            "capture_element", {"url": "https://example.com", "selector": "#missing", "standardDelay": False}
        )

        self.assertTrue(result.isError)
        self.assertEqual(texts(result), ["Error: Element not found: #missing"])

    async def test_rate_limit(self):
        capture = MagicMock()
        capture.capture_screenshot = AsyncMock(side_effect=RateLimitExceededError("Maximum concurrent screenshots (5) exceeded. Please try again later."))
        dispatcher = ToolDispatcher(capture)

        result = await dispatcher.call_tool("capture_screenshot", {"url": "https://example.com"})

        self.assertTrue(result.isError)
        self.assertTrue(texts(result)[0].startswith("Error: Maximum concurrent screenshots (5) exceeded"))

    async def test_missing_arguments(self):
        dispatcher = ToolDispatcher(MagicMock())

        result = await dispatcher.call_tool("capture_element", {"url": "https://example.com"})

        self.assertTrue(result.isError)
        self.assertTrue(texts(result)[0].startswith("Error: Invalid arguments: selector"))

        result = await dispatcher.call_tool("capture_screenshot", None)
        self.assertTrue(result.isError)
        self.assertIn("url", texts(result)[0])

    async def test_unknown_tool(self):
        result = await ToolDispatcher(MagicMock()).call_tool("capture_video", {})

        self.assertTrue(result.isError)
        self.assertEqual(texts(result), ["Error: Unknown tool: capture_video"])

    async def test_unexpected_exception_never_escapes(self):
        capture = MagicMock()
        capture.capture_element = AsyncMock(side_effect=ElementNotFoundError("h2"))
        result = await ToolDispatcher(capture).call_tool("capture_element", {"url": "https://example.com", "selector": "h2"})
        self.assertEqual(texts(result), ["Error: Element not found: h2"])

        capture.capture_element = AsyncMock(side_effect=KeyError("boom"))
        result = await ToolDispatcher(capture).call_tool("capture_element", {"url": "https://example.com", "selector": "h2"})
        self.assertTrue(result.isError)

    async def test_list_device_presets(self):
        result = await ToolDispatcher(MagicMock()).call_tool("list_device_presets", {})

        self.assertFalse(result.isError)
        self.assertEqual(texts(result), [format_device_presets()])


class TestFormatDevicePresets(unittest.TestCase):
    """Preset listing text"""

    def test_format(self):
        text = format_device_presets()
        self.assertTrue(text.startswith("Available device presets:\n\n**mobile**\n"))
        self.assertIn(
            "**mobile**\n- Dimensions: 375x667\n- Scale: 2x\n- Mobile: true\n- Touch: true\n\n**tablet**",
            text,
        )
        self.assertTrue(text.endswith("**desktop**\n- Dimensions: 1920x1080\n- Scale: 1x\n- Mobile: false\n- Touch: false\n"))


class TestWireMetadata(unittest.TestCase):
    """Metadata key naming on the MCP wire"""

    def test_keys_are_camel_cased(self):
        metadata = {
            "url": "https://example.com",
            "viewport": {"width": 375, "device_scale_factor": 2, "is_mobile": True, "has_touch": True},
            "image_width": 750,
            "image_height": 1334,
        }
        self.assertEqual(wire_metadata(metadata), {
            "url": "https://example.com",
            "viewport": {"width": 375, "deviceScaleFactor": 2, "isMobile": True, "hasTouch": True},
            "imageWidth": 750,
            "imageHeight": 1334,
        })

    def test_values_are_untouched(self):
        self.assertEqual(wire_metadata({"title": "snake_case title"}), {"title": "snake_case title"})


class TestCreateMcpServer(unittest.IsolatedAsyncioTestCase):
    """Server construction and registered handlers"""

    def test_server_name(self):
        server = create_mcp_server(ToolDispatcher(MagicMock()))
        self.assertEqual(server.name, "screenshot-mcp")

    def test_handlers_are_registered(self):
        server = create_mcp_server(ToolDispatcher(MagicMock()))
        self.assertIn(ListToolsRequest, server.request_handlers)
        self.assertIn(CallToolRequest, server.request_handlers)

    async def test_list_tools_through_server(self):
        server = create_mcp_server(ToolDispatcher(MagicMock()))

        response = await server.request_handlers[ListToolsRequest](ListToolsRequest(method="tools/list"))

        names = {tool.name for tool in response.root.tools}
        self.assertEqual(names, {"capture_screenshot", "capture_element", "list_device_presets"})

    async def test_call_tool_error_through_server(self):
        server = create_mcp_server(ToolDispatcher(MagicMock()))
        request = CallToolRequest(
            method="tools/call",
            params=CallToolRequestParams(name="capture_video", arguments={}),
        )

        response = await server.request_handlers[CallToolRequest](request)

        self.assertTrue(response.root.isError)
        self.assertIn("Unknown tool: capture_video", response.root.content[0].text)

    async def test_list_device_presets_through_server(self):
        server = create_mcp_server(ToolDispatcher(MagicMock()))
        request = CallToolRequest(
            method="tools/call",
            params=CallToolRequestParams(name="list_device_presets", arguments={}),
        )

        response = await server.request_handlers[CallToolRequest](request)

        self.assertFalse(response.root.isError)
        self.assertEqual(response.root.content[0].text, format_device_presets())


if __name__ == "__main__":
    unittest.main()
