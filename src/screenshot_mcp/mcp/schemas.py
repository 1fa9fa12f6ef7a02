#!/usr/bin/env python3
"""
Tool Argument Schemas for the MCP Layer

Pydantic models describing the arguments of each MCP tool. They serve two
purposes: their JSON schema (camelCase, as MCP clients send it) is published
as the tool ``inputSchema``, and incoming arguments are validated against
them before being handed to the core.

Viewport bounds and enum choices are advertised in the schema only; the core
enforces them so that every caller (CLI, MCP, Python) gets the same errors.

This module is part of the Integration Layer and can depend on Core Layer
components.

Third-party package documentation:
- Pydantic: https://docs.pydantic.dev/

Sample input:
- CaptureScreenshotArgs.model_json_schema()

Expected output:
- {"type": "object", "properties": {"url": {...}, "viewport": {...}, ...},
   "required": ["url"], ...}
"""

from typing import Any, Dict, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from screenshot_mcp.core.constants import (
    CAPTURE_SETTINGS,
    DEFAULT_WAIT_UNTIL,
    DEVICE_PRESETS,
    VIEWPORT_SETTINGS,
    WAIT_TYPES,
)
from screenshot_mcp.core.models import WaitUntil


def _bounds(minimum: float, maximum: float) -> Dict[str, Any]:
    return {"minimum": minimum, "maximum": maximum}


class ViewportArgs(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    preset: Optional[str] = Field(
        default=None,
        description="Use a device preset (overrides other viewport settings)",
        json_schema_extra={"enum": list(DEVICE_PRESETS)},
    )
    width: Optional[int] = Field(
        default=None,
        description="Viewport width in pixels",
        json_schema_extra=_bounds(VIEWPORT_SETTINGS["MIN_DIMENSION"], VIEWPORT_SETTINGS["MAX_DIMENSION"]),
    )
    height: Optional[int] = Field(
        default=None,
        description="Viewport height in pixels",
        json_schema_extra=_bounds(VIEWPORT_SETTINGS["MIN_DIMENSION"], VIEWPORT_SETTINGS["MAX_DIMENSION"]),
    )
    device_scale_factor: Optional[float] = Field(
        default=None,
        alias="deviceScaleFactor",
        description="Device scale factor",
        json_schema_extra=_bounds(VIEWPORT_SETTINGS["MIN_SCALE_FACTOR"], VIEWPORT_SETTINGS["MAX_SCALE_FACTOR"]),
    )
    is_mobile: Optional[bool] = Field(default=None, alias="isMobile", description="Emulate a mobile device")
    has_touch: Optional[bool] = Field(default=None, alias="hasTouch", description="Enable touch events")


class WaitForArgs(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    type: str = Field(
        description="Type of wait condition",
        json_schema_extra={"enum": WAIT_TYPES},
    )
    value: Optional[Union[str, int]] = Field(
        default=None,
        description="Selector, function or milliseconds, depending on the type",
    )
    timeout: int = Field(
        default=CAPTURE_SETTINGS["WAIT_TIMEOUT"],
        description="Maximum wait time in milliseconds",
    )
    idle_time: int = Field(
        default=CAPTURE_SETTINGS["IDLE_TIME"],
        alias="idleTime",
        description="Network idle time in milliseconds (networkidle only)",
    )


class CaptureScreenshotArgs(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    url: str = Field(description="The URL of the webpage to capture")
    viewport: Optional[ViewportArgs] = None
    wait_for: Optional[WaitForArgs] = Field(default=None, alias="waitFor")
    delay: Optional[int] = Field(default=None, description="Additional delay in milliseconds after the page loads")
    wait_until: WaitUntil = Field(
        default=DEFAULT_WAIT_UNTIL,
        alias="waitUntil",
        description="When to consider navigation complete",
    )
    standard_delay: bool = Field(
        default=True,
        alias="standardDelay",
        description="Apply the standard 2.5 second settle delay after the page loads",
    )


class CaptureElementArgs(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    url: str = Field(description="The URL of the webpage")
    selector: str = Field(description="CSS selector of the element to capture")
    viewport: Optional[ViewportArgs] = None
    standard_delay: bool = Field(
        default=True,
        alias="standardDelay",
        description="Apply the standard 2.5 second settle delay after the page loads",
    )


class ListDevicePresetsArgs(BaseModel):
    pass


def input_schema(model: type) -> Dict[str, Any]:
    """JSON schema for a tool argument model, using the camelCase names."""
    return model.model_json_schema(by_alias=True)
