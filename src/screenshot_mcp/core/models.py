#!/usr/bin/env python3
"""
Data Models for Screenshot Module

Pydantic models describing capture requests and results. Request-side models
accept the camelCase field names used by MCP clients (``waitFor``,
``deviceScaleFactor``...) as well as the Python names.

This module is part of the Core Layer and should have no dependencies on
Presentation or Integration layers.

Sample input:
- CaptureRequest.model_validate({"url": "https://example.com",
                                 "viewport": {"preset": "mobile"},
                                 "waitFor": {"type": "selector", "value": "#app"}})

Expected output:
- CaptureRequest with viewport.preset == "mobile" and wait_for.type == "selector"
"""

from typing import Any, Dict, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from screenshot_mcp.core.constants import (
    CAPTURE_SETTINGS,
    DEFAULT_WAIT_UNTIL,
    DEVICE_PRESETS,
    VIEWPORT_SETTINGS,
)

WaitUntil = Literal["load", "domcontentloaded", "networkidle0", "networkidle2"]


class ViewportOptions(BaseModel):
    """Viewport as requested by a caller; every field is optional."""

    model_config = ConfigDict(populate_by_name=True)

    preset: Optional[str] = None
    width: Optional[int] = None
    height: Optional[int] = None
    device_scale_factor: Optional[float] = Field(default=None, alias="deviceScaleFactor")
    is_mobile: Optional[bool] = Field(default=None, alias="isMobile")
    has_touch: Optional[bool] = Field(default=None, alias="hasTouch")
    user_agent: Optional[str] = Field(default=None, alias="userAgent")


class ViewportConfig(BaseModel):
    """Fully resolved viewport applied to a page. Immutable once built."""

    model_config = ConfigDict(frozen=True)

    width: int = VIEWPORT_SETTINGS["DEFAULT_WIDTH"]
    height: int = VIEWPORT_SETTINGS["DEFAULT_HEIGHT"]
    device_scale_factor: float = VIEWPORT_SETTINGS["DEFAULT_SCALE_FACTOR"]
    is_mobile: bool = False
    has_touch: bool = False
    user_agent: Optional[str] = None

    @classmethod
    def from_preset(cls, name: str) -> "ViewportConfig":
        return cls(**DEVICE_PRESETS[name])

    @classmethod
    def from_options(cls, options: Optional[ViewportOptions]) -> "ViewportConfig":
        """
        Resolves request options into a concrete viewport.

        A known preset wins outright and its configuration is used verbatim;
        otherwise explicit fields are combined with the defaults.

        Args:
            options: Viewport options from the request, or None

        Returns:
            ViewportConfig: Resolved viewport (not yet validated)
        """
        if options is None:
            return cls()

        if options.preset and options.preset in DEVICE_PRESETS:
            return cls.from_preset(options.preset)

        explicit = options.model_dump(exclude={"preset"}, exclude_none=True)
        return cls(**explicit)

    def to_metadata(self) -> Dict[str, Any]:
        """Viewport echo for result metadata (user agent omitted)."""
        return self.model_dump(exclude={"user_agent"})


class WaitCondition(BaseModel):
    """
    Condition to satisfy after navigation and before the capture.

    ``type`` is kept as a plain string so an unknown kind surfaces as
    InvalidWaitConditionError from the wait protocol.
    """

    model_config = ConfigDict(populate_by_name=True)

    type: str
    value: Optional[str] = None
    timeout: int = CAPTURE_SETTINGS["WAIT_TIMEOUT"]
    idle_time: int = Field(default=CAPTURE_SETTINGS["IDLE_TIME"], alias="idleTime")

    @field_validator("value", mode="before")
    @classmethod
    def _coerce_value(cls, value: Any) -> Any:
        # Clients send numeric values for timeout/networkidle
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(int(value))
        return value


class CaptureRequest(BaseModel):
    """Full-page capture request. Transient, built once per call."""

    model_config = ConfigDict(populate_by_name=True)

    url: str
    viewport: Optional[ViewportOptions] = None
    wait_for: Optional[WaitCondition] = Field(default=None, alias="waitFor")
    delay: Optional[int] = None
    wait_until: WaitUntil = Field(default=DEFAULT_WAIT_UNTIL, alias="waitUntil")
    standard_delay: bool = Field(default=True, alias="standardDelay")


class CaptureResult(BaseModel):
    """Result of a capture: base64 PNG plus metadata."""

    success: bool = True
    data: str
    metadata: Dict[str, Any] = Field(default_factory=dict)
