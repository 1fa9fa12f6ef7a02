#!/usr/bin/env python3
"""
Configuration Module for the Screenshot Server.

Description:
This module centralizes the runtime settings of the capture core. Values are
read once at startup from environment variables (optionally loaded from a
.env file) and frozen into a CaptureSettings instance.

Third-Party Package Documentation:
- python-dotenv: https://github.com/theskumar/python-dotenv

Sample Input:
Environment variables (e.g., in .env file or exported):
BROWSER_HEADLESS="true"
BROWSER_TIMEOUT="30000"
MAX_CONCURRENT_SCREENSHOTS="5"
LOG_LEVEL="INFO"

Expected Output:
CaptureSettings(headless=True, timeout_ms=30000, max_concurrent=5, log_level="INFO")
"""

import os
from typing import Any, Dict, Mapping, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict

from screenshot_mcp.core.constants import CAPTURE_SETTINGS, SERVER_NAME, SERVER_VERSION


class CaptureSettings(BaseModel):
    """Immutable settings handed to the capture orchestrator."""

    model_config = ConfigDict(frozen=True)

    headless: bool = True
    timeout_ms: int = CAPTURE_SETTINGS["DEFAULT_TIMEOUT"]
    max_concurrent: int = CAPTURE_SETTINGS["DEFAULT_MAX_CONCURRENT"]
    log_level: str = "INFO"


def _positive_int(raw: Optional[str], default: int) -> int:
    # Missing, unparseable and zero values all fall back to the default
    try:
        value = int(raw) if raw is not None else 0
    except ValueError:
        return default
    return value if value > 0 else default


def load_settings(environ: Optional[Mapping[str, str]] = None) -> CaptureSettings:
    """
    Load settings from the environment.

    Args:
        environ: Mapping to read instead of os.environ (tests)

    Returns:
        CaptureSettings: Frozen settings
    """
    if environ is None:
        # Load environment variables from .env file if it exists
        load_dotenv()
        environ = os.environ

    return CaptureSettings(
        headless=environ.get("BROWSER_HEADLESS", "true").lower() != "false",
        timeout_ms=_positive_int(environ.get("BROWSER_TIMEOUT"), CAPTURE_SETTINGS["DEFAULT_TIMEOUT"]),
        max_concurrent=_positive_int(
            environ.get("MAX_CONCURRENT_SCREENSHOTS"), CAPTURE_SETTINGS["DEFAULT_MAX_CONCURRENT"]
        ),
        log_level=environ.get("LOG_LEVEL", "INFO").upper(),
    )


def get_server_info() -> Dict[str, Any]:
    """
    Get server information.

    Returns:
        Dict[str, Any]: Server information
    """
    return {
        "name": SERVER_NAME,
        "version": SERVER_VERSION,
        "description": "Web page and element screenshots through a headless browser, exposed over MCP",
        "tools": ["capture_screenshot", "capture_element", "list_device_presets"],
    }
