#!/usr/bin/env python3
"""
Constants for Screenshot Module

This module defines constants used throughout the web screenshot functionality,
ensuring consistent configuration across the application: device presets,
viewport limits, capture timings and the browser launch flags.

This module is part of the Core Layer and should have no dependencies on
Presentation or Integration layers.

Sample input:
- None (module contains only constants)

Expected output:
- None (module contains only constants)
"""

from typing import Dict, Any, List

# Device presets exposed to callers by name
DEVICE_PRESETS: Dict[str, Dict[str, Any]] = {
    "mobile": {
        "width": 375,
        "height": 667,
        "device_scale_factor": 2,
        "is_mobile": True,
        "has_touch": True,
        "user_agent": (
            "Mozilla/5.0 (iPhone; CPU iPhone OS 14_0 like Mac OS X) AppleWebKit/605.1.15 "
            "(KHTML, like Gecko) Version/14.0 Mobile/15A372 Safari/604.1"
        ),
    },
    "tablet": {
        "width": 768,
        "height": 1024,
        "device_scale_factor": 2,
        "is_mobile": True,
        "has_touch": True,
        "user_agent": (
            "Mozilla/5.0 (iPad; CPU OS 14_0 like Mac OS X) AppleWebKit/605.1.15 "
            "(KHTML, like Gecko) Version/14.0 Mobile/15A372 Safari/604.1"
        ),
    },
    "desktop": {
        "width": 1920,
        "height": 1080,
        "device_scale_factor": 1,
        "is_mobile": False,
        "has_touch": False,
        "user_agent": (
            "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
            "(KHTML, like Gecko) Chrome/91.0.4472.124 Safari/537.36"
        ),
    },
}

# Viewport limits and defaults
VIEWPORT_SETTINGS: Dict[str, Any] = {
    "MIN_DIMENSION": 100,
    "MAX_DIMENSION": 5000,
    "MIN_SCALE_FACTOR": 0.1,
    "MAX_SCALE_FACTOR": 3,
    "DEFAULT_WIDTH": 1920,
    "DEFAULT_HEIGHT": 1080,
    "DEFAULT_SCALE_FACTOR": 1,
}

# Image settings for post-capture normalization
IMAGE_SETTINGS: Dict[str, Any] = {
    "MAX_DIMENSION": 8000,  # Largest width or height returned to callers
    "FORMAT": "PNG",
    "MIME_TYPE": "image/png",
}

# Capture timings (milliseconds)
CAPTURE_SETTINGS: Dict[str, int] = {
    "DEFAULT_TIMEOUT": 30000,  # Navigation and default page timeout
    "DEFAULT_MAX_CONCURRENT": 5,
    "STANDARD_DELAY": 2500,  # Settle time after navigation completes
    "WAIT_TIMEOUT": 10000,  # Default timeout for a wait condition
    "IDLE_TIME": 2000,  # Default network idle threshold
    "IDLE_POLL_INTERVAL": 100,
    "NETWORK_QUIET_WINDOW": 500,  # Quiet window for networkidle0/networkidle2
}

# Wait condition types and navigation completion events
WAIT_TYPES: List[str] = ["selector", "function", "timeout", "networkidle"]
WAIT_UNTIL_OPTIONS: List[str] = ["load", "domcontentloaded", "networkidle0", "networkidle2"]
DEFAULT_WAIT_UNTIL = "networkidle2"

# Fixed Chromium flags for sandboxing and isolation in containers.
# Single-process mode is left out: it cannot host more than one browser context.
BROWSER_ARGS: List[str] = [
    "--no-sandbox",
    "--disable-setuid-sandbox",
    "--disable-dev-shm-usage",
    "--disable-accelerated-2d-canvas",
    "--no-first-run",
    "--no-zygote",
    "--disable-gpu",
]

# Selector fragments that are never passed to the page
DANGEROUS_SELECTOR_PATTERNS: List[str] = [
    r"javascript:",
    r"on\w+=",
    r"<script",
    r"eval\(",
]

# Server identity
SERVER_NAME = "screenshot-mcp"
SERVER_VERSION = "1.0.0"

# Logging settings
LOG_MAX_STR_LEN: int = 100  # Maximum string length for truncated logging


if __name__ == "__main__":
    """Validate module constants"""
    import sys

    # List to track all validation failures
    all_validation_failures = []
    total_tests = 0

    # Test 1: Verify every preset carries the full viewport field set
    total_tests += 1
    required_keys = ["width", "height", "device_scale_factor", "is_mobile", "has_touch", "user_agent"]
    for name, preset in DEVICE_PRESETS.items():
        missing_keys = [key for key in required_keys if key not in preset]
        if missing_keys:
            all_validation_failures.append(f"DEVICE_PRESETS[{name}] missing keys: {missing_keys}")

    # Test 2: Verify presets respect viewport limits
    total_tests += 1
    for name, preset in DEVICE_PRESETS.items():
        for key in ("width", "height"):
            if not (VIEWPORT_SETTINGS["MIN_DIMENSION"] <= preset[key] <= VIEWPORT_SETTINGS["MAX_DIMENSION"]):
                all_validation_failures.append(f"DEVICE_PRESETS[{name}][{key}] out of range: {preset[key]}")

    # Test 3: Verify timings are positive
    total_tests += 1
    for key, value in CAPTURE_SETTINGS.items():
        if not isinstance(value, int) or value <= 0:
            all_validation_failures.append(f"CAPTURE_SETTINGS[{key}] should be positive integer, got {value}")

    # Test 4: Verify default wait_until is a known option
    total_tests += 1
    if DEFAULT_WAIT_UNTIL not in WAIT_UNTIL_OPTIONS:
        all_validation_failures.append(f"DEFAULT_WAIT_UNTIL {DEFAULT_WAIT_UNTIL} not in {WAIT_UNTIL_OPTIONS}")

    # Final validation result
    if all_validation_failures:
        print(f"❌ VALIDATION FAILED - {len(all_validation_failures)} of {total_tests} tests failed:")
        for failure in all_validation_failures:
            print(f"  - {failure}")
        sys.exit(1)  # Exit with error code
    else:
        print(f"✅ VALIDATION PASSED - All {total_tests} tests produced expected results")
        print("Constants are valid and ready for use")
        sys.exit(0)  # Exit with success code
