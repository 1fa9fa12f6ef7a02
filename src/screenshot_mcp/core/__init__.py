"""
Core Layer for Screenshot Module

This package contains the core business logic for web page screenshots.
It provides validation, the capture orchestrator, the wait protocol and
image normalization.

The core layer is designed to be:
1. Independent of UI or integration concerns
2. Fully testable in isolation with a fake browser session
3. Focused on business logic only

Usage:
    from screenshot_mcp.core import ScreenshotCapture
    capture = ScreenshotCapture()
    result = await capture.capture_screenshot("https://example.com", viewport={"preset": "mobile"})
    await capture.shutdown()
"""

# Core constants and settings
from screenshot_mcp.core.constants import (
    DEVICE_PRESETS,
    VIEWPORT_SETTINGS,
    IMAGE_SETTINGS,
    CAPTURE_SETTINGS
)
from screenshot_mcp.core.config import CaptureSettings, load_settings

# Errors
from screenshot_mcp.core.errors import (
    ErrorCode,
    ScreenshotError,
    InvalidUrlError,
    InvalidViewportError,
    InvalidSelectorError,
    UnsafeSelectorError,
    InvalidWaitConditionError,
    WaitTimeoutError,
    RateLimitExceededError,
    ElementNotFoundError,
    ImageMetadataError,
    ImageResizeError,
    CaptureFailedError
)

# Models
from screenshot_mcp.core.models import (
    CaptureRequest,
    CaptureResult,
    ViewportConfig,
    ViewportOptions,
    WaitCondition
)

# Capture
from screenshot_mcp.core.capture import ScreenshotCapture
from screenshot_mcp.core.browser import BrowserSession

# Image processing
from screenshot_mcp.core.image_processing import normalize_image_size

# Utility functions
from screenshot_mcp.core.utils import (
    validate_url,
    validate_viewport,
    sanitize_selector,
    format_error_response
)

__all__ = [
    # Constants
    'DEVICE_PRESETS',
    'VIEWPORT_SETTINGS',
    'IMAGE_SETTINGS',
    'CAPTURE_SETTINGS',
    'CaptureSettings',
    'load_settings',

    # Errors
    'ErrorCode',
    'ScreenshotError',
    'InvalidUrlError',
    'InvalidViewportError',
    'InvalidSelectorError',
    'UnsafeSelectorError',
    'InvalidWaitConditionError',
    'WaitTimeoutError',
    'RateLimitExceededError',
    'ElementNotFoundError',
    'ImageMetadataError',
    'ImageResizeError',
    'CaptureFailedError',

    # Models
    'CaptureRequest',
    'CaptureResult',
    'ViewportConfig',
    'ViewportOptions',
    'WaitCondition',

    # Capture
    'ScreenshotCapture',
    'BrowserSession',

    # Image processing
    'normalize_image_size',

    # Utilities
    'validate_url',
    'validate_viewport',
    'sanitize_selector',
    'format_error_response'
]
