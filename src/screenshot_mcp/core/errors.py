#!/usr/bin/env python3
"""
Error Types for Screenshot Module

Every failure the capture core can report is a subclass of ScreenshotError
carrying a human readable message, a machine readable code and a details
dictionary. Callers branch on the class or on ``code``, never on the message.

This module is part of the Core Layer and should have no dependencies on
Presentation or Integration layers.

Sample input:
- raise InvalidUrlError("Invalid URL: Only HTTP and HTTPS URLs are supported")

Expected output:
- Exception with code "INVALID_URL" and an empty details dictionary
"""

from enum import Enum
from typing import Any, Dict, Optional


class ErrorCode(str, Enum):
    """
    Machine readable error codes.
    """
    SCREENSHOT_ERROR = "SCREENSHOT_ERROR"
    INVALID_URL = "INVALID_URL"
    INVALID_VIEWPORT = "INVALID_VIEWPORT"
    INVALID_SELECTOR = "INVALID_SELECTOR"
    UNSAFE_SELECTOR = "UNSAFE_SELECTOR"
    INVALID_WAIT_CONDITION = "INVALID_WAIT_CONDITION"
    TIMEOUT = "TIMEOUT"
    RATE_LIMIT_EXCEEDED = "RATE_LIMIT_EXCEEDED"
    ELEMENT_NOT_FOUND = "ELEMENT_NOT_FOUND"
    IMAGE_METADATA_ERROR = "IMAGE_METADATA_ERROR"
    IMAGE_RESIZE_ERROR = "IMAGE_RESIZE_ERROR"
    CAPTURE_FAILED = "CAPTURE_FAILED"


class ScreenshotError(Exception):
    """
    Base class for all screenshot errors.

    Args:
        message: Human readable description
        details: Extra context (original error, url, ...)
    """

    code: ErrorCode = ErrorCode.SCREENSHOT_ERROR

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details: Dict[str, Any] = details or {}

    def to_dict(self) -> Dict[str, Any]:
        """Serializable form used by the CLI and MCP layers."""
        return {
            "error": self.message,
            "code": self.code.value,
            "details": self.details,
        }


class InvalidUrlError(ScreenshotError):
    code = ErrorCode.INVALID_URL


class InvalidViewportError(ScreenshotError):
    code = ErrorCode.INVALID_VIEWPORT


class InvalidSelectorError(ScreenshotError):
    code = ErrorCode.INVALID_SELECTOR


class UnsafeSelectorError(ScreenshotError):
    code = ErrorCode.UNSAFE_SELECTOR


class InvalidWaitConditionError(ScreenshotError):
    code = ErrorCode.INVALID_WAIT_CONDITION


class WaitTimeoutError(ScreenshotError):
    code = ErrorCode.TIMEOUT


class RateLimitExceededError(ScreenshotError):
    code = ErrorCode.RATE_LIMIT_EXCEEDED


class ElementNotFoundError(ScreenshotError):
    """Raised when no element matches the requested selector."""

    code = ErrorCode.ELEMENT_NOT_FOUND

    def __init__(self, selector: str):
        super().__init__(f"Element not found: {selector}", {"selector": selector})
        self.selector = selector


class ImageMetadataError(ScreenshotError):
    code = ErrorCode.IMAGE_METADATA_ERROR


class ImageResizeError(ScreenshotError):
    code = ErrorCode.IMAGE_RESIZE_ERROR


class CaptureFailedError(ScreenshotError):
    """
    Outer wrapper for any failure during a full-page capture.

    Args:
        url: The URL exactly as the caller supplied it
        cause: The exception raised inside the capture
    """

    code = ErrorCode.CAPTURE_FAILED

    def __init__(self, url: Any, cause: BaseException):
        inner_message = getattr(cause, "message", None) or str(cause) or type(cause).__name__
        details: Dict[str, Any] = {"url": url, "original_error": inner_message}
        if isinstance(cause, ScreenshotError):
            details["original_code"] = cause.code.value
        super().__init__(f"Screenshot capture failed: {inner_message}", details)
        self.url = url
        self.cause = cause
