#!/usr/bin/env python3
"""
Utility Functions for Screenshot Module

This module provides common utility functions used by other core modules.
It includes input validation for URLs, viewports and CSS selectors, error
response formatting and log-safe truncation of large values.

This module is part of the Core Layer and should have no dependencies on
Presentation or Integration layers.

Sample input:
- validate_url("https://Example.com/path")
- validate_viewport({"width": 50, "height": 9000})
- sanitize_selector("  .nav-bar  ")

Expected output:
- "https://example.com/path"
- InvalidViewportError("Width must be between 100 and 5000 pixels, Height must be ...")
- ".nav-bar"
"""

import re
from typing import Any, Dict, Mapping, Optional
from urllib.parse import urlsplit, urlunsplit

from loguru import logger

from screenshot_mcp.core.constants import (
    DANGEROUS_SELECTOR_PATTERNS,
    LOG_MAX_STR_LEN,
    VIEWPORT_SETTINGS,
)
from screenshot_mcp.core.errors import (
    InvalidUrlError,
    InvalidViewportError,
    ScreenshotError,
    UnsafeSelectorError,
)

ALLOWED_SCHEMES = ("http", "https")

_DANGEROUS_SELECTOR_RES = [re.compile(pattern, re.IGNORECASE) for pattern in DANGEROUS_SELECTOR_PATTERNS]


def validate_url(url: Any) -> str:
    """
    Validates an absolute http(s) URL and returns its canonical form.

    Scheme and host are lower-cased; path, query and fragment are kept as given.

    Args:
        url: Raw URL supplied by the caller

    Returns:
        str: Canonical URL

    Raises:
        InvalidUrlError: If the URL is malformed or not http/https
    """
    if not isinstance(url, str) or not url.strip():
        raise InvalidUrlError(f"Invalid URL: expected a non-empty string, got {url!r}")

    raw = url.strip()
    if any(ch.isspace() for ch in raw):
        raise InvalidUrlError(f"Invalid URL: {raw!r} contains whitespace")

    try:
        parts = urlsplit(raw)
        # Accessing port validates it
        parts.port
    except ValueError as e:
        raise InvalidUrlError(f"Invalid URL: {str(e)}") from e

    scheme = parts.scheme.lower()
    if not scheme or not parts.netloc:
        raise InvalidUrlError(f"Invalid URL: {raw!r} is not an absolute URL")

    if scheme not in ALLOWED_SCHEMES:
        raise InvalidUrlError("Invalid URL: Only HTTP and HTTPS URLs are supported")

    if not parts.hostname:
        raise InvalidUrlError(f"Invalid URL: {raw!r} has no host")

    netloc = parts.netloc
    if "@" in netloc:
        userinfo, hostport = netloc.rsplit("@", 1)
        netloc = f"{userinfo}@{hostport.lower()}"
    else:
        netloc = netloc.lower()

    return urlunsplit((scheme, netloc, parts.path, parts.query, parts.fragment))


def _viewport_field(viewport: Any, name: str) -> Any:
    if isinstance(viewport, Mapping):
        return viewport.get(name)
    return getattr(viewport, name, None)


def validate_viewport(viewport: Any) -> None:
    """
    Validates viewport dimensions and scale factor, reporting every violation at once.

    Args:
        viewport: Mapping or object with optional ``width``, ``height`` and
            ``device_scale_factor``

    Raises:
        InvalidViewportError: If a value is outside its allowed range
    """
    min_dim = VIEWPORT_SETTINGS["MIN_DIMENSION"]
    max_dim = VIEWPORT_SETTINGS["MAX_DIMENSION"]
    errors = []

    width = _viewport_field(viewport, "width")
    if width is not None and not (min_dim <= width <= max_dim):
        errors.append(f"Width must be between {min_dim} and {max_dim} pixels")

    height = _viewport_field(viewport, "height")
    if height is not None and not (min_dim <= height <= max_dim):
        errors.append(f"Height must be between {min_dim} and {max_dim} pixels")

    min_scale = VIEWPORT_SETTINGS["MIN_SCALE_FACTOR"]
    max_scale = VIEWPORT_SETTINGS["MAX_SCALE_FACTOR"]
    scale = _viewport_field(viewport, "device_scale_factor")
    if scale is not None and not (min_scale <= scale <= max_scale):
        errors.append(f"Device scale factor must be between {min_scale} and {max_scale}")

    if errors:
        raise InvalidViewportError(
            ", ".join(errors),
            {"width": width, "height": height, "device_scale_factor": scale},
        )


def sanitize_selector(selector: Any) -> Optional[str]:
    """
    Screens a CSS selector for script injection patterns.

    A missing selector is not an error here: callers decide whether absence
    is acceptable and raise InvalidSelectorError themselves.

    Args:
        selector: CSS selector supplied by the caller

    Returns:
        Optional[str]: Trimmed selector, or None if no usable selector was given

    Raises:
        UnsafeSelectorError: If the selector contains a dangerous pattern
    """
    if not selector or not isinstance(selector, str):
        return None

    for pattern in _DANGEROUS_SELECTOR_RES:
        if pattern.search(selector):
            logger.warning(f"Rejected selector matching {pattern.pattern!r}")
            raise UnsafeSelectorError(
                "Invalid selector: contains dangerous patterns",
                {"pattern": pattern.pattern},
            )

    return selector.strip() or None


def format_error_response(error: BaseException) -> Dict[str, Any]:
    """
    Creates a standardized error response.

    Args:
        error: Exception raised by a core operation

    Returns:
        Dict[str, Any]: Error response dictionary with error, code and details
    """
    if isinstance(error, ScreenshotError):
        return error.to_dict()
    return {"error": str(error), "code": "UNEXPECTED_ERROR", "details": {}}


def truncate_large_value(value: Any, max_str_len: int = LOG_MAX_STR_LEN) -> Any:
    """
    Truncates large string values for logging purposes.

    Args:
        value: The value to truncate
        max_str_len: Maximum string length to allow

    Returns:
        Truncated string, or the value unchanged if it is not a long string
    """
    if isinstance(value, str) and len(value) > max_str_len:
        return f"{value[:max_str_len]}... [truncated, {len(value)} chars total]"
    return value


if __name__ == "__main__":
    """Validate utility functions"""
    import sys

    # List to track all validation failures
    all_validation_failures = []
    total_tests = 0

    # Test 1: validate_url accepts canonical https
    total_tests += 1
    if validate_url("https://example.com") != "https://example.com":
        all_validation_failures.append("validate_url test: canonical URL was modified")

    # Test 2: validate_url rejects other schemes
    total_tests += 1
    for bad_url in ["ftp://example.com", "javascript:alert(1)", "not a url", "file:///etc/passwd"]:
        try:
            validate_url(bad_url)
            all_validation_failures.append(f"validate_url test: {bad_url} accepted")
        except InvalidUrlError:
            pass

    # Test 3: validate_viewport boundaries
    total_tests += 1
    try:
        validate_viewport({"width": 100, "height": 5000})
    except InvalidViewportError as e:
        all_validation_failures.append(f"validate_viewport test: boundary rejected: {e}")

    # Test 4: sanitize_selector
    total_tests += 1
    if sanitize_selector("  .nav-bar  ") != ".nav-bar":
        all_validation_failures.append("sanitize_selector test: selector not trimmed")
    if sanitize_selector(None) is not None:
        all_validation_failures.append("sanitize_selector test: None not passed through")

    # Test 5: truncate_large_value
    total_tests += 1
    if not truncate_large_value("x" * 500).endswith("[truncated, 500 chars total]"):
        all_validation_failures.append("truncate_large_value test: value not truncated")

    # Final validation result
    if all_validation_failures:
        print(f"❌ VALIDATION FAILED - {len(all_validation_failures)} of {total_tests} tests failed:")
        for failure in all_validation_failures:
            print(f"  - {failure}")
        sys.exit(1)  # Exit with error code
    else:
        print(f"✅ VALIDATION PASSED - All {total_tests} tests produced expected results")
        print("Utility functions are validated and ready for use")
        sys.exit(0)  # Exit with success code
