#!/usr/bin/env python3
"""
Validators for Screenshot Module CLI

This module provides Typer callbacks that check option values before a
command runs, so mistakes are reported without launching a browser.

This module is part of the Presentation Layer and should only depend on
Core Layer components, not on Integration Layer.

Sample input:
- --wait-for "selector:#app", --preset tablet, --width 50

Expected output:
- {"type": "selector", "value": "#app"}, "tablet", an error panel and exit code 1
"""

import os
from typing import Any, Dict, Optional

import typer
from loguru import logger

from screenshot_mcp.core.constants import (
    DEVICE_PRESETS,
    VIEWPORT_SETTINGS,
    WAIT_TYPES,
    WAIT_UNTIL_OPTIONS,
)
from screenshot_mcp.cli.formatters import print_error


def validate_preset_option(ctx: typer.Context, value: Optional[str]) -> Optional[str]:
    """
    Typer callback for validating the device preset.

    Args:
        ctx: Typer context
        value: Preset name from CLI

    Returns:
        Optional[str]: Validated preset name
    """
    if value is None or value in DEVICE_PRESETS:
        return value

    print_error(f"Invalid preset: {value}. Must be one of {', '.join(DEVICE_PRESETS)}.")
    raise typer.Exit(1)


def validate_dimension_option(ctx: typer.Context, value: Optional[int]) -> Optional[int]:
    """
    Typer callback for validating width and height.

    Args:
        ctx: Typer context
        value: Pixel size from CLI

    Returns:
        Optional[int]: Validated size
    """
    min_dim = VIEWPORT_SETTINGS["MIN_DIMENSION"]
    max_dim = VIEWPORT_SETTINGS["MAX_DIMENSION"]
    if value is None or min_dim <= value <= max_dim:
        return value

    print_error(f"Invalid dimension: {value}. Must be between {min_dim} and {max_dim} pixels.")
    raise typer.Exit(1)


def validate_scale_option(ctx: typer.Context, value: Optional[float]) -> Optional[float]:
    min_scale = VIEWPORT_SETTINGS["MIN_SCALE_FACTOR"]
    max_scale = VIEWPORT_SETTINGS["MAX_SCALE_FACTOR"]
    if value is None or min_scale <= value <= max_scale:
        return value

    print_error(f"Invalid scale factor: {value}. Must be between {min_scale} and {max_scale}.")
    raise typer.Exit(1)


def validate_wait_for_option(ctx: typer.Context, value: Optional[str]) -> Optional[Dict[str, Any]]:
    """
    Typer callback for parsing --wait-for TYPE[:VALUE].

    Only the first colon separates type from value, so selectors such as
    ``selector:a:hover`` keep their own colons.

    Args:
        ctx: Typer context
        value: Raw option value

    Returns:
        Optional[Dict[str, Any]]: {"type": ..., "value": ...} or None
    """
    if value is None:
        return None

    wait_type, _, wait_value = value.partition(":")
    wait_type = wait_type.strip().lower()
    if wait_type not in WAIT_TYPES:
        logger.error(f"Invalid wait condition: {value}")
        print_error(f"Invalid wait type: {wait_type}. Must be one of {', '.join(WAIT_TYPES)}.")
        raise typer.Exit(1)

    return {"type": wait_type, "value": wait_value or None}


def validate_wait_until_option(ctx: typer.Context, value: str) -> str:
    if value in WAIT_UNTIL_OPTIONS:
        return value

    print_error(f"Invalid wait-until event: {value}. Must be one of {', '.join(WAIT_UNTIL_OPTIONS)}.")
    raise typer.Exit(1)


def validate_output_path(ctx: typer.Context, value: Optional[str]) -> Optional[str]:
    """
    Typer callback for validating the output file path.

    Args:
        ctx: Typer context
        value: Output path from CLI

    Returns:
        Optional[str]: Output path whose directory exists
    """
    if value is None:
        return None

    directory = os.path.dirname(value)
    try:
        if directory:
            os.makedirs(directory, exist_ok=True)
        return value
    except OSError as e:
        print_error(f"Cannot create output directory: {directory}. Error: {str(e)}")
        raise typer.Exit(1)


def validate_json_output(ctx: typer.Context, value: bool) -> bool:
    """
    Typer callback for validating JSON output option.

    Args:
        ctx: Typer context
        value: JSON output flag from CLI

    Returns:
        bool: Validated JSON output flag
    """
    # Store in context for other callbacks to access
    ctx.ensure_object(dict)
    ctx.obj["json_output"] = value
    return value
