#!/usr/bin/env python3
"""
Command Line Interface for Screenshot Module

This module provides a CLI for the screenshot functionality using Typer and Rich,
allowing users to capture web pages and elements from the terminal with the same
core used by the MCP server.

This module is part of the Presentation Layer and should only depend on
Core Layer components, not on Integration Layer.

Sample input:
- screenshot-mcp capture https://example.com --preset mobile --output shot.png
- screenshot-mcp --json element https://example.com h1

Expected output:
- Formatted console output of operation results
- PNG files saved to disk
- Structured JSON output for machine consumption
"""

import asyncio
import base64
import os
import sys
import time
from typing import Any, Awaitable, Callable, Dict, Optional

import typer
from loguru import logger

from screenshot_mcp.core.capture import ScreenshotCapture
from screenshot_mcp.core.config import get_server_info
from screenshot_mcp.core.constants import CAPTURE_SETTINGS, DEFAULT_WAIT_UNTIL, DEVICE_PRESETS
from screenshot_mcp.core.errors import ScreenshotError
from screenshot_mcp.core.models import CaptureResult
from screenshot_mcp.cli.formatters import (
    console,
    create_progress,
    format_cli_response,
    print_capture_result,
    print_error,
    print_json,
    print_presets_table,
)
from screenshot_mcp.cli.validators import (
    validate_dimension_option,
    validate_json_output,
    validate_output_path,
    validate_preset_option,
    validate_scale_option,
    validate_wait_for_option,
    validate_wait_until_option,
)


# Initialize typer app
app = typer.Typer(
    help="Web page screenshots through a headless browser",
    rich_markup_mode="rich",
    add_completion=False
)


@app.callback()
def main(
    ctx: typer.Context,
    json_output: bool = typer.Option(
        False,
        "--json",
        help="Output results as JSON",
        callback=validate_json_output
    ),
):
    """
    Screenshot MCP Tool - Captures web pages and page elements

    The same capture core backs the MCP server started with screenshot-mcp-server.
    """
    # Initialize context object to store shared state
    ctx.ensure_object(dict)
    ctx.obj["json_output"] = json_output


def default_output_path(prefix: str = "screenshot") -> str:
    """Timestamped PNG path in the screenshots directory."""
    os.makedirs("screenshots", exist_ok=True)
    return os.path.join("screenshots", f"{prefix}_{int(time.time() * 1000)}.png")


def build_viewport(
    preset: Optional[str] = None,
    width: Optional[int] = None,
    height: Optional[int] = None,
    scale: Optional[float] = None,
    mobile: Optional[bool] = None,
    touch: Optional[bool] = None,
) -> Optional[Dict[str, Any]]:
    viewport = {
        "preset": preset,
        "width": width,
        "height": height,
        "device_scale_factor": scale,
        "is_mobile": mobile,
        "has_touch": touch,
    }
    viewport = {key: value for key, value in viewport.items() if value is not None}
    return viewport or None


def run_capture(operation: Callable[[ScreenshotCapture], Awaitable[CaptureResult]]) -> CaptureResult:
    """
    Runs one capture on a fresh orchestrator and always closes its browser.

    Args:
        operation: Coroutine function receiving the orchestrator

    Returns:
        CaptureResult: The capture result
    """
    async def _run() -> CaptureResult:
        capture = ScreenshotCapture()
        try:
            return await operation(capture)
        finally:
            await capture.shutdown()

    return asyncio.run(_run())


def handle_capture(
    ctx: typer.Context,
    description: str,
    operation: Callable[[ScreenshotCapture], Awaitable[CaptureResult]],
    output: Optional[str],
    prefix: str,
    title: str,
) -> None:
    json_output = ctx.obj.get("json_output", False)

    try:
        if not json_output:
            with create_progress() as progress:
                progress.add_task(description, total=None)
                result = run_capture(operation)
        else:
            result = run_capture(operation)

        path = output or default_output_path(prefix)
        with open(path, "wb") as f:
            f.write(base64.b64decode(result.data))
        logger.info(f"Saved screenshot to {path}")

        if json_output:
            # Base64 payload stays out of JSON output; the PNG is on disk
            print_json(format_cli_response(True, data={"file": path, "metadata": result.metadata}))
        else:
            print_capture_result(result.metadata, path, title=title)

    except ScreenshotError as e:
        logger.error(f"{description} failed: {e.message}")
        if json_output:
            print_json(format_cli_response(False, error=e.message, code=e.code.value, details=e.details))
        else:
            print_error(e.message, title=e.code.value)
        sys.exit(1)
    except Exception as e:
        logger.error(f"{description} failed: {str(e)}")
        if json_output:
            print_json(format_cli_response(False, error=str(e)))
        else:
            print_error(f"Screenshot failed: {str(e)}")
        sys.exit(1)


@app.command("capture")
def capture_command(
    ctx: typer.Context,
    url: str = typer.Argument(..., help="URL of the page to capture"),
    preset: Optional[str] = typer.Option(
        None, "--preset", "-p",
        help="Device preset: mobile, tablet or desktop (overrides other viewport options)",
        callback=validate_preset_option
    ),
    width: Optional[int] = typer.Option(
        None, "--width", "-w", help="Viewport width in pixels", callback=validate_dimension_option
    ),
    height: Optional[int] = typer.Option(
        None, "--height", help="Viewport height in pixels", callback=validate_dimension_option
    ),
    scale: Optional[float] = typer.Option(
        None, "--scale", help="Device scale factor (0.1-3)", callback=validate_scale_option
    ),
    mobile: bool = typer.Option(False, "--mobile", help="Emulate a mobile device"),
    touch: bool = typer.Option(False, "--touch", help="Enable touch events"),
    wait_for: Optional[str] = typer.Option(
        None, "--wait-for",
        help="Wait condition as TYPE[:VALUE], e.g. 'selector:#app', 'timeout:1000', 'networkidle'",
        callback=validate_wait_for_option
    ),
    wait_timeout: int = typer.Option(
        CAPTURE_SETTINGS["WAIT_TIMEOUT"], "--wait-timeout", help="Wait condition timeout in milliseconds"
    ),
    idle_time: int = typer.Option(
        CAPTURE_SETTINGS["IDLE_TIME"], "--idle-time", help="Network idle time in milliseconds"
    ),
    delay: Optional[int] = typer.Option(None, "--delay", "-d", help="Extra delay in milliseconds before capturing"),
    wait_until: str = typer.Option(
        DEFAULT_WAIT_UNTIL, "--wait-until",
        help="Navigation completion event: load, domcontentloaded, networkidle0 or networkidle2",
        callback=validate_wait_until_option
    ),
    no_standard_delay: bool = typer.Option(
        False, "--no-standard-delay", help="Skip the 2.5 second settle delay after navigation"
    ),
    output: Optional[str] = typer.Option(
        None, "--output", "-o",
        help="Output PNG path. If not provided, saves to the screenshots directory.",
        callback=validate_output_path
    ),
):
    """
    Capture a full-page screenshot of a web page.
    """
    request: Dict[str, Any] = {
        "url": url,
        "viewport": build_viewport(preset, width, height, scale, mobile or None, touch or None),
        "wait_until": wait_until,
        "standard_delay": not no_standard_delay,
        "delay": delay,
    }
    if wait_for is not None:
        request["wait_for"] = {**wait_for, "timeout": wait_timeout, "idle_time": idle_time}

    handle_capture(
        ctx,
        f"Capturing {url}",
        lambda capture: capture.capture_screenshot(request),
        output,
        prefix="screenshot",
        title="Screenshot Captured Successfully",
    )


@app.command("element")
def element_command(
    ctx: typer.Context,
    url: str = typer.Argument(..., help="URL of the page"),
    selector: str = typer.Argument(..., help="CSS selector of the element to capture"),
    preset: Optional[str] = typer.Option(
        None, "--preset", "-p",
        help="Device preset: mobile, tablet or desktop",
        callback=validate_preset_option
    ),
    width: Optional[int] = typer.Option(
        None, "--width", "-w", help="Viewport width in pixels", callback=validate_dimension_option
    ),
    height: Optional[int] = typer.Option(
        None, "--height", help="Viewport height in pixels", callback=validate_dimension_option
    ),
    no_standard_delay: bool = typer.Option(
        False, "--no-standard-delay", help="Skip the 2.5 second settle delay after navigation"
    ),
    output: Optional[str] = typer.Option(
        None, "--output", "-o",
        help="Output PNG path. If not provided, saves to the screenshots directory.",
        callback=validate_output_path
    ),
):
    """
    Capture the first element matching a CSS selector.
    """
    viewport = build_viewport(preset, width, height)

    handle_capture(
        ctx,
        f"Capturing {selector} on {url}",
        lambda capture: capture.capture_element(
            url, selector, viewport=viewport, standard_delay=not no_standard_delay
        ),
        output,
        prefix="element",
        title="Element Captured Successfully",
    )


@app.command("presets")
def presets_command(ctx: typer.Context):
    """
    Show the available device presets.
    """
    if ctx.obj.get("json_output", False):
        print_json(format_cli_response(True, data={"presets": DEVICE_PRESETS}))
    else:
        print_presets_table(DEVICE_PRESETS)


@app.command("version")
def version_command(ctx: typer.Context):
    """
    Show version information.
    """
    info = get_server_info()
    if ctx.obj.get("json_output", False):
        print_json(format_cli_response(True, data=info))
    else:
        console.print(f"[bold]{info['name']}[/bold] version [cyan]{info['version']}[/cyan]")
        console.print(info["description"])


if __name__ == "__main__":
    app()
