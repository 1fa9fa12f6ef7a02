#!/usr/bin/env python3
"""
Formatters for Screenshot Module CLI

This module provides rich formatting utilities for the CLI presentation layer.
It includes tables, panels, and progress indicators for a better user experience.

This module is part of the Presentation Layer and should only depend on
Core Layer components, not on Integration Layer.

Sample input:
- Capture metadata and the path of the saved PNG
- Device preset catalogue
- Error messages

Expected output:
- Rich formatted tables, panels, and progress indicators
"""

import json
import os
from typing import Any, Dict, Optional

from pydantic import BaseModel
from rich.console import Console
from rich.panel import Panel
from rich.progress import Progress, SpinnerColumn, TextColumn, TimeElapsedColumn
from rich.syntax import Syntax
from rich.table import Table
from rich.text import Text


# Initialize console
console = Console()


# Color scheme
COLORS = {
    "success": "green",
    "error": "red",
    "info": "blue",
    "path": "cyan",
    "highlight": "magenta",
    "dim": "grey70",
}


class SuccessResponse(BaseModel):
    success: bool = True
    data: Dict[str, Any]


class ErrorResponse(BaseModel):
    success: bool = False
    error: str
    code: Optional[str] = None
    details: Optional[Dict[str, Any]] = None


def format_cli_response(
    success: bool,
    data: Optional[Dict[str, Any]] = None,
    error: Optional[str] = None,
    code: Optional[str] = None,
    details: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    """
    Format a standardized CLI response.

    Args:
        success: Whether the operation was successful
        data: Response data (for successful operations)
        error: Error message (for failed operations)
        code: Error code (for failed operations)
        details: Error details (for failed operations)

    Returns:
        Dict[str, Any]: Formatted response
    """
    if success and data is not None:
        return SuccessResponse(data=data).model_dump()
    elif not success and error is not None:
        return ErrorResponse(error=error, code=code, details=details).model_dump(exclude_none=True)
    else:
        return {"success": success}


def print_capture_result(metadata: Dict[str, Any], file_path: str, title: str = "Screenshot Captured Successfully") -> None:
    """
    Format and print a capture result to the console.

    Args:
        metadata: Capture metadata
        file_path: Where the PNG was written
        title: Panel title
    """
    info = Text()
    info.append("URL: ", style=COLORS["dim"])
    info.append(f"{metadata.get('url', 'Unknown')}\n", style=COLORS["highlight"])

    if "title" in metadata:
        info.append("Title: ", style=COLORS["dim"])
        info.append(f"{metadata['title'] or '(untitled)'}\n")
    if "selector" in metadata:
        info.append("Selector: ", style=COLORS["dim"])
        info.append(f"{metadata['selector']}\n", style=COLORS["highlight"])

    info.append("Image: ", style=COLORS["dim"])
    info.append(f"{metadata.get('image_width')}x{metadata.get('image_height')}\n", style=COLORS["info"])
    info.append("File: ", style=COLORS["dim"])
    info.append(file_path, style=COLORS["path"])

    if os.path.exists(file_path):
        size_kb = os.path.getsize(file_path) / 1024
        info.append("\nSize: ", style=COLORS["dim"])
        info.append(f"{size_kb:.1f} KB", style=COLORS["info"])

    panel = Panel(
        info,
        title=f"[bold green]{title}",
        border_style=COLORS["success"],
        padding=(1, 2)
    )

    console.print(panel)


def print_error(message: str, title: str = "Error") -> None:
    """
    Format and print error message to the console.

    Args:
        message: Error message
        title: Panel title
    """
    panel = Panel(
        Text(message, style=COLORS["error"]),
        title=f"[bold {COLORS['error']}]{title}",
        border_style=COLORS["error"],
        padding=(1, 2)
    )

    console.print(panel)


def print_info(message: str, title: str = "Info") -> None:
    """
    Format and print info message to the console.

    Args:
        message: Info message
        title: Panel title
    """
    panel = Panel(
        Text(message, style=COLORS["info"]),
        title=f"[bold {COLORS['info']}]{title}",
        border_style=COLORS["info"],
        padding=(1, 2)
    )

    console.print(panel)


def print_json(data: Dict[str, Any], title: str = "JSON Output") -> None:
    """
    Format and print JSON data to the console.

    Args:
        data: JSON data
        title: Panel title
    """
    json_str = json.dumps(data, indent=2, default=str)
    syntax = Syntax(json_str, "json", theme="monokai", line_numbers=True)

    panel = Panel(
        syntax,
        title=f"[bold {COLORS['info']}]{title}",
        border_style=COLORS["info"],
        padding=(1, 2)
    )

    console.print(panel)


def print_presets_table(presets: Dict[str, Dict[str, Any]]) -> None:
    """
    Format and print device presets as a table.

    Args:
        presets: Dictionary of device presets
    """
    table = Table(title="Available Device Presets")

    table.add_column("Preset", style=COLORS["highlight"])
    table.add_column("Width", justify="right", style=COLORS["info"])
    table.add_column("Height", justify="right", style=COLORS["info"])
    table.add_column("Scale", justify="right", style=COLORS["info"])
    table.add_column("Mobile", justify="center")
    table.add_column("Touch", justify="center")

    for name, preset in presets.items():
        table.add_row(
            name,
            str(preset["width"]),
            str(preset["height"]),
            f"{preset['device_scale_factor']}x",
            "yes" if preset["is_mobile"] else "no",
            "yes" if preset["has_touch"] else "no"
        )

    console.print(table)


def create_progress() -> Progress:
    """
    Create a spinner for operations of unknown length.

    Returns:
        Progress: Rich progress indicator
    """
    return Progress(
        SpinnerColumn(),
        TextColumn("[bold blue]{task.description}"),
        TimeElapsedColumn(),
        transient=True,
    )
