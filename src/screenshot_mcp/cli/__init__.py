"""
CLI Layer for Screenshot Module

This package contains the CLI (Command Line Interface) layer for the screenshot functionality,
providing a rich interface for human users.

The CLI layer is designed to:
1. Handle user interaction concerns
2. Format outputs for human readability
3. Parse and validate command-line arguments
4. Implement CLI-specific error handling

Usage:
    from screenshot_mcp.cli import app as screenshot_app

    # Run the CLI app
    screenshot_app()
"""

# CLI application
from screenshot_mcp.cli.cli import app

# Formatters for rich output
from screenshot_mcp.cli.formatters import (
    print_capture_result,
    print_presets_table,
    print_error,
    print_info,
    print_json,
    format_cli_response,
    create_progress,
    console
)

# CLI validators
from screenshot_mcp.cli.validators import (
    validate_preset_option,
    validate_dimension_option,
    validate_scale_option,
    validate_wait_for_option,
    validate_wait_until_option,
    validate_output_path,
    validate_json_output
)

__all__ = [
    # CLI application
    'app',

    # Formatters
    'print_capture_result',
    'print_presets_table',
    'print_error',
    'print_info',
    'print_json',
    'format_cli_response',
    'create_progress',
    'console',

    # Validators
    'validate_preset_option',
    'validate_dimension_option',
    'validate_scale_option',
    'validate_wait_for_option',
    'validate_wait_until_option',
    'validate_output_path',
    'validate_json_output'
]

# Example usage
if __name__ == "__main__":
    print("""
Example usage of the screenshot CLI:

# Capture a full page
screenshot-mcp capture https://example.com --output example.png

# Emulate a phone and wait for an element
screenshot-mcp capture https://example.com --preset mobile --wait-for "selector:#app"

# Capture a single element
screenshot-mcp element https://example.com h1

# Show available device presets
screenshot-mcp presets

# Output in JSON format (for all commands)
screenshot-mcp --json presets
""")
