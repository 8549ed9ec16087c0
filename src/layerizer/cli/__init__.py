"""Command-line interface for layerizer.

This module provides the CLI using Typer with rich output for
user-friendly feedback and progress reporting.

Key features:
- Progress bars for layer region processing
- Verbose/quiet output modes
- Dry-run mode for inspecting slice files
- Detailed error reporting
"""

from layerizer.cli.app import cli, main

__all__ = ["cli", "main"]
