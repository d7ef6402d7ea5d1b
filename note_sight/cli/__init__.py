"""Command-line interface for Note Sight."""

from .main import main as cli_main

__all__ = ["cli_main"]
