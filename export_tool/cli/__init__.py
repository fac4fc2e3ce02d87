"""Command line interface for export-tool"""

from .main import cli, main

__all__ = ["cli", "main"]
