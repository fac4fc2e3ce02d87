"""CLI commands for export-tool"""

from . import compose, run, status

__all__ = [
    'compose',
    'run',
    'status',
]
