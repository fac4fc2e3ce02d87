"""CLI utilities"""

from .output import (
    console,
    format_export_result,
    format_json,
    format_status,
    format_yaml_text,
    print_error,
    print_success,
    print_warning,
)

__all__ = [
    "console",
    "format_export_result",
    "format_json",
    "format_status",
    "format_yaml_text",
    "print_error",
    "print_success",
    "print_warning",
]
