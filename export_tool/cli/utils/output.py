# export_tool/cli/utils/output.py
"""Output formatting utilities"""

import json
from typing import Any, Dict, Optional

from rich.console import Console
from rich.panel import Panel
from rich.syntax import Syntax

from ...constants import EMOJI_ERROR, EMOJI_SUCCESS, EMOJI_WARNING
from ...models import ExportResult

console = Console()


def format_export_result(result: ExportResult) -> None:
    """Format and display export operation result"""
    if result.success:
        headline = "Export is up to date" if result.cached else "Export finished successfully!"
        lines = [
            f"[green]{EMOJI_SUCCESS}[/green] {headline}",
            "",
            f"[bold]Event:[/bold] {result.event_id}",
            f"[bold]Format:[/bold] {result.format}",
            f"[bold]Archive:[/bold] {result.archive_path}",
            f"[bold]Duration:[/bold] {result.duration:.1f}s",
        ]

        for key in ('components', 'plugins', 'images', 'slugs'):
            if key in result.metadata:
                lines.append(f"[bold]{key.capitalize()}:[/bold] {result.metadata[key]}")

        panel = Panel(
            "\n".join(lines),
            title="Export Result",
            border_style="green"
        )
        console.print(panel)

    else:
        panel = Panel(
            f"[red]{EMOJI_ERROR} Export failed:[/red] {result.error}",
            title=f"Export Error ({result.error_code})" if result.error_code else "Export Error",
            border_style="red"
        )
        console.print(panel)

    if result.warnings:
        console.print("\n[bold yellow]Warnings:[/bold yellow]")
        for warning in result.warnings:
            console.print(f"  {EMOJI_WARNING} {warning}")

    if not result.status_persisted:
        print_warning("The task status could not be stored")


def format_json(data: Any, title: Optional[str] = None) -> None:
    """Format and display JSON data with syntax highlighting"""
    json_str = json.dumps(data, indent=2, default=str, ensure_ascii=False)
    syntax = Syntax(json_str, "json", theme="monokai", line_numbers=False)

    if title:
        panel = Panel(syntax, title=title, border_style="blue")
        console.print(panel)
    else:
        console.print(syntax)


def format_yaml_text(text: str, title: Optional[str] = None) -> None:
    """Display YAML text with syntax highlighting"""
    syntax = Syntax(text, "yaml", theme="monokai", line_numbers=False)

    if title:
        panel = Panel(syntax, title=title, border_style="blue")
        console.print(panel)
    else:
        console.print(syntax)


def format_status(record: Dict[str, Any]) -> None:
    """Format and display a task status record"""
    status = record.get('status', 'unknown')
    color = {'success': 'green', 'failed': 'red', 'running': 'yellow'}.get(status, 'white')

    lines = [
        f"[bold]Event:[/bold] {record.get('event_id', 'N/A')}",
        f"[bold]Status:[/bold] [{color}]{status}[/{color}]",
    ]
    if record.get('format'):
        lines.append(f"[bold]Format:[/bold] {record['format']}")
    if record.get('source_dir'):
        lines.append(f"[bold]Workspace:[/bold] {record['source_dir']}")
    if record.get('created_at'):
        lines.append(f"[bold]Created:[/bold] {record['created_at']}")

    panel = Panel(
        "\n".join(lines),
        title="Export Status",
        border_style=color if color != 'white' else "blue"
    )
    console.print(panel)


def print_error(message: str, error: Optional[Exception] = None) -> None:
    """Print error message"""
    if error:
        console.print(f"[red]Error:[/red] {message}: {str(error)}")
    else:
        console.print(f"[red]Error:[/red] {message}")


def print_warning(message: str) -> None:
    """Print warning message"""
    console.print(f"[yellow]Warning:[/yellow] {message}")


def print_success(message: str) -> None:
    """Print success message"""
    console.print(f"[green]Success:[/green] {message}")
