"""Run command implementation"""

import uuid
from pathlib import Path

import click

from ..utils.output import console, format_export_result, format_json
from ...api.exporter import Exporter
from ...constants import EMOJI_PACKAGE, ExportFormat


@click.command()
@click.argument('source_dir', type=click.Path(path_type=Path, file_okay=False))
@click.option(
    '--format', '-f', 'export_format',
    default=ExportFormat.PLATFORM_NATIVE.value,
    show_default=True,
    help=f"Export format ({', '.join(ExportFormat.values())})"
)
@click.option(
    '--event-id', '-e',
    help='Task identifier (default: random)'
)
@click.option(
    '--no-register',
    is_flag=True,
    help='Do not create a status record for new tasks'
)
@click.option(
    '--json', 'as_json',
    is_flag=True,
    help='Print the result as JSON'
)
@click.pass_obj
def run(ctx, source_dir, export_format, event_id, no_register, as_json):
    """Export the application in a workspace

    The workspace must contain metadata.json. The archive is written
    next to it as <workspace>.zip.

    Examples:
        export-tool run ./exports/myapp
        export-tool run ./exports/myapp --format docker-compose -e 5b3c...
    """
    event_id = event_id or uuid.uuid4().hex

    if not as_json:
        console.print(f"{EMOJI_PACKAGE} Exporting [cyan]{source_dir}[/cyan] as [bold]{export_format}[/bold]")

    exporter = Exporter(ctx.config)
    result = exporter.export(event_id, export_format, source_dir, register=not no_register)

    if as_json:
        format_json(result.to_dict())
    else:
        format_export_result(result)

    if not result.success:
        raise click.exceptions.Exit(1)
