"""Compose command implementation"""

from pathlib import Path

import click

from ..utils.output import format_yaml_text, print_error, print_success
from ...api.exceptions import ExportToolError
from ...api.exporter import Exporter


@click.command()
@click.argument('source_dir', type=click.Path(path_type=Path, file_okay=False, exists=True))
@click.option(
    '--output', '-o',
    type=click.Path(path_type=Path, dir_okay=False),
    help='Write the descriptor to a file instead of the terminal'
)
@click.pass_obj
def compose(ctx, source_dir, output):
    """Render the compose descriptor of a workspace

    Nothing is pulled or saved; image names are the flattened names
    the export would use.

    Examples:
        export-tool compose ./exports/myapp
        export-tool compose ./exports/myapp -o docker-compose.yaml
    """
    try:
        descriptor = Exporter(ctx.config).render_compose(source_dir)
    except ExportToolError as e:
        print_error("Failed to render compose descriptor", e)
        raise click.exceptions.Exit(1)

    text = descriptor.to_yaml()
    if output:
        output.write_text(text, encoding='utf-8')
        print_success(f"Compose descriptor written to {output}")
    else:
        format_yaml_text(text, title="docker-compose.yaml")
