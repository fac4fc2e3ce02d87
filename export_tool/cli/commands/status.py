"""Status command implementation"""

import click

from ..utils.output import format_json, format_status, print_error
from ...api.exceptions import StatusPersistError
from ...api.exporter import Exporter


@click.command()
@click.argument('event_id')
@click.option(
    '--json', 'as_json',
    is_flag=True,
    help='Print the record as JSON'
)
@click.pass_obj
def status(ctx, event_id, as_json):
    """Show the stored status of an export task"""
    try:
        record = Exporter(ctx.config).status(event_id)
    except StatusPersistError as e:
        print_error(str(e))
        raise click.exceptions.Exit(1)

    if as_json:
        format_json(record)
    else:
        format_status(record)
