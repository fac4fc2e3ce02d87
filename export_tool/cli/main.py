# export_tool/cli/main.py
"""Main CLI entry point for export-tool"""

import sys
import logging
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.logging import RichHandler

from ..__version__ import __version__
from ..constants import APP_NAME, LOG_FORMAT
from ..api.exceptions import ConfigError
from ..models.config import ExportConfig
from ..services.config_service import ConfigService

# Import all commands
from .commands import (
    compose,
    run,
    status,
)

console = Console()


def setup_logging(verbose: bool = False, debug: bool = False, default_level: str = "WARNING") -> None:
    """Setup logging configuration

    Args:
        verbose: Enable verbose output (INFO level)
        debug: Enable debug output (DEBUG level)
        default_level: Level used when neither flag is given
    """
    if debug:
        level = logging.DEBUG
    elif verbose:
        level = logging.INFO
    else:
        level = logging.getLevelName(default_level.upper())
        if not isinstance(level, int):
            level = logging.WARNING

    # Configure rich handler
    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        handlers=[
            RichHandler(
                console=console,
                show_time=debug,
                show_path=debug,
                rich_tracebacks=True,
                tracebacks_suppress=[click]
            )
        ]
    )

    # Adjust third-party loggers
    logging.getLogger("asyncio").setLevel(logging.WARNING)
    logging.getLogger("aiofiles").setLevel(logging.WARNING)


class Context:
    """CLI context object with lazy configuration loading"""

    def __init__(self, config_path: Optional[Path] = None):
        self.config_path = config_path
        self.verbose: bool = False
        self.debug: bool = False
        self._config: Optional[ExportConfig] = None

    @property
    def config(self) -> ExportConfig:
        """Get export configuration (lazy loading)"""
        if self._config is None:
            try:
                self._config = ConfigService().load(self.config_path)
            except ConfigError as e:
                console.print(f"[red]Error:[/red] {e}")
                raise click.exceptions.Exit(1)
        return self._config


@click.group(name=APP_NAME)
@click.version_option(__version__, prog_name=APP_NAME)
@click.option('-v', '--verbose', is_flag=True, help='Enable verbose output')
@click.option('-d', '--debug', is_flag=True, help='Enable debug output')
@click.option('-q', '--quiet', is_flag=True, help='Suppress all output except errors')
@click.option(
    '-c', '--config', 'config_path',
    type=click.Path(path_type=Path, dir_okay=False),
    help='Configuration file (default: .export-tool.yaml)'
)
@click.pass_context
def cli(ctx, verbose, debug, quiet, config_path):
    """Export Tool - Bundle applications for offline delivery

    Turns an application workspace (metadata.json) into a self-contained
    archive, either in the platform-native layout or as a docker-compose
    bundle with all component images.
    """
    ctx.obj = Context(config_path)
    ctx.obj.verbose = verbose
    ctx.obj.debug = debug

    # Setup logging
    if quiet:
        logging.disable(logging.CRITICAL)
    else:
        setup_logging(verbose=verbose, debug=debug, default_level=ctx.obj.config.log_level)


# Register commands
cli.add_command(run.run)
cli.add_command(compose.compose)
cli.add_command(status.status)


def main():
    """Main entry point for the CLI application

    This function handles:
    - Keyboard interrupts
    - Unexpected exceptions with proper error display
    """
    try:
        cli(prog_name=APP_NAME)

    except KeyboardInterrupt:
        console.print("\n[yellow]Operation cancelled by user[/yellow]")
        sys.exit(130)

    except Exception as e:
        console.print(f"[red]Unexpected error: {e}[/red]")
        if '--debug' in sys.argv or '-d' in sys.argv:
            console.print_exception()
        sys.exit(1)


if __name__ == "__main__":
    main()
