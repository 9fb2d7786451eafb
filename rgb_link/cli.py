"""
Connection check CLI utility.

Provides commands to probe a server with the connection manager and to show
the effective connection settings.
"""

import sys
import json
from typing import Optional

import click
from pydantic import ValidationError

from .config_loader import ConnectionSettings, load_settings, create_manager
from .error_handler import ClientConnectionError, handle_connection_error
from .logging_config import configure_cli_logging, get_logger


logger = get_logger(__name__)


@click.group()
@click.option('--env-file', default=None, help='Environment file to load settings from')
@click.option('--verbose', '-v', is_flag=True, help='Enable debug logging')
@click.pass_context
def cli(ctx: click.Context, env_file: Optional[str], verbose: bool):
    """rgb-link connection utilities."""
    configure_cli_logging(verbose=verbose)
    ctx.ensure_object(dict)
    ctx.obj['env_file'] = env_file
    ctx.obj['verbose'] = verbose


def _apply_log_level(ctx: click.Context, settings: ConnectionSettings) -> None:
    # --verbose already selected DEBUG in the group callback
    if not ctx.obj['verbose']:
        configure_cli_logging(level=settings.log_level)


@cli.command()
@click.option('--host', default=None, help='Server host (overrides RGB_LINK_HOST)')
@click.option('--port', type=int, default=None, help='Server port (overrides RGB_LINK_PORT)')
@click.option('--timeout', 'timeout_ms', type=int, default=None,
              help='Connect timeout in milliseconds (overrides RGB_LINK_TIMEOUT_MS)')
@click.pass_context
def probe(ctx: click.Context, host: Optional[str], port: Optional[int], timeout_ms: Optional[int]):
    """Connect to the server and disconnect again."""
    try:
        settings = load_settings(ctx.obj['env_file'], host=host, port=port, timeout_ms=timeout_ms)
    except ValidationError as e:
        click.echo(f"Invalid configuration: {e}", err=True)
        sys.exit(2)
    _apply_log_level(ctx, settings)

    manager = create_manager(settings)
    endpoint = manager.get_endpoint()
    try:
        with manager:
            click.echo(f"✓ Connected to {endpoint}")
    except ClientConnectionError as e:
        description = handle_connection_error(e, logger)
        click.echo(f"✗ Could not connect to {endpoint}: {description}", err=True)
        sys.exit(1)


@cli.command('show-config')
@click.pass_context
def show_config(ctx: click.Context):
    """Show the effective connection settings."""
    try:
        settings = load_settings(ctx.obj['env_file'])
    except ValidationError as e:
        click.echo(f"Invalid configuration: {e}", err=True)
        sys.exit(2)
    _apply_log_level(ctx, settings)

    click.echo(json.dumps(settings.model_dump(), indent=2))


def main():
    cli(obj={})


if __name__ == '__main__':
    main()
