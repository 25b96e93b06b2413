"""Command-line interface for the Bitcoin ticker."""

import sys
import json
from typing import Optional
import click
import structlog

from btc_ticker.models.config import TickerConfig
from btc_ticker.core.display import DisplayLoop
from btc_ticker.core.fetcher import ResourceFetcher
from btc_ticker.core.presenter import ConsolePresenter, RecordingPresenter
from btc_ticker.core.snapshot_builder import SnapshotBuilder
from btc_ticker.core.ticker import Ticker
from btc_ticker.utils.logging import setup_logging

logger = structlog.get_logger(__name__)


@click.group()
@click.option('--env-file', '-e', type=click.Path(exists=True),
              help='Path to a .env configuration file')
@click.option('--log-level', '-l', default=None,
              type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR']),
              help='Logging level')
@click.pass_context
def cli(ctx, env_file: Optional[str], log_level: Optional[str]):
    """Bitcoin price and block height ticker."""
    ctx.ensure_object(dict)

    try:
        if env_file:
            config = TickerConfig(_env_file=env_file)
        else:
            config = TickerConfig()

        if log_level:
            config.log_level = log_level

    except Exception as e:
        click.echo(f"Error loading configuration: {e}", err=True)
        sys.exit(1)

    setup_logging(config)
    ctx.obj['config'] = config


@cli.command()
@click.option('--tick', '-t', type=click.FloatRange(min=0, min_open=True), default=None,
              help='Display refresh interval in seconds')
@click.option('--line-mode', is_flag=True,
              help='Print each new status on its own line')
@click.pass_context
def run(ctx, tick: Optional[float], line_mode: bool):
    """Poll both endpoints and keep the status line fresh."""
    config = ctx.obj['config']
    if tick is not None:
        config.tick_seconds = tick

    ticker = Ticker(config, ConsolePresenter(line_mode=line_mode))
    try:
        ticker.run()
    except KeyboardInterrupt:
        click.echo("")


@cli.command()
@click.option('--json', 'as_json', is_flag=True, help='Print the snapshot as JSON')
@click.pass_context
def snapshot(ctx, as_json: bool):
    """Fetch both endpoints once and print the result."""
    config = ctx.obj['config']

    fetcher = ResourceFetcher.from_config(config)
    try:
        snap = SnapshotBuilder.from_fetcher(fetcher, merge_policy=config.merge_policy).build_snapshot()
    finally:
        fetcher.close()

    if as_json:
        click.echo(json.dumps(snap.to_dict(), indent=2))
    else:
        presenter = RecordingPresenter()
        display = DisplayLoop(presenter)
        display.receive(snap)
        display.tick(snap.fetched_at)
        if presenter.current is not None:
            click.echo(presenter.current)

    if not snap.has_data:
        sys.exit(1)


@cli.command()
@click.pass_context
def config(ctx):
    """Show the effective configuration."""
    click.echo(json.dumps(ctx.obj['config'].model_dump(), indent=2, default=str))


@cli.command()
def version():
    """Show version information."""
    from btc_ticker import __version__, __description__

    click.echo(f"Bitcoin Ticker v{__version__}")
    click.echo(__description__)


def main():
    cli(obj={})


if __name__ == '__main__':
    main()
