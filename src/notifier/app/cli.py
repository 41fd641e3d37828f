"""Command-line interface for the notifier tool.

Calls the notification URL for each line read from FILE or STDIN, with at
most ``--parallel`` calls in flight and ``--interval`` between messages.
SIGINT cancels the calls that have not started yet and stops reading input.
"""

from __future__ import annotations

import asyncio
import logging
import signal
import sys
from contextlib import ExitStack
from pathlib import Path
from typing import TextIO

import click

from notifier.app.runner import NotificationRunner, RunSummary
from notifier.config.loader import load_config
from notifier.config.models import NotifierConfig
from notifier.core.cancellation import CancellationToken
from notifier.core.errors import ConfigurationError
from notifier.utils.formatting import parse_duration
from notifier.utils.logging import configure_logging

EXIT_SUCCESS = 0
EXIT_FAILURE = 1

try:
    from importlib.metadata import PackageNotFoundError, version

    __version__ = version("notifier")
except PackageNotFoundError:
    __version__ = "unknown"


def validate_interval(
    ctx: click.Context,  # pyright: ignore[reportUnusedParameter] # required by Click callback signature
    param: click.Parameter,  # pyright: ignore[reportUnusedParameter] # required by Click callback signature
    value: str | None,
) -> float | None:
    """Convert a duration option ("5s", "500ms") to seconds.

    Raises:
        click.BadParameter: If the value is not a valid duration
    """
    if value is None:
        return None
    try:
        return parse_duration(value)
    except ValueError as exc:
        raise click.BadParameter(str(exc)) from exc


def _usage_error(ctx: click.Context, message: str | None = None) -> None:
    if message:
        click.echo(f"{message}\n", err=True)
    click.echo(ctx.get_help(), err=True)
    ctx.exit(EXIT_FAILURE)


async def _run_with_signals(runner: NotificationRunner, source: TextIO) -> RunSummary:
    token = CancellationToken()
    loop = asyncio.get_running_loop()

    installed = False
    try:
        loop.add_signal_handler(signal.SIGINT, token.cancel)
        installed = True
    except (NotImplementedError, RuntimeError):
        # Signal handlers are unavailable on this platform or thread
        pass

    try:
        return await runner.run(source, token)
    finally:
        if installed:
            _ = loop.remove_signal_handler(signal.SIGINT)


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.argument("files", nargs=-1, type=click.Path(path_type=Path, dir_okay=False))
@click.option("--url", "-u", envvar="NOTIFIER_URL", help="Notification URL (env: NOTIFIER_URL).")
@click.option(
    "--interval",
    "-i",
    callback=validate_interval,
    help="Notification interval, e.g. 5s or 500ms (default: 5s).",
)
@click.option(
    "--parallel",
    "-p",
    type=click.IntRange(min=1),
    default=None,
    help="Max notifications in parallel (default: 1000).",
)
@click.option("--user-agent", default=None, help="User-Agent header sent with each notification.")
@click.option(
    "--timeout",
    callback=validate_interval,
    help="Per-request timeout, e.g. 10s (default: none).",
)
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(path_type=Path, dir_okay=False),
    default=None,
    help="YAML configuration file; command-line options take precedence.",
)
@click.option("--verbose", "-v", is_flag=True, help="Verbose mode.")
@click.version_option(version=__version__, prog_name="notifier")
@click.pass_context
def cli(
    ctx: click.Context,
    files: tuple[Path, ...],
    url: str | None,
    interval: float | None,
    parallel: int | None,
    user_agent: str | None,
    timeout: float | None,
    config_path: Path | None,
    verbose: bool,
) -> None:
    """Call the notification URL for each line read from FILE or STDIN.

    Examples:

        # Notify every line of messages.txt, one every second
        notifier --url https://hooks.example.com/notify --interval 1s messages.txt

        # Read messages from STDIN with at most 10 calls in flight
        tail -f app.log | notifier --url https://hooks.example.com/notify -p 10
    """
    if len(files) > 1:
        _usage_error(ctx)

    if url is None and config_path is None:
        _usage_error(ctx, "The notification url is required")

    try:
        config: NotifierConfig = load_config(
            config_path,
            overrides={
                "url": url,
                "interval_seconds": interval,
                "max_parallel": parallel,
                "user_agent": user_agent,
                "request_timeout_seconds": timeout,
                "log_level": "DEBUG" if verbose else None,
            },
        )
    except ConfigurationError as exc:
        click.echo(f"Configuration error:\n{exc}", err=True)
        ctx.exit(EXIT_FAILURE)

    configure_logging(log_level=config.log_level)
    logger = logging.getLogger(__name__)

    with ExitStack() as stack:
        if files:
            file_name = files[0]
            if verbose:
                click.echo(f"Opening {file_name}...")
            try:
                source: TextIO = stack.enter_context(file_name.open("r", encoding="utf-8"))
            except OSError as exc:
                click.echo(f"Unable to open file: {exc}", err=True)
                ctx.exit(EXIT_FAILURE)
        else:
            if verbose:
                click.echo("Reading from stdin")
            source = sys.stdin

        runner = NotificationRunner(config, verbose=verbose)
        summary = asyncio.run(_run_with_signals(runner, source))

    logger.debug(
        "Notifier finished",
        extra={"submitted": summary.submitted, "aborted": summary.aborted},
    )
    ctx.exit(EXIT_SUCCESS)


def main() -> None:
    """Console script entry point."""
    cli()
