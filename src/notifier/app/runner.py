"""Line-by-line notification runner used by the command-line tool."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import TextIO

import click

from notifier.config.models import NotifierConfig
from notifier.core.cancellation import CancellationToken
from notifier.core.dispatcher import NotificationClient
from notifier.core.options import ClientOptions
from notifier.core.result import CallResult

logger = logging.getLogger(__name__)

type ClientFactory = Callable[[str, ClientOptions], NotificationClient]


@dataclass(slots=True)
class RunSummary:
    """Counts of settled notifications for one run."""

    submitted: int = 0
    sent: int = 0
    failed: int = 0
    canceled: int = 0
    aborted: bool = False


class NotificationRunner:
    """Send one notification per non-blank input line.

    Lines are submitted in order with ``interval_seconds`` between
    consecutive messages. Outcomes are reported as they settle: failures on
    the error stream (cancellations excepted), successes only in verbose mode.
    """

    def __init__(
        self,
        config: NotifierConfig,
        *,
        verbose: bool = False,
        client_factory: ClientFactory | None = None,
        out: TextIO | None = None,
        err: TextIO | None = None,
    ) -> None:
        """Initialize the runner.

        Args:
            config: Validated tool configuration
            verbose: Report successes and progress messages
            client_factory: Factory building the NotificationClient
            out: Stream for regular output (default: stdout)
            err: Stream for error output (default: stderr)
        """
        self.config: NotifierConfig = config
        self.verbose: bool = verbose
        self._client_factory: ClientFactory = client_factory or (
            lambda url, options: NotificationClient(url, options)
        )
        self._out: TextIO | None = out
        self._err: TextIO | None = err
        self._summary: RunSummary = RunSummary()

    async def run(self, source: TextIO, token: CancellationToken | None = None) -> RunSummary:
        """Read ``source`` to the end (or until cancelled) and notify each line.

        Args:
            source: Text stream with one message per line
            token: Cancellation token shared by every submitted call

        Returns:
            Summary of the run once every submitted notification has settled
        """
        token = token or CancellationToken()
        self._summary = RunSummary()
        reporters: set[asyncio.Task[None]] = set()

        async with self._client_factory(self.config.url, self.config.client_options()) as client:
            first = True
            while not token.cancelled:
                line = await asyncio.to_thread(source.readline)
                if not line:
                    break

                text = line.strip()
                if not text:
                    continue

                if not first and await self._pause(token):
                    break
                first = False

                self._echo(f"Sending message: {text}")
                result = await client.notify(token, text)
                self._summary.submitted += 1

                reporter = asyncio.create_task(self._report(text, result))
                reporters.add(reporter)
                reporter.add_done_callback(reporters.discard)

            if token.cancelled:
                self._summary.aborted = True
                if self.verbose:
                    self._echo("Aborting...")

            await client.drain()
            _ = await asyncio.gather(*tuple(reporters))

        logger.debug(
            "Run finished",
            extra={
                "submitted": self._summary.submitted,
                "sent": self._summary.sent,
                "failed": self._summary.failed,
                "canceled": self._summary.canceled,
            },
        )
        return self._summary

    async def _pause(self, token: CancellationToken) -> bool:
        """Wait for the configured interval.

        Returns:
            True if the token fired during the wait
        """
        try:
            async with asyncio.timeout(self.config.interval_seconds):
                await token.wait()
        except TimeoutError:
            return False
        return True

    async def _report(self, text: str, result: CallResult) -> None:
        outcome = await result.wait()
        if outcome.success:
            self._summary.sent += 1
            if self.verbose:
                self._echo(f'Message "{text}" was sent')
        elif outcome.canceled:
            self._summary.canceled += 1
        else:
            self._summary.failed += 1
            self._echo(f'Error sending message "{text}": {outcome.error}', err=True)

    def _echo(self, message: str, *, err: bool = False) -> None:
        stream = self._err if err else self._out
        click.echo(message, file=stream, err=err and stream is None)
