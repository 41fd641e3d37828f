"""Bounded-concurrency notification dispatcher.

``NotificationClient.notify`` takes one admission gate slot, spawns a task
that POSTs the payload to the configured endpoint, and immediately returns a
``CallResult`` the caller may wait on or drop.

Submission behaviour: ``notify`` itself waits on the gate, so once
``max_parallel`` calls are in flight the submitter is held back until one of
them settles. No more than ``max_parallel`` requests are ever in flight.

Cancellation: a token fired before the task runs settles the call as
``CanceledError`` without any network activity. A token fired while the
request is in flight cancels the transport call; depending on timing the
call settles as ``CanceledError`` or, if the transport failed first, as
``TransportError``. Both are valid outcomes of that race.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Callable
from functools import partial
from typing import Final, Self
from uuid import uuid4

from notifier.core.cancellation import CancellationToken
from notifier.core.errors import (
    CanceledError,
    ConfigurationError,
    NotificationError,
    TransportError,
    classify_status,
)
from notifier.core.gate import AdmissionGate, GateLease
from notifier.core.options import ClientOptions, validate_notify_url
from notifier.core.result import CallResult
from notifier.types.models import Outcome, Request
from notifier.types.protocols import Transport
from notifier.utils.http_client import AIOHTTPTransport
from notifier.utils.logging import (
    get_logger,
    log_with_context,
    reset_correlation_id,
    set_correlation_id,
)
from notifier.utils.sanitization import sanitize_url

__all__ = ["NotificationClient"]

type CallIDFactory = Callable[[], str]

CONTENT_TYPE: Final[str] = "text/plain; charset=utf-8"


class NotificationClient:
    """Deliver notifications to one endpoint with bounded concurrency.

    Example:
        >>> async with NotificationClient("https://hooks.example.com/notify") as client:
        ...     token = CancellationToken()
        ...     result = await client.notify(token, "backup finished")
        ...     outcome = await result.wait()
        ...     outcome.success
        True
    """

    def __init__(
        self,
        notify_url: str,
        options: ClientOptions | None = None,
        *,
        transport: Transport | None = None,
        call_id_factory: CallIDFactory | None = None,
        logger_obj: logging.Logger | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            notify_url: Absolute http(s) URL receiving the notifications
            options: Client options (default: ClientOptions())
            transport: Transport override (default: a new AIOHTTPTransport)
            call_id_factory: Factory for call identifiers (default: uuid4 hex)
            logger_obj: Logger override

        Raises:
            ConfigurationError: If the URL or options are invalid
        """
        try:
            self._notify_url: str = validate_notify_url(notify_url)
        except ValueError as exc:
            raise ConfigurationError(str(exc), {"notify_url": notify_url}) from exc

        if options is None:
            options = ClientOptions()
        self._options: ClientOptions = options

        self._owns_transport: bool = transport is None
        self._transport: Transport = transport or AIOHTTPTransport(
            timeout_seconds=options.request_timeout_seconds,
        )

        self._gate: AdmissionGate = AdmissionGate(options.max_parallel)
        self._headers: dict[str, str] = {"Content-Type": CONTENT_TYPE}
        if options.user_agent is not None:
            self._headers["User-Agent"] = options.user_agent

        self._call_id_factory: CallIDFactory = call_id_factory or (lambda: uuid4().hex)
        self._logger: logging.Logger = logger_obj or get_logger(__name__)
        self._tasks: set[asyncio.Task[None]] = set()
        self._closed: bool = False

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: object,
    ) -> None:
        await self.aclose()

    @property
    def notify_url(self) -> str:
        return self._notify_url

    @property
    def user_agent(self) -> str | None:
        return self._options.user_agent

    @property
    def concurrency_limit(self) -> int:
        return self._gate.capacity

    @property
    def in_flight(self) -> int:
        """Number of admission gate slots currently held."""
        return self._gate.occupancy

    @property
    def gate(self) -> AdmissionGate:
        return self._gate

    async def notify(self, cancellation: CancellationToken, payload: str) -> CallResult:
        """Submit one notification.

        Waits for an admission gate slot, then starts delivery in a background
        task and returns without waiting for the remote call.

        Args:
            cancellation: Shared cancellation token
            payload: Text sent verbatim as the request body

        Returns:
            Pending call result, settled once delivery finishes

        Raises:
            RuntimeError: If the client has been closed
        """
        if self._closed:
            msg = "NotificationClient is closed"
            raise RuntimeError(msg)

        result = CallResult(self._call_id_factory())
        lease = await self._gate.acquire()
        if self._closed:
            # Closed while this submission waited for a slot
            _ = lease.release()
            msg = "NotificationClient is closed"
            raise RuntimeError(msg)
        try:
            task = asyncio.create_task(
                self._deliver(cancellation, payload, result, lease),
                name=f"notify-{result.call_id}",
            )
        except BaseException:
            _ = lease.release()
            raise

        self._tasks.add(task)
        task.add_done_callback(partial(self._on_task_done, result, lease))
        return result

    async def drain(self) -> None:
        """Wait until every submitted notification has settled."""
        while pending := [task for task in self._tasks if not task.done()]:
            _ = await asyncio.wait(pending)

    async def aclose(self) -> None:
        """Wait for outstanding calls, then close the transport if this client created it."""
        self._closed = True
        await self.drain()
        if self._owns_transport and isinstance(self._transport, AIOHTTPTransport):
            await self._transport.aclose()

    async def _deliver(
        self,
        cancellation: CancellationToken,
        payload: str,
        result: CallResult,
        lease: GateLease,
    ) -> None:
        correlation_token = set_correlation_id(result.call_id)
        start = time.perf_counter()
        try:
            if cancellation.cancelled:
                error: NotificationError | None = CanceledError()
            else:
                error = await self._post(cancellation, payload)
            outcome = Outcome(error=error, elapsed_ms=_elapsed_ms(start))
            result.settle(outcome)
            log_with_context(
                self._logger,
                logging.DEBUG,
                "Notification settled",
                extra={
                    "success": outcome.success,
                    "error": str(error) if error is not None else None,
                    "elapsed_ms": round(outcome.elapsed_ms, 3),
                },
            )
        except asyncio.CancelledError:
            if not result.settled:
                result.settle(Outcome(error=CanceledError(), elapsed_ms=_elapsed_ms(start)))
            raise
        finally:
            _ = lease.release()
            reset_correlation_id(correlation_token)

    async def _post(self, cancellation: CancellationToken, payload: str) -> NotificationError | None:
        request = Request(
            method="POST",
            url=self._notify_url,
            body=payload.encode("utf-8"),
            headers=self._headers,
        )
        log_with_context(
            self._logger,
            logging.DEBUG,
            "Dispatching notification",
            extra={"url": sanitize_url(self._notify_url), "size": len(request.body)},
        )

        send = asyncio.ensure_future(self._transport.send(request))
        cancel_wait = asyncio.ensure_future(cancellation.wait())
        try:
            done, _ = await asyncio.wait({send, cancel_wait}, return_when=asyncio.FIRST_COMPLETED)
        finally:
            _ = cancel_wait.cancel()
            if not send.done():
                _ = send.cancel()

        if send not in done:
            # Token fired first; let the transport unwind before reporting
            _ = await asyncio.wait({send})
            if not send.cancelled():
                _ = send.exception()
            return CanceledError()

        if send.cancelled():
            return CanceledError()
        exc = send.exception()
        if exc is not None:
            return TransportError(cause=exc)
        return classify_status(send.result().status)

    def _on_task_done(self, result: CallResult, lease: GateLease, task: asyncio.Task[None]) -> None:
        self._tasks.discard(task)
        _ = lease.release()
        if result.settled:
            if not task.cancelled():
                _ = task.exception()
            return

        # The task never reached its own settle: cancelled before its first
        # step, or an unexpected fault escaped _deliver.
        if task.cancelled():
            result.settle(Outcome(error=CanceledError()))
            return
        exc = task.exception()
        result.settle(Outcome(error=TransportError(cause=exc)))


def _elapsed_ms(start: float) -> float:
    return (time.perf_counter() - start) * 1000.0
