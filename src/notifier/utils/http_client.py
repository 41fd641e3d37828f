"""aiohttp-backed transport for notification delivery.

``AIOHTTPTransport`` implements the ``Transport`` protocol: it performs one
HTTP exchange per ``send`` call, drains the response body so the pooled
connection can be reused, and returns the status and headers. It performs no
retries; failures propagate to the dispatcher, which classifies them.
"""

import asyncio
import logging
from typing import Self

import aiohttp

from notifier.types.models import Request, Response
from notifier.utils.sanitization import sanitize_exception, sanitize_url

__all__ = ["AIOHTTPTransport"]


class AIOHTTPTransport:
    """Async HTTP transport using an ``aiohttp.ClientSession``.

    The session is created on first use (or when entering the async context
    manager) and closed by ``aclose``/``__aexit__``.

    Example:
        >>> async with AIOHTTPTransport(timeout_seconds=10.0) as transport:
        ...     response = await transport.send(
        ...         Request(method="POST", url="https://hooks.example.com/notify", body=b"hi")
        ...     )
    """

    def __init__(
        self,
        *,
        timeout_seconds: float | None = None,
        session: aiohttp.ClientSession | None = None,
    ) -> None:
        """Initialize the transport.

        Args:
            timeout_seconds: Total timeout per request in seconds (default: no limit)
            session: Externally managed session to use instead of creating one
        """
        self._timeout_seconds: float | None = timeout_seconds
        self._session: aiohttp.ClientSession | None = session
        self._owns_session: bool = session is None
        self._logger: logging.Logger = logging.getLogger(__name__)

    async def __aenter__(self) -> Self:
        _ = self._ensure_session()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: object,
    ) -> None:
        await self.aclose()

    @property
    def closed(self) -> bool:
        return self._session is None or self._session.closed

    def _ensure_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            timeout = aiohttp.ClientTimeout(total=self._timeout_seconds)
            # User-Agent is only sent when the caller sets it explicitly
            self._session = aiohttp.ClientSession(
                timeout=timeout,
                skip_auto_headers=("User-Agent",),
            )
            self._owns_session = True
        return self._session

    async def aclose(self) -> None:
        """Close the underlying session if this transport created it."""
        if self._session is not None and self._owns_session:
            await self._session.close()
        self._session = None

    async def send(self, request: Request) -> Response:
        """Perform one HTTP exchange.

        Args:
            request: Request to send

        Returns:
            Response status and headers; the body is read and discarded

        Raises:
            TimeoutError: If the request exceeds the configured timeout
            ValueError: If the URL is malformed
            aiohttp.ClientError: For connection and protocol failures
        """
        session = self._ensure_session()

        self._logger.debug("Initiating %s request to %s", request.method, sanitize_url(request.url))

        try:
            async with session.request(
                request.method,
                request.url,
                data=request.body,
                headers=dict(request.headers),
            ) as response:
                # Drain the body so the connection goes back to the pool
                _ = await response.read()
                return Response(
                    status=response.status,
                    headers=dict(response.headers),
                )
        except asyncio.TimeoutError:
            self._logger.debug("Request to %s timed out", sanitize_url(request.url))
            raise
        except aiohttp.InvalidURL as exc:
            raise ValueError(f"Malformed URL: {sanitize_url(request.url)}") from exc
        except aiohttp.ClientError as exc:
            self._logger.debug("Client error for %s: %s", sanitize_url(request.url), sanitize_exception(exc))
            raise
