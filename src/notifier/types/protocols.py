"""Protocol definitions for component interfaces.

This module defines structural subtyping protocols that establish
contracts for the dispatcher's collaborators without requiring inheritance.
"""

from typing import Protocol, runtime_checkable

from notifier.types.models import Request, Response


@runtime_checkable
class Transport(Protocol):
    """Protocol for a single HTTP exchange.

    The dispatcher depends only on this capability, so any object with a
    matching ``send`` coroutine can replace the default aiohttp transport
    (test doubles included).
    """

    async def send(self, request: Request) -> Response:
        """Send one request and return its response.

        Implementations must read the response body to completion before
        returning, and must let ``asyncio.CancelledError`` propagate when the
        calling task is cancelled.

        Args:
            request: Request to perform

        Returns:
            Response status and headers

        Raises:
            Exception: Any failure to complete the exchange
        """
        ...
