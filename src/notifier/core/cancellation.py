"""Shared cooperative cancellation signal."""

from __future__ import annotations

import asyncio

__all__ = ["CancellationToken"]


class CancellationToken:
    """One-shot cancellation signal shared by any number of calls.

    Calls that have not started when the token fires settle as canceled
    without touching the network; calls in flight have their transport
    request cancelled.
    """

    def __init__(self) -> None:
        self._event: asyncio.Event = asyncio.Event()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def cancel(self) -> None:
        """Fire the signal. Firing an already fired token does nothing."""
        self._event.set()

    async def wait(self) -> None:
        """Wait until the token fires."""
        _ = await self._event.wait()

    def __repr__(self) -> str:
        state = "cancelled" if self.cancelled else "active"
        return f"<CancellationToken {state}>"
