"""Write-once, multi-reader result of a dispatched notification.

The outcome slot is guarded by an ``asyncio.Event``: the worker stores the
outcome and then sets the event, so any waiter released by the event (or
arriving later) observes the stored outcome.
"""

from __future__ import annotations

import asyncio
from uuid import uuid4

from notifier.core.errors import ResultAlreadySettledError
from notifier.types.models import PENDING, Outcome, Pending

__all__ = ["CallResult"]


class CallResult:
    """Future-like handle for a single notification call."""

    __slots__: tuple[str, ...] = ("_call_id", "_outcome", "_settled")

    def __init__(self, call_id: str | None = None) -> None:
        self._call_id: str = call_id or uuid4().hex
        self._outcome: Outcome | None = None
        self._settled: asyncio.Event = asyncio.Event()

    @property
    def call_id(self) -> str:
        return self._call_id

    @property
    def settled(self) -> bool:
        return self._settled.is_set()

    def settle(self, outcome: Outcome) -> None:
        """Publish the outcome and release every waiter.

        Args:
            outcome: Final outcome of the call

        Raises:
            ResultAlreadySettledError: If the result was already settled
        """
        if self._outcome is not None:
            msg = f"Call result {self._call_id} is already settled"
            raise ResultAlreadySettledError(msg)
        self._outcome = outcome
        self._settled.set()

    def peek(self) -> Outcome | Pending:
        """Return the outcome if settled, otherwise ``PENDING``. Never waits."""
        if self._outcome is None:
            return PENDING
        return self._outcome

    async def wait(self) -> Outcome:
        """Wait until the call is settled and return its outcome."""
        _ = await self._settled.wait()
        outcome = self._outcome
        if outcome is None:
            msg = f"Call result {self._call_id} was signalled without an outcome"
            raise RuntimeError(msg)
        return outcome

    def __repr__(self) -> str:
        state = "pending" if self._outcome is None else "settled"
        return f"<CallResult {self._call_id} {state}>"
