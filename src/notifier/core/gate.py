"""Admission gate bounding the number of in-flight notification calls.

The gate wraps an ``asyncio.Semaphore`` (FIFO wake-up order) and hands out
``GateLease`` objects. A lease releases its slot at most once, so it can be
released from several exit paths without over-releasing the semaphore.
"""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Final, Self

from notifier.core.errors import ConfigurationError

__all__ = ["DEFAULT_CAPACITY", "AdmissionGate", "GateLease"]

DEFAULT_CAPACITY: Final[int] = 1000


class GateLease:
    """One acquired slot of an admission gate."""

    __slots__: tuple[str, ...] = ("_gate", "_released")

    def __init__(self, gate: AdmissionGate) -> None:
        self._gate: AdmissionGate = gate
        self._released: bool = False

    @property
    def released(self) -> bool:
        return self._released

    def release(self) -> bool:
        """Return the slot to the gate.

        Returns:
            True if this call released the slot, False if it was already released
        """
        if self._released:
            return False
        self._released = True
        self._gate._release()  # pyright: ignore[reportPrivateUsage]  # lease owns the release path
        return True

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: object,
    ) -> None:
        _ = self.release()


class AdmissionGate:
    """Counting gate with fixed capacity.

    Example:
        >>> gate = AdmissionGate(2)
        >>> async with gate.slot():
        ...     gate.occupancy
        1
    """

    def __init__(self, capacity: int = DEFAULT_CAPACITY) -> None:
        """Initialize the gate.

        Args:
            capacity: Maximum number of concurrently held slots (default: 1000)

        Raises:
            ConfigurationError: If capacity is lower than 1
        """
        if isinstance(capacity, bool) or not isinstance(capacity, int):
            msg = f"Gate capacity must be an integer, got: {capacity!r}"
            raise ConfigurationError(msg, {"capacity": capacity})
        if capacity < 1:
            msg = f"Gate capacity must be at least 1, got: {capacity}"
            raise ConfigurationError(msg, {"capacity": capacity})

        self._capacity: int = capacity
        self._semaphore: asyncio.Semaphore = asyncio.Semaphore(capacity)
        self._occupancy: int = 0

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def occupancy(self) -> int:
        """Number of slots currently held."""
        return self._occupancy

    @property
    def available(self) -> int:
        return self._capacity - self._occupancy

    def locked(self) -> bool:
        """Check whether acquire would have to wait."""
        return self._semaphore.locked()

    async def acquire(self) -> GateLease:
        """Wait for a free slot and take it.

        Returns:
            Lease that must be released once the slot is no longer needed
        """
        _ = await self._semaphore.acquire()
        self._occupancy += 1
        return GateLease(self)

    @asynccontextmanager
    async def slot(self) -> AsyncIterator[GateLease]:
        """Hold one slot for the duration of the ``async with`` block."""
        lease = await self.acquire()
        try:
            yield lease
        finally:
            _ = lease.release()

    def _release(self) -> None:
        if self._occupancy <= 0:
            msg = "Admission gate released more times than acquired"
            raise RuntimeError(msg)
        self._occupancy -= 1
        self._semaphore.release()
