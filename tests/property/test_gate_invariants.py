"""Property-based tests for the dispatcher's concurrency invariants using Hypothesis.

Properties verified for arbitrary workloads:
    - In-flight calls never exceed the configured limit
    - Every submitted call settles exactly once, whatever its outcome
    - All gate slots are returned once the calls have settled
    - Success is reported exactly for statuses 200, 201 and 204
    - Mixed outcomes with a mid-flight cancellation leave the gate empty
"""

from __future__ import annotations

import asyncio

from hypothesis import given, settings, strategies as st

from notifier.core.cancellation import CancellationToken
from notifier.core.dispatcher import NotificationClient
from notifier.core.errors import SUCCESS_STATUSES, CanceledError, TransportError, UnexpectedStatusError
from notifier.core.options import ClientOptions
from notifier.core.result import CallResult
from notifier.types.models import Outcome
from tests.fixtures.transports import StubTransport

URL = "http://notify.invalid/notify"

statuses = st.sampled_from([200, 201, 202, 204, 301, 400, 404, 429, 500, 503])


@st.composite
def workloads(draw: st.DrawFn) -> list[tuple[int, bool]]:
    """Generate (status, transport_failure) pairs, one per notification."""
    return draw(st.lists(st.tuples(statuses, st.booleans()), min_size=1, max_size=40))


def run_workload(capacity: int, workload: list[tuple[int, bool]]) -> tuple[StubTransport, list[Outcome], int]:
    transport = StubTransport(delay=0.001)
    for index, (status, fails) in enumerate(workload):
        body = f"message_{index}".encode()
        transport.statuses[body] = status
        if fails:
            transport.failures[body] = OSError("connection reset")

    async def scenario() -> tuple[list[Outcome], int]:
        token = CancellationToken()
        async with NotificationClient(URL, ClientOptions(max_parallel=capacity), transport=transport) as client:
            results = [await client.notify(token, f"message_{index}") for index in range(len(workload))]
            outcomes = [await result.wait() for result in results]
        return outcomes, client.in_flight

    outcomes, in_flight = asyncio.run(scenario())
    return transport, outcomes, in_flight


@given(capacity=st.integers(min_value=1, max_value=8), workload=workloads())
@settings(max_examples=40, deadline=None)
def test_in_flight_calls_never_exceed_capacity(capacity: int, workload: list[tuple[int, bool]]) -> None:
    transport, outcomes, in_flight = run_workload(capacity, workload)

    assert transport.stats.max_in_flight <= capacity
    assert len(outcomes) == len(workload)
    assert in_flight == 0


@given(capacity=st.integers(min_value=1, max_value=8), workload=workloads())
@settings(max_examples=40, deadline=None)
def test_outcomes_match_transport_behaviour(capacity: int, workload: list[tuple[int, bool]]) -> None:
    _, outcomes, _ = run_workload(capacity, workload)

    for (status, fails), outcome in zip(workload, outcomes, strict=True):
        if fails:
            assert isinstance(outcome.error, TransportError)
        elif status in SUCCESS_STATUSES:
            assert outcome.success
        else:
            assert isinstance(outcome.error, UnexpectedStatusError)
            assert outcome.error.status_code == status


@given(
    capacity=st.integers(min_value=1, max_value=4),
    count=st.integers(min_value=1, max_value=20),
    cancel_after=st.integers(min_value=0, max_value=20),
)
@settings(max_examples=30, deadline=None)
def test_cancellation_settles_every_call(capacity: int, count: int, cancel_after: int) -> None:
    transport = StubTransport(delay=0.001)

    async def scenario() -> tuple[list[Outcome], int]:
        token = CancellationToken()
        async with NotificationClient(URL, ClientOptions(max_parallel=capacity), transport=transport) as client:
            results = []
            for index in range(count):
                if index == cancel_after:
                    token.cancel()
                results.append(await client.notify(token, f"message_{index}"))
            outcomes = [await result.wait() for result in results]
        return outcomes, client.in_flight

    outcomes, in_flight = asyncio.run(scenario())

    assert len(outcomes) == count
    assert in_flight == 0
    # Calls submitted after the token fired never reach the transport
    assert all(outcome.canceled for outcome in outcomes[cancel_after:])
    assert transport.stats.started <= min(cancel_after, count)


@st.composite
def held_workloads(draw: st.DrawFn) -> list[tuple[int, bool, bool]]:
    """Generate (status, transport_failure, held) triples, one per notification."""
    return draw(st.lists(st.tuples(statuses, st.booleans(), st.booleans()), min_size=1, max_size=30))


@given(
    capacity=st.integers(min_value=1, max_value=6),
    workload=held_workloads(),
    loop_turns=st.integers(min_value=0, max_value=40),
)
@settings(max_examples=40, deadline=None)
def test_mixed_outcomes_with_cancellation_release_the_gate(
    capacity: int,
    workload: list[tuple[int, bool, bool]],
    loop_turns: int,
) -> None:
    transport = StubTransport()
    for index, (status, fails, held) in enumerate(workload):
        body = f"message_{index}".encode()
        transport.statuses[body] = status
        if fails:
            transport.failures[body] = OSError("connection reset")
        if held:
            transport.hold.add(body)

    async def scenario() -> tuple[list[CallResult], list[Outcome], int]:
        token = CancellationToken()
        async with NotificationClient(URL, ClientOptions(max_parallel=capacity), transport=transport) as client:

            async def submit_all() -> list[CallResult]:
                return [await client.notify(token, f"message_{index}") for index in range(len(workload))]

            submitter = asyncio.create_task(submit_all())
            # Held requests only finish through cancellation
            for _ in range(loop_turns):
                if submitter.done():
                    break
                await asyncio.sleep(0)
            token.cancel()

            results = await asyncio.wait_for(submitter, timeout=10.0)
            outcomes = [await asyncio.wait_for(result.wait(), timeout=10.0) for result in results]
        return results, outcomes, client.gate.occupancy

    results, outcomes, occupancy = asyncio.run(scenario())

    assert occupancy == 0
    assert len(outcomes) == len(workload)
    assert transport.stats.in_flight == 0
    for result, outcome in zip(results, outcomes, strict=True):
        assert result.settled
        assert result.peek() is outcome

    for (status, fails, held), outcome in zip(workload, outcomes, strict=True):
        if held:
            assert outcome.canceled
        elif outcome.canceled:
            # Token fired before this call completed
            assert isinstance(outcome.error, CanceledError)
        elif fails:
            assert isinstance(outcome.error, TransportError)
        elif status in SUCCESS_STATUSES:
            assert outcome.success
        else:
            assert isinstance(outcome.error, UnexpectedStatusError)
