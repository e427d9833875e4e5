from __future__ import annotations

import asyncio
from functools import partial

import pytest

from liftlog.workout.model import WorkoutSet
from liftlog.workout.session import SessionController
from liftlog.workout.store import RoutineStore
from liftlog.workout.ticker import ElapsedTicker


class SteppingClock:
    """Advances one second on every read after the first."""

    def __init__(self) -> None:
        self.now = 0.0
        self.reads = 0

    def __call__(self) -> float:
        if self.reads:
            self.now += 1.0
        self.reads += 1
        return self.now


def test_ticker_rejects_non_positive_interval() -> None:
    with pytest.raises(ValueError):
        ElapsedTicker(interval_sec=0)


def test_ticker_calls_back_until_cancelled() -> None:
    async def scenario() -> tuple[int, int, bool]:
        ticker = ElapsedTicker(interval_sec=0.01)
        calls: list[int] = []
        ticker.start(lambda: calls.append(1))
        await asyncio.sleep(0.1)
        ticker.cancel()
        seen = len(calls)
        await asyncio.sleep(0.05)
        return seen, len(calls), ticker.is_running

    seen, after_cancel, running = asyncio.run(scenario())

    assert seen >= 2
    assert after_cancel == seen
    assert running is False


def test_ticker_cannot_start_twice() -> None:
    async def scenario() -> None:
        ticker = ElapsedTicker(interval_sec=0.01)
        ticker.start(lambda: None)
        try:
            with pytest.raises(RuntimeError):
                ticker.start(lambda: None)
        finally:
            ticker.cancel()

    asyncio.run(scenario())


def test_session_ticker_advances_elapsed_and_stops_on_finish() -> None:
    async def scenario() -> tuple[int, bool, bool, int]:
        store = RoutineStore(workout_sets=(WorkoutSet("legs", "Leg Day"),))
        session = SessionController(
            store,
            clock=SteppingClock(),
            ticker_factory=partial(ElapsedTicker, interval_sec=0.01),
        )
        session.start("legs")
        running_while_active = session.ticker_running
        await asyncio.sleep(0.1)
        ticked = session.elapsed_seconds
        summary = session.finish()
        assert summary is not None
        return ticked, running_while_active, session.ticker_running, summary.duration_seconds

    ticked, running_while_active, running_after, duration = asyncio.run(scenario())

    assert running_while_active is True
    assert ticked >= 2
    assert running_after is False
    assert duration == ticked


def test_session_close_cancels_ticker() -> None:
    async def scenario() -> bool:
        store = RoutineStore(workout_sets=(WorkoutSet("legs", "Leg Day"),))
        session = SessionController(
            store,
            clock=SteppingClock(),
            ticker_factory=partial(ElapsedTicker, interval_sec=0.01),
        )
        session.start("legs")
        session.close()
        await asyncio.sleep(0.03)
        return session.ticker_running

    assert asyncio.run(scenario()) is False
