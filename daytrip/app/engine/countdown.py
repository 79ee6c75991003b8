"""Countdown to the fixed daily deadline (e.g. the last safe departure)."""

import logging
from collections.abc import Callable
from datetime import date, datetime, timedelta
from enum import Enum

from daytrip.app.engine.ticker import PeriodicTicker
from daytrip.app.utils.timemath import format_countdown, parse_hhmm

logger = logging.getLogger(__name__)

INITIAL_DISPLAY = "00h 00m 00s"


class CountdownState(str, Enum):
    """Countdown state."""

    COUNTING = "counting"
    DEADLINE_REACHED = "deadline_reached"


class CountdownService:
    """Two-state countdown: COUNTING until the deadline, then DEADLINE_REACHED.

    The transition is one-way for the day it happens on; `reset()`, or the
    first sample on a later day, returns the service to COUNTING.
    """

    def __init__(
        self,
        deadline: str,
        reached_label: str = "¡A BORDO!",
        clock: Callable[[], datetime] = datetime.now,
        tick_seconds: float = 1,
    ) -> None:
        self._deadline_min = parse_hhmm(deadline)
        self.deadline = deadline
        self.reached_label = reached_label
        self._clock = clock
        self._state = CountdownState.COUNTING
        self._remaining_ms: int | None = None
        self._reached_on: date | None = None
        self._listeners: list[Callable[[CountdownState, str], None]] = []
        self._ticker = PeriodicTicker(tick_seconds, self.tick, name="countdown-tick")

    @property
    def state(self) -> CountdownState:
        return self._state

    @property
    def remaining_ms(self) -> int | None:
        """Milliseconds left at the last sample; None before the first sample."""
        return self._remaining_ms

    @property
    def reached_on(self) -> date | None:
        return self._reached_on

    @property
    def display(self) -> str:
        if self._state == CountdownState.DEADLINE_REACHED:
            return self.reached_label
        if self._remaining_ms is None:
            return INITIAL_DISPLAY
        return format_countdown(self._remaining_ms)

    @property
    def running(self) -> bool:
        return self._ticker.running

    def target_for(self, now: datetime) -> datetime:
        """Deadline on the calendar day of now."""
        midnight = now.replace(hour=0, minute=0, second=0, microsecond=0)
        return midnight + timedelta(minutes=self._deadline_min)

    def sample(self, now: datetime) -> CountdownState:
        """Advance the state machine with a clock sample.

        Once reached, the state holds for the rest of that calendar day. The
        first sample on a later day resets the service before counting.
        """
        if self._state == CountdownState.DEADLINE_REACHED:
            if self._reached_on is not None and now.date() > self._reached_on:
                logger.info(f"[countdown] New day {now.date().isoformat()}, resetting")
                self.reset()
            else:
                return self._state

        diff = self.target_for(now) - now
        remaining_ms = diff.days * 86_400_000 + diff.seconds * 1000 + diff.microseconds // 1000

        if remaining_ms <= 0:
            self._state = CountdownState.DEADLINE_REACHED
            self._remaining_ms = 0
            self._reached_on = now.date()
            logger.info(f"[countdown] Deadline {self.deadline} reached at {now.isoformat()}")
        else:
            self._remaining_ms = remaining_ms

        for listener in list(self._listeners):
            listener(self._state, self.display)
        return self._state

    def tick(self) -> CountdownState:
        """Sample the wall clock."""
        return self.sample(self._clock())

    def reset(self) -> None:
        """Return to COUNTING for a new day."""
        self._state = CountdownState.COUNTING
        self._remaining_ms = None
        self._reached_on = None

    def subscribe(self, listener: Callable[[CountdownState, str], None]) -> None:
        """Register a listener called with (state, display) on each sample until the deadline."""
        self._listeners.append(listener)

    def start(self) -> None:
        """Start the 1-second tick."""
        self._ticker.start()

    async def stop(self) -> None:
        """Stop the tick."""
        await self._ticker.stop()
