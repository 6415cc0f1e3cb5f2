"""Simulated board clock, busy-wait delays and a software timer queue."""

from __future__ import annotations

import enum
import heapq
import itertools
from dataclasses import dataclass, field
from typing import Callable, Optional


class SimulatedClock:
    """A monotonic clock that only moves when told to."""

    def __init__(self, start_us: int = 0) -> None:
        if start_us < 0:
            raise ValueError("clock cannot start before zero")
        self._now_us = start_us

    def ticks_us(self) -> int:
        return self._now_us

    def ticks_ms(self) -> int:
        return self._now_us // 1000

    def advance_us(self, us: int) -> None:
        if us < 0:
            raise ValueError("cannot move the clock backwards")
        self._now_us += us

    def advance_ms(self, ms: int) -> None:
        self.advance_us(ms * 1000)


def delay_ms(
    clock: SimulatedClock, ms: int, idle: Optional[Callable[[], object]] = None
) -> None:
    """Wait ``ms`` milliseconds, calling ``idle`` while waiting.

    Without an ``idle`` callable the clock is stepped one millisecond at a time.
    """
    if ms <= 0:
        return
    if idle is None:

        def idle() -> None:
            clock.advance_ms(1)

    start = clock.ticks_ms()
    while clock.ticks_ms() - start < ms:
        idle()


def delay_us(clock: SimulatedClock, us: int) -> None:
    """Busy-wait ``us`` microseconds."""
    if us <= 0:
        return
    start = clock.ticks_us()
    while clock.ticks_us() - start < us:
        clock.advance_us(us - (clock.ticks_us() - start))


class TimerMode(enum.Enum):
    ONE_SHOT = "one_shot"
    PERIODIC = "periodic"


@dataclass(eq=False)
class SoftTimer:
    """A timer entry: a callback fired once or every ``delta_ms``."""

    callback: Callable[[], object]
    mode: TimerMode = TimerMode.ONE_SHOT
    delta_ms: int = 0
    expiry_ms: Optional[int] = field(default=None, init=False)


class SoftTimerScheduler:
    """Queue of software timers ordered by expiry time."""

    def __init__(self, clock: SimulatedClock) -> None:
        self._clock = clock
        self._heap: list[tuple[int, int, SoftTimer]] = []
        self._order = itertools.count()
        self._paused = False

    @property
    def paused(self) -> bool:
        return self._paused

    def __len__(self) -> int:
        return len(self._heap)

    def _push(self, timer: SoftTimer) -> None:
        heapq.heappush(self._heap, (timer.expiry_ms, next(self._order), timer))

    def insert(self, timer: SoftTimer, delay_ms: int) -> None:
        """Schedule ``timer`` to fire ``delay_ms`` from now."""
        if delay_ms < 0:
            raise ValueError("delay must not be negative")
        timer.expiry_ms = self._clock.ticks_ms() + delay_ms
        self._push(timer)

    def ms_to_next_expiry(self) -> Optional[int]:
        """Milliseconds until the earliest timer fires, or None if none is queued."""
        if not self._heap:
            return None
        return max(0, self._heap[0][0] - self._clock.ticks_ms())

    def run_due(self) -> int:
        """Fire every timer that has expired; return how many fired.

        Each timer fires at most once per call; periodic timers are queued
        again one period after their previous expiry.
        """
        if self._paused:
            return 0
        now = self._clock.ticks_ms()
        fired = 0
        requeue: list[SoftTimer] = []
        try:
            while self._heap and self._heap[0][0] <= now:
                _, _, timer = heapq.heappop(self._heap)
                timer.callback()
                fired += 1
                if timer.mode is TimerMode.PERIODIC:
                    timer.expiry_ms += timer.delta_ms
                    requeue.append(timer)
        finally:
            for timer in requeue:
                self._push(timer)
        return fired

    def set_pause(self, paused: bool, run_pending: bool = True) -> int:
        """Pause or resume the queue; on resume optionally fire what is due."""
        self._paused = paused
        if not paused and run_pending:
            return self.run_due()
        return 0