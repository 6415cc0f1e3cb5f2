"""Top-level board functions: sleep, timing, panic, volume, periodic callbacks, scale."""

from __future__ import annotations

import operator
import sys
import traceback
from typing import Callable, Optional, Sequence

from mbitsim.hal import (
    SimulatedClock,
    SoftTimer,
    SoftTimerScheduler,
    TimerMode,
    delay_ms,
)

DEFAULT_PANIC_CODE = 999
MIN_VOLUME = 0
MAX_VOLUME = 255

_MS_PER_SECOND = 1000
_MS_PER_MINUTE = 60 * _MS_PER_SECOND
_MS_PER_HOUR = 60 * _MS_PER_MINUTE
_MS_PER_DAY = 24 * _MS_PER_HOUR


class PanicError(RuntimeError):
    """The board entered panic mode with the given code."""

    def __init__(self, code: int) -> None:
        super().__init__(f"panic {code}")
        self.code = code


class RunEvery:
    """A periodic callback; call it with a function to start the timer.

    Works as a decorator: the object returned by ``MicroBit.run_every`` with
    no callback accepts the function and returns itself.
    """

    def __init__(
        self,
        scheduler: SoftTimerScheduler,
        period_ms: int,
        on_error: Optional[Callable[[BaseException], object]] = None,
    ) -> None:
        self._scheduler = scheduler
        self._on_error = on_error
        self.period_ms = period_ms
        self.user_callback: Optional[Callable[[], object]] = None
        self.timer = SoftTimer(self._fire, TimerMode.PERIODIC, period_ms)

    @property
    def active(self) -> bool:
        return self.user_callback is not None

    def __call__(self, callback: Callable[[], object]) -> "RunEvery":
        self.user_callback = callback
        self._scheduler.insert(self.timer, self.timer.delta_ms)
        return self

    def _fire(self) -> None:
        if self.user_callback is None:
            return
        try:
            self.user_callback()
        except Exception as exc:
            # Stop this callback from being called again.
            self.timer.mode = TimerMode.ONE_SHOT
            self.user_callback = None
            if self._on_error is not None:
                self._on_error(exc)
            else:
                traceback.print_exception(
                    type(exc), exc, exc.__traceback__, file=sys.stdout
                )


class MicroBit:
    """The board's global functions bound to a simulated clock and timer queue.

    With ``handle_timer_exceptions`` set, an exception raised by a periodic
    callback is re-raised from the next ``sleep`` as ``SystemExit(None, exc)``;
    otherwise it is printed at once.
    """

    def __init__(
        self,
        clock: Optional[SimulatedClock] = None,
        scheduler: Optional[SoftTimerScheduler] = None,
        *,
        handle_timer_exceptions: bool = False,
    ) -> None:
        self.clock = clock if clock is not None else SimulatedClock()
        self.scheduler = (
            scheduler if scheduler is not None else SoftTimerScheduler(self.clock)
        )
        self.handle_timer_exceptions = handle_timer_exceptions
        self.volume: Optional[int] = None
        self._pending: Optional[BaseException] = None

    def _schedule_exception(self, exc: BaseException) -> None:
        self._pending = SystemExit(None, exc)

    def _handle_pending(self) -> None:
        if self._pending is not None:
            exc, self._pending = self._pending, None
            raise exc

    def sleep(self, ms: object) -> None:
        """Wait ``ms`` milliseconds (int or float), firing due timers meanwhile."""
        try:
            duration = operator.index(ms)
        except TypeError:
            if not isinstance(ms, float):
                raise TypeError("can't convert to float") from None
            duration = int(ms)
        if duration <= 0:
            return
        target = self.clock.ticks_ms() + duration

        def idle() -> None:
            self._handle_pending()
            now = self.clock.ticks_ms()
            step = target - now
            to_timer = self.scheduler.ms_to_next_expiry()
            if to_timer is not None:
                step = min(step, to_timer)
            self.clock.advance_ms(max(1, step))
            self.scheduler.run_due()
            self._handle_pending()

        delay_ms(self.clock, duration, idle)

    def running_time(self) -> int:
        """Milliseconds since the board started."""
        return self.clock.ticks_ms()

    def panic(self, *args: object) -> None:
        """Enter panic mode with an optional code (999 by default)."""
        if len(args) > 1:
            raise TypeError("panic takes at most 1 argument")
        code = operator.index(args[0]) if args else DEFAULT_PANIC_CODE
        raise PanicError(code)

    def set_volume(self, volume: object) -> None:
        """Set output volume, clamped to 0..255."""
        value = operator.index(volume)
        self.volume = max(MIN_VOLUME, min(MAX_VOLUME, value))

    def run_every(
        self,
        callback: Optional[Callable[[], object]] = None,
        *,
        days: int = 0,
        h: int = 0,
        min: int = 0,
        s: int = 0,
        ms: int = 0,
    ) -> RunEvery:
        """Call ``callback`` periodically; without one, return a decorator."""
        period = (
            operator.index(days) * _MS_PER_DAY
            + operator.index(h) * _MS_PER_HOUR
            + operator.index(min) * _MS_PER_MINUTE
            + operator.index(s) * _MS_PER_SECOND
            + operator.index(ms)
        ) & 0xFFFFFFFF
        on_error = self._schedule_exception if self.handle_timer_exceptions else None
        runner = RunEvery(self.scheduler, period, on_error)
        if callback is None:
            return runner
        return runner(callback)


def _pair(value: object) -> tuple:
    if not isinstance(value, (tuple, list)):
        raise TypeError("expected a tuple or list")
    if len(value) != 2:
        raise ValueError("tuple/list has wrong length")
    return tuple(value)


def scale(value: object, from_: Sequence, to: Sequence) -> float | int:
    """Map ``value`` linearly from range ``from_`` onto range ``to``.

    The result is a float if either end of ``to`` is a float, otherwise the
    nearest integer (ties to even).
    """
    from_min, from_max = _pair(from_)
    to_min, to_max = _pair(to)
    result = (float(value) - float(from_min)) / (float(from_max) - float(from_min)) * (
        float(to_max) - float(to_min)
    ) + float(to_min)
    if isinstance(to_min, float) or isinstance(to_max, float):
        return result
    return int(round(result))