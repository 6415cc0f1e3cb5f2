import pytest

from mbitsim.hal import (
    SimulatedClock,
    SoftTimer,
    SoftTimerScheduler,
    TimerMode,
    delay_ms,
    delay_us,
)


def test_clock_advances_in_both_units():
    clock = SimulatedClock()
    clock.advance_ms(3)
    clock.advance_us(250)
    assert clock.ticks_us() == 3250
    assert clock.ticks_ms() == 3


def test_clock_refuses_to_go_backwards():
    clock = SimulatedClock()
    with pytest.raises(ValueError):
        clock.advance_us(-1)


def test_clock_rejects_negative_start():
    with pytest.raises(ValueError):
        SimulatedClock(-5)


def test_delay_ms_default_idle_advances_exact_amount():
    clock = SimulatedClock()
    delay_ms(clock, 25)
    assert clock.ticks_ms() == 25


@pytest.mark.parametrize("ms", [0, -10])
def test_delay_ms_non_positive_is_noop(ms):
    clock = SimulatedClock()
    calls = []
    delay_ms(clock, ms, lambda: calls.append(1))
    assert calls == []
    assert clock.ticks_us() == 0


def test_delay_ms_calls_idle_until_elapsed():
    clock = SimulatedClock()
    calls = []

    def idle():
        calls.append(clock.ticks_ms())
        clock.advance_ms(2)

    delay_ms(clock, 5, idle)
    assert calls == [0, 2, 4]
    assert clock.ticks_ms() >= 5


def test_delay_us():
    clock = SimulatedClock()
    delay_us(clock, 40)
    assert clock.ticks_us() == 40
    delay_us(clock, 0)
    assert clock.ticks_us() == 40


def test_scheduler_empty_has_no_expiry():
    sched = SoftTimerScheduler(SimulatedClock())
    assert sched.ms_to_next_expiry() is None
    assert sched.run_due() == 0


def test_one_shot_timer_fires_once():
    clock = SimulatedClock()
    sched = SoftTimerScheduler(clock)
    fired = []
    sched.insert(SoftTimer(lambda: fired.append(clock.ticks_ms())), 10)
    assert sched.ms_to_next_expiry() == 10
    clock.advance_ms(9)
    assert sched.run_due() == 0
    clock.advance_ms(1)
    assert sched.run_due() == 1
    assert fired == [10]
    assert len(sched) == 0


def test_periodic_timer_requeues():
    clock = SimulatedClock()
    sched = SoftTimerScheduler(clock)
    fired = []
    timer = SoftTimer(lambda: fired.append(clock.ticks_ms()), TimerMode.PERIODIC, 5)
    sched.insert(timer, timer.delta_ms)
    for _ in range(3):
        clock.advance_ms(5)
        sched.run_due()
    assert fired == [5, 10, 15]
    assert sched.ms_to_next_expiry() == 5


def test_timers_fire_in_expiry_order():
    clock = SimulatedClock()
    sched = SoftTimerScheduler(clock)
    order = []
    sched.insert(SoftTimer(lambda: order.append("late")), 8)
    sched.insert(SoftTimer(lambda: order.append("early")), 2)
    clock.advance_ms(10)
    assert sched.run_due() == 2
    assert order == ["early", "late"]


def test_pause_blocks_and_resume_runs_pending():
    clock = SimulatedClock()
    sched = SoftTimerScheduler(clock)
    fired = []
    sched.insert(SoftTimer(lambda: fired.append(1)), 1)
    sched.set_pause(True)
    clock.advance_ms(5)
    assert sched.run_due() == 0
    assert fired == []
    assert sched.set_pause(False, True) == 1
    assert fired == [1]


def test_resume_without_running_keeps_timer_queued():
    clock = SimulatedClock()
    sched = SoftTimerScheduler(clock)
    sched.insert(SoftTimer(lambda: None), 1)
    sched.set_pause(True)
    clock.advance_ms(3)
    assert sched.set_pause(False, False) == 0
    assert len(sched) == 1
    assert sched.ms_to_next_expiry() == 0


def test_negative_delay_rejected():
    sched = SoftTimerScheduler(SimulatedClock())
    with pytest.raises(ValueError):
        sched.insert(SoftTimer(lambda: None), -1)