import pytest

from mbitsim.hal import SimulatedClock
from mbitsim.music import AMPLITUDE_ON, MusicOutput, MusicPlayer


@pytest.fixture
def player():
    return MusicPlayer(SimulatedClock())


def periods(output):
    return [value for kind, value in output.events if kind == "period"]


def test_default_tempo(player):
    assert player.get_tempo() == (120, 4)


def test_set_tempo_partial_and_reset(player):
    player.set_tempo(bpm=90)
    assert player.get_tempo() == (90, 4)
    player.set_tempo(ticks=8)
    assert player.get_tempo() == (90, 8)
    player.set_tempo()
    assert player.get_tempo() == (90, 8)
    player.reset()
    assert player.get_tempo() == (120, 4)


def test_middle_c_period(player):
    player.play("c4")
    assert periods(player.output) == [3822]
    assert not player.is_playing()
    assert player.output.amplitude == 0


def test_a_and_sharp_periods(player):
    player.play(["a", "c#"])
    assert periods(player.output) == [2273, 3608]


def test_flat_equals_sharp_below(player):
    player.play("db4")
    player.play("c#4")
    first, second = periods(player.output)
    assert first == second


def test_octave_is_remembered_between_notes(player):
    player.play(["c5", "c"])
    first, second = periods(player.output)
    assert first == second
    assert first * 2 == 3822


def test_play_resets_octave(player):
    player.play("c5")
    player.play("c")
    assert periods(player.output)[-1] == 3822


def test_note_timing_at_default_tempo(player):
    player.play("c4:4")
    assert player.clock.ticks_ms() == 500


def test_faster_tempo_is_shorter():
    slow = MusicPlayer(SimulatedClock())
    fast = MusicPlayer(SimulatedClock())
    fast.set_tempo(bpm=240)
    slow.play(["c", "d", "e"])
    fast.play(["c", "d", "e"])
    assert fast.clock.ticks_ms() < slow.clock.ticks_ms()


def test_longer_duration_takes_longer():
    short = MusicPlayer(SimulatedClock())
    long = MusicPlayer(SimulatedClock())
    short.play("c:2")
    long.play("c:16")
    assert long.clock.ticks_ms() > short.clock.ticks_ms()


def test_rest_turns_output_off(player):
    player.play("r", wait=False)
    player.tick()
    assert player.is_playing()
    assert player.output.amplitude == 0
    assert periods(player.output) == []


def test_background_play_progresses_with_ticks(player):
    player.play(["c", "d"], wait=False)
    assert player.is_playing()
    for _ in range(20):
        player.clock.advance_ms(100)
        player.tick()
    assert not player.is_playing()
    assert len(periods(player.output)) == 2


def test_loop_keeps_playing(player):
    player.play(["c", "d"], wait=False, loop=True)
    for _ in range(50):
        player.clock.advance_ms(100)
        player.tick()
    assert player.is_playing()
    assert len(periods(player.output)) > 2


def test_non_string_note_stops_with_message(player, capsys):
    player.play(["c", 5], wait=False)
    for _ in range(10):
        player.clock.advance_ms(600)
        player.tick()
    assert not player.is_playing()
    assert "TypeError: expecting a str for note" in capsys.readouterr().out


def test_play_rejects_non_sequence(player):
    with pytest.raises(TypeError):
        player.play(5)


def test_pitch_without_duration_keeps_sounding(player):
    player.pitch(440, wait=False)
    assert not player.is_playing()
    assert player.output.amplitude == AMPLITUDE_ON
    assert player.output.period_us == 1_000_000 // 440


def test_pitch_with_duration_stops(player):
    player.pitch(440, 100)
    assert not player.is_playing()
    assert player.output.amplitude == 0
    assert player.clock.ticks_ms() >= 100


def test_invalid_pitch(player):
    with pytest.raises(ValueError, match="invalid pitch"):
        player.pitch(2_000_000)


def test_stop_silences(player):
    player.play(["c", "d", "e"], wait=False)
    player.tick()
    player.stop()
    assert not player.is_playing()
    assert player.output.amplitude == 0


def test_interrupted_wait_stops_music():
    def boom():
        raise KeyboardInterrupt

    player = MusicPlayer(SimulatedClock(), MusicOutput(), idle=boom)
    with pytest.raises(KeyboardInterrupt):
        player.play("c")
    assert not player.is_playing()
    assert player.output.amplitude == 0


def test_pin_selection(player):
    player.play("c", pin="pin1")
    assert player.pin == "pin1"
    player.stop()
    assert player.pin == "pin0"


def test_pin_select_error_propagates():
    def refuse(pin):
        raise ValueError("pin in use")

    player = MusicPlayer(SimulatedClock(), select_pin=refuse)
    with pytest.raises(ValueError, match="pin in use"):
        player.play("c")
    assert not player.is_playing()