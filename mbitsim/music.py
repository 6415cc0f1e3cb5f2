"""Note-string music player driven by a simulated clock."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Callable, Optional, Sequence, Union

from mbitsim.hal import SimulatedClock

DEFAULT_BPM = 120
DEFAULT_TICKS = 4
DEFAULT_OCTAVE = 4
DEFAULT_DURATION = 4
ARTICULATION_MS = 10

AMPLITUDE_OFF = 0
AMPLITUDE_ON = 128

# Periods of the octave starting at middle C, indexed A..G.
_PERIODS_US = (2273, 2025, 3822, 3405, 3034, 2863, 2551)
# A#, -, C#, D#, -, F#, G#
_PERIODS_SHARP_US = (2145, 0, 3608, 3214, 0, 2703, 2408)

Note = Union[str, bytes]


class _State(enum.Enum):
    IDLE = 0
    NEXT_NOTE = 1
    ARTICULATE = 2


@dataclass
class MusicOutput:
    """The audio output the player drives: an amplitude and a tone period."""

    amplitude: int = AMPLITUDE_OFF
    period_us: Optional[int] = None
    events: list = field(default_factory=list)

    def set_amplitude(self, amplitude: int) -> None:
        self.amplitude = amplitude
        self.events.append(("amplitude", amplitude))

    def set_period_us(self, period: int) -> bool:
        """Set the tone period; return False if the period cannot be produced."""
        if period <= 0:
            return False
        self.period_us = period
        self.events.append(("period", period))
        return True


class MusicPlayer:
    """Plays note strings such as ``"c#5:4"`` in the background."""

    def __init__(
        self,
        clock: SimulatedClock,
        output: Optional[MusicOutput] = None,
        *,
        default_pin: object = "pin0",
        select_pin: Optional[Callable[[object], object]] = None,
        idle: Optional[Callable[[], object]] = None,
    ) -> None:
        self.clock = clock
        self.output = output if output is not None else MusicOutput()
        self.default_pin = default_pin
        self.pin = default_pin
        self._select_pin = select_pin
        self._idle = idle if idle is not None else self._step
        self._bpm = DEFAULT_BPM
        self._ticks = DEFAULT_TICKS
        self._last_octave = DEFAULT_OCTAVE
        self._last_duration = DEFAULT_DURATION
        self._state = _State.IDLE
        self._loop = False
        self._wait_ticks = 0
        self._notes: tuple = ()
        self._index = 0

    def reset(self) -> None:
        self._bpm = DEFAULT_BPM
        self._ticks = DEFAULT_TICKS
        self._last_octave = DEFAULT_OCTAVE
        self._last_duration = DEFAULT_DURATION

    def set_tempo(self, *, ticks: int = 0, bpm: int = 0) -> None:
        """Change ticks per beat and/or beats per minute; zero leaves a value as is."""
        if ticks != 0:
            self._ticks = self._tempo_value(ticks)
        if bpm != 0:
            self._bpm = self._tempo_value(bpm)

    @staticmethod
    def _tempo_value(value: int) -> int:
        value &= 0xFFFF
        if value == 0:
            raise ValueError("tempo value out of range")
        return value

    def get_tempo(self) -> tuple[int, int]:
        return (self._bpm, self._ticks)

    def is_playing(self) -> bool:
        return self._state is not _State.IDLE

    def _select(self, pin: object) -> None:
        pin = self.default_pin if pin is None else pin
        if self._select_pin is not None:
            self._select_pin(pin)
        self.pin = pin

    def play(
        self,
        music: Union[Note, Sequence[Note]],
        pin: object = None,
        wait: bool = True,
        loop: bool = False,
    ) -> None:
        """Play a note or a list/tuple of notes."""
        self._last_octave = DEFAULT_OCTAVE
        self._last_duration = DEFAULT_DURATION

        if isinstance(music, (str, bytes)):
            notes = (music,)
        elif isinstance(music, (list, tuple)):
            notes = tuple(music)
        else:
            raise TypeError("music must be a note or a list or tuple of notes")

        self._state = _State.IDLE
        self._select(pin)

        self._wait_ticks = self.clock.ticks_ms()
        self._loop = bool(loop)
        self._notes = notes
        self._index = 0
        self._state = _State.NEXT_NOTE

        if wait:
            self._wait_idle()

    def pitch(
        self,
        frequency: int,
        duration: int = -1,
        pin: object = None,
        wait: bool = True,
    ) -> None:
        """Sound a frequency in Hz; for ``duration`` ms, or indefinitely if negative."""
        frequency &= 0xFFFFFFFF
        self._state = _State.IDLE
        self._select(pin)

        self.output.set_amplitude(AMPLITUDE_ON)
        if frequency != 0 and not self.output.set_period_us(1_000_000 // frequency):
            raise ValueError("invalid pitch")
        if duration >= 0:
            self._wait_ticks = self.clock.ticks_ms() + duration
            self._loop = False
            self._notes = ()
            self._index = 0
            self._state = _State.ARTICULATE
            if wait:
                self._wait_idle()

    def stop(self, pin: object = None) -> None:
        self._select(pin)
        self._state = _State.IDLE
        self.output.set_amplitude(AMPLITUDE_OFF)

    def tick(self) -> None:
        """Advance background playback; call regularly."""
        if self._state is _State.IDLE:
            return
        if self.clock.ticks_ms() < self._wait_ticks:
            return

        if self._state is _State.ARTICULATE:
            self.output.set_amplitude(AMPLITUDE_OFF)
            self._wait_ticks = self.clock.ticks_ms() + ARTICULATION_MS
            self._state = _State.NEXT_NOTE
            return

        if self._index >= len(self._notes):
            if self._loop and self._notes:
                self._index = 0
            else:
                self._state = _State.IDLE
                return
        note = self._notes[self._index]
        if not isinstance(note, (str, bytes)):
            print("TypeError: expecting a str for note")
            self._state = _State.IDLE
            return
        delay_on = self._start_note(note)
        self._wait_ticks = self.clock.ticks_ms() + delay_on
        self._index += 1
        self._state = _State.ARTICULATE

    def _step(self) -> None:
        now = self.clock.ticks_ms()
        if self._wait_ticks > now:
            self.clock.advance_ms(self._wait_ticks - now)
        self.tick()

    def _wait_idle(self) -> None:
        try:
            while self._state is not _State.IDLE:
                self._idle()
        except BaseException:
            self._state = _State.IDLE
            self.output.set_amplitude(AMPLITUDE_OFF)
            raise

    def _start_note(self, note: Note) -> int:
        """Start sounding ``note`` and return how long it lasts in ms."""
        self.output.set_amplitude(AMPLITUDE_ON)

        data = note.encode() if isinstance(note, str) else bytes(note)
        length = len(data)
        first = data[0] if data else 0
        note_index = ((first & 0x1F) - 1) & 0xFF

        ms_per_tick = (60000 // self._bpm) // self._ticks
        octave = 0
        sharp = False
        pos = 1

        if pos < length and data[pos] in (ord("#"), ord("b")):
            if data[pos] == ord("b"):
                note_index = 6 if note_index == 0 else note_index - 1
                if note_index == 1:
                    octave -= 1
            sharp = True
            pos += 1

        if pos < length and data[pos] != ord(":"):
            self._last_octave = data[pos] & 0xF
            pos += 1

        octave += self._last_octave

        if pos < length and data[pos] == ord(":"):
            pos += 1
            if pos < length:
                duration = data[pos] & 0xF
                pos += 1
                if pos < length:
                    duration = (duration * 10 + (data[pos] & 0xF)) & 0xFF
                self._last_duration = duration

        octave -= 4

        table = _PERIODS_SHARP_US if sharp else _PERIODS_US
        if note_index < len(table):
            base = table[note_index]
            period = base >> octave if octave >= 0 else base << -octave
            self.output.set_period_us(period)
        else:
            self.output.set_amplitude(AMPLITUDE_OFF)

        gap_ms = ms_per_tick * self._last_duration - ARTICULATION_MS
        return max(gap_ms, ARTICULATION_MS)