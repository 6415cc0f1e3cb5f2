# mbitsim

`mbitsim` simulates parts of the micro:bit runtime in plain Python. No
hardware is needed. Time comes from a simulated clock, so code that sleeps,
plays tunes or waits on timers runs at once and gives the same result on
every run.

## Modules

- `mbitsim.hal`
  - `SimulatedClock`: a clock that moves only when you call `advance_us` or
    `advance_ms`. Read it with `ticks_us` and `ticks_ms`.
  - `delay_ms(clock, ms, idle=None)` and `delay_us(clock, us)`: busy-waits
    against that clock.
  - `SoftTimerScheduler`: a queue of `SoftTimer` entries, each
    `TimerMode.ONE_SHOT` or `TimerMode.PERIODIC`. It has `insert`,
    `ms_to_next_expiry`, `run_due` and `set_pause`.
- `mbitsim.music`
  - `MusicPlayer` plays note strings such as `"c4:2"`, `"f#5"`, `"eb"` and
    `"r:4"`. Its methods are `play`, `pitch`, `stop`, `set_tempo`,
    `get_tempo`, `reset` and `is_playing`.
  - When `wait=False`, background playback moves forward each time you call
    `MusicPlayer.tick`.
  - Output is sent to a `MusicOutput`, which keeps the current amplitude and
    tone period and a list of `events`.
- `mbitsim.tunes`
  - The built-in melodies, for example `"NYAN"`, `"BIRTHDAY"` and `"JUMP_UP"`.
  - `tune(name)` returns a tuple of note strings. `tune_names()` lists the
    names.
- `mbitsim.radio`
  - `Radio` has `config` with the device's limits for `length`, `queue`,
    `channel`, `power`, `data_rate`, `address` and `group`.
  - It also has `on`, `off`, `reset`, `send`, `send_bytes`, `receive`,
    `receive_bytes`, `receive_bytes_into` and `receive_full`.
  - Sent frames are added to `Radio.sent`.
  - `Radio.deliver` puts an incoming packet on the bounded receive queue. It
    returns `False` if the packet was dropped.
- `mbitsim.microbit`
  - `MicroBit` provides `sleep`, `running_time`, `panic` (raises `PanicError`),
    `set_volume` (clamped to 0..255) and `run_every`. `run_every` works as a
    call or as a decorator and returns a `RunEvery`.
  - `scale(value, from_, to)` maps a value linearly from one range onto
    another. It returns a float if either end of `to` is a float. Otherwise
    it returns the nearest integer.
- `mbitsim.reciter_tables` and `mbitsim.reciter_rules`
  - The English-to-phoneme rule tables.
  - `char_flags` gives a character's classes (`CharFlag`).
  - `parse_rule` reads `prefix(match)suffix=output` into a `Rule`.
  - `punctuation_rules()` returns the rules for digits and symbols.
  - `rules_for(letter)` and `all_letter_rules()` return the rules for letters.

## Example

```python
from mbitsim.hal import SimulatedClock
from mbitsim.microbit import MicroBit, scale
from mbitsim.music import MusicPlayer
from mbitsim.tunes import tune

print(scale(5, from_=(0, 10), to=(0, 100)))   # 50

clock = SimulatedClock()
player = MusicPlayer(clock)
player.play(tune("JUMP_UP"))                  # advances the simulated clock
print(clock.ticks_ms(), player.output.events[:2])

board = MicroBit(clock)
hits = []
board.run_every(lambda: hits.append(board.running_time()), ms=100)
board.sleep(350)
print(hits)
```

## What it does not do

- It produces no sound and drives no real radio. Music becomes a list of
  amplitude and period events, and radio packets stay in Python lists and
  queues.
- It has no pin or button objects and no pin-mode bookkeeping. Any `pin`
  argument is stored as given, or passed to a `select_pin` callable if you
  supply one.
- It has no deep-sleep or power-off handling.
- It gives no OS or version information.
- It has no speech synthesis. The reciter tables are data and rule parsing
  only; nothing here turns text into phonemes or audio.

## Installing and testing

```
pip install .
pip install .[test]
pytest
```