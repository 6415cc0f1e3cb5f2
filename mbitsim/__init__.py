"""Simulated micro:bit runtime pieces: clock and timers, music, tunes, radio, board functions and reciter tables."""

__version__ = "0.1.0"

__all__ = [
    "hal",
    "music",
    "tunes",
    "radio",
    "microbit",
    "reciter_tables",
    "reciter_rules",
]