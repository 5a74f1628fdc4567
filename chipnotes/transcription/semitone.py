from __future__ import annotations

import math
from typing import Optional

from chipnotes import config

TWELFTH_ROOT = 2.0 ** (1.0 / 12.0)
A0 = 440.0 / 2 ** 4
C0 = A0 * TWELFTH_ROOT ** -9.0
MIDI_C0 = 12

NOTE_NAMES = ["C", "C#", "D", "D#", "E", "F", "F#", "G", "G#", "A", "A#", "B"]


def period_to_semitone(period: Optional[float]) -> Optional[float]:
    """
    Fractional semitone index above C0 for a waveform period given in CPU
    clock ticks (or samples at CLOCK_HZ, which is the same thing).
    Returns None for a missing or non-positive period.
    """
    if period is None or period <= 0:
        return None
    frequency = config.CLOCK_HZ / period
    return math.log(frequency / C0) / math.log(TWELFTH_ROOT)


def square_period(timer: int) -> int:
    return 16 * (timer + 1)


def triangle_period(timer: int) -> int:
    return 32 * (timer + 1)


def semitone_to_midi(semitone: float) -> int:
    return int(round(semitone)) + MIDI_C0


def semitone_name(semitone: int) -> str:
    return f"{NOTE_NAMES[semitone % 12]}{semitone // 12}"
