from __future__ import annotations

import math
from typing import Iterable

from chipnotes.state import CycleShape, PitchRange, Tone


def is_sounded(tone: Tone) -> bool:
    if tone.shape == CycleShape.IRREGULAR:
        return False
    if tone.pitch is None or tone.pitch < 0:
        return False
    # only log-derived tones carry a volume
    if tone.volume is not None and tone.volume == 0:
        return False
    return True


def determine_range(*tone_lists: Iterable[Tone], prior: PitchRange = PitchRange()) -> PitchRange:
    """
    Inclusive integer semitone bounds over every sounded tone.
    Returns `prior` untouched when nothing qualifies.
    """
    highest = prior.highest
    lowest = prior.lowest
    for tones in tone_lists:
        for tone in tones:
            if not is_sounded(tone):
                continue
            highest = max(highest, math.ceil(tone.pitch))
            lowest = min(lowest, math.floor(tone.pitch))
    return PitchRange(lowest=lowest, highest=highest)
