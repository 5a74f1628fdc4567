from __future__ import annotations

import logging
from typing import List, Sequence

from chipnotes.state import Cycle, Tone

logger = logging.getLogger(__name__)


def find_tones(cycles: Sequence[Cycle]) -> List[Tone]:
    """
    Merge consecutive cycles with the same (pitch, shape) into tones.
    Every tone but the last is closed by the start of the next one; the last
    one takes the length of its final cycle's runs.
    """
    tones: List[Tone] = []
    if not cycles:
        return tones

    first = cycles[0]
    tone = Tone(start=first.start, pitch=first.pitch, shape=first.shape)
    for cycle in cycles[1:]:
        if cycle.pitch != tone.pitch or cycle.shape != tone.shape:
            tone.length = cycle.start - tone.start
            tones.append(tone)
            tone = Tone(start=cycle.start, pitch=cycle.pitch, shape=cycle.shape)

    tone.length = sum(cycles[-1].runs)
    tones.append(tone)
    logger.debug("Tone count: %d", len(tones))
    return tones


def tones_to_cycles(tones: Sequence[Tone]) -> List[Cycle]:
    """Re-express closed tones as single-run cycles."""
    return [Cycle(t.start, t.shape, t.pitch, (t.length or 0,)) for t in tones]
