from __future__ import annotations

import logging
from typing import List, Sequence

from chipnotes import config
from chipnotes.state import Cycle, CycleShape, Run
from chipnotes.transcription.semitone import period_to_semitone

logger = logging.getLogger(__name__)

# Pulse shapes as seen in the dump, on-run then off-run:
#   1/8: -_______
#   1/4: --______
#   1/2: ----____
#   3/4: ------__


def classify_duty(on: int, off: int) -> CycleShape:
    if on * 7 == off:
        return CycleShape.EIGHTH
    if on * 3 == off:
        return CycleShape.QUARTER
    if on == off:
        return CycleShape.HALF
    if on == off * 3:
        return CycleShape.THREE_QUARTERS
    return CycleShape.IRREGULAR


def is_normal_period(period: int) -> bool:
    return (
        config.MIN_NORMAL_PERIOD <= period <= config.MAX_PERIOD
        and period % config.PERIOD_ALIGN == 0
    )


def runs_to_cycles(runs: Sequence[Run]) -> List[Cycle]:
    """
    Pair each "on" run with the run after it to form one waveform period.

    Silent runs become single-run cycles: shape NONE when the gap is long
    enough to be a rest, IRREGULAR otherwise. An "on" run whose period would
    exceed MAX_PERIOD (or that ends the channel) stays on its own and the
    following run is looked at again.
    """
    cycles: List[Cycle] = []
    i = 0
    n = len(runs)
    while i < n:
        run = runs[i]
        if not run.on:
            shape = CycleShape.NONE if run.length > config.LONG_SILENCE else CycleShape.IRREGULAR
            cycles.append(Cycle(run.start, shape, None, (run.length,)))
            i += 1
            continue

        if i + 1 >= n:
            cycles.append(Cycle(run.start, CycleShape.IRREGULAR, None, (run.length,)))
            break

        off = runs[i + 1]
        period = run.length + off.length
        if is_normal_period(period):
            shape = classify_duty(run.length, off.length)
            cycles.append(Cycle(run.start, shape, period_to_semitone(period), (run.length, off.length)))
            i += 2
        elif period <= config.MAX_PERIOD:
            cycles.append(Cycle(run.start, CycleShape.IRREGULAR, period_to_semitone(period), (run.length, off.length)))
            i += 2
        else:
            cycles.append(Cycle(run.start, CycleShape.IRREGULAR, None, (run.length,)))
            i += 1

    logger.debug("Cycle count: %d", len(cycles))
    return cycles
