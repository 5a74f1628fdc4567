from __future__ import annotations

import logging
from typing import Iterable, List, Optional, Tuple

from chipnotes.apu.hardware import MiniApu
from chipnotes.state import ApuEventKind, ApuLogEntry, CycleShape, Settings, Tone
from chipnotes.transcription.semitone import period_to_semitone, square_period, triangle_period

logger = logging.getLogger(__name__)

MELODIC_CHANNELS = 3  # square 1, square 2, triangle


def sort_log(entries: Iterable[ApuLogEntry]) -> List[ApuLogEntry]:
    # sorted() is stable: entries sharing a timestamp stay in the order they were logged
    return sorted(entries, key=lambda e: e.timestamp)


def apply_entry(apu: MiniApu, entry: ApuLogEntry, sweep_end: List[int]) -> None:
    if entry.kind is ApuEventKind.REGISTER_WRITE:
        apu.write(entry.address, entry.data)
    elif entry.kind is ApuEventKind.TIMEOUT:
        apu.channel(entry.channel).timed_out = True
    elif entry.kind is ApuEventKind.TIMEOUT_LINEAR:
        apu.triangle.timed_out_linear = True
    elif entry.kind is ApuEventKind.RELOADED_LINEAR:
        apu.triangle.timed_out_linear = False
    elif entry.kind is ApuEventKind.SWEEP:
        sweep_end[entry.channel] = entry.data


def observe(apu: MiniApu, channel_i: int, timestamp: int) -> Tone:
    """Snapshot one channel as a not-yet-closed tone starting at `timestamp`."""
    state = apu.channel(channel_i).state()
    if channel_i < 2:
        shape = CycleShape(state.duty + 1)
        pitch = period_to_semitone(square_period(state.timer))
    else:
        shape = CycleShape.TRIANGLE
        pitch = period_to_semitone(triangle_period(state.timer))
    if not state.out_volume:
        shape = CycleShape.NONE
    return Tone(start=timestamp, pitch=pitch, shape=shape, volume=state.out_volume, timer=state.timer)


def same_state(a: Tone, b: Tone) -> bool:
    return a.timer == b.timer and a.shape == b.shape and a.volume == b.volume


def replay_apu_log(
    entries: Iterable[ApuLogEntry],
    settings: Optional[Settings] = None,
) -> Tuple[List[Tone], List[Tone], List[Tone]]:
    """
    Replay an APU event log and return the tones of square 1, square 2 and
    the triangle.

    Every entry is applied to a MiniApu and each channel is re-observed;
    a change of (timer, shape, volume) closes the open tone at the entry's
    timestamp. Closed tones of length 0 are dropped, and sounding tones
    shorter than `settings.micro_tone_ticks` are marked IRREGULAR since they
    come from register writes that could not land on the same cycle.
    The last tone of each channel is discarded because its end is unknown.
    """
    settings = settings or Settings()
    log = sort_log(entries)
    apu = MiniApu()
    tones: Tuple[List[Tone], ...] = tuple([] for _ in range(MELODIC_CHANNELS))
    sweep_end = [-1] * MELODIC_CHANNELS

    for entry in log:
        apply_entry(apu, entry, sweep_end)
        for channel_i in range(MELODIC_CHANNELS):
            current = observe(apu, channel_i, entry.timestamp)
            channel_tones = tones[channel_i]
            if channel_tones:
                previous = channel_tones[-1]
                if same_state(current, previous):
                    continue
                previous.length = current.start - previous.start
                if channel_i < 2 and sweep_end[channel_i] > -1:
                    previous.timer_end = sweep_end[channel_i]
                    sweep_end[channel_i] = -1
                if previous.length == 0:
                    # both tones began on the same cycle; keep only the newer one
                    logger.debug("Deleting length-0 tone on channel %d at %d", channel_i, previous.start)
                    channel_tones.pop()
                elif previous.length < settings.micro_tone_ticks and previous.shape != CycleShape.NONE:
                    previous.shape = CycleShape.IRREGULAR
            channel_tones.append(current)

    for channel_i, channel_tones in enumerate(tones):
        if channel_tones:
            channel_tones.pop()
        logger.info("Channel %d tone count: %d", channel_i, len(channel_tones))
    return tones[0], tones[1], tones[2]
