from __future__ import annotations
from pathlib import Path
from typing import Iterable, Optional, Sequence

import pretty_midi

from chipnotes.state import CycleShape, Settings, Tone
from chipnotes.transcription.range import is_sounded
from chipnotes.transcription.semitone import semitone_to_midi

CHANNEL_NAMES = ("Square 1", "Square 2", "Triangle")


def tones_to_instrument(tones: Iterable[Tone], name: str, program: int, velocity: int, min_ticks: int = 0) -> pretty_midi.Instrument:
    inst = pretty_midi.Instrument(program=program, name=name)
    for t in tones:
        if not is_sounded(t) or t.shape == CycleShape.NONE:
            continue
        if not t.length or t.length < min_ticks:
            continue
        pitch = int(max(0, min(127, semitone_to_midi(t.pitch))))
        vel = velocity
        if t.volume is not None:
            vel = int(max(1, min(127, velocity * t.volume / 15)))
        inst.notes.append(pretty_midi.Note(velocity=vel, pitch=pitch, start=t.start_sec, end=t.end_sec))
    return inst


def write_midi(channels: Sequence[Sequence[Tone]], out_path: Path, settings: Optional[Settings] = None) -> Path:
    """
    Writes one MIDI instrument per melodic channel.
    Unsounded, irregular and very short tones are left out.
    """
    settings = settings or Settings()
    pm = pretty_midi.PrettyMIDI()
    for i, tones in enumerate(channels):
        name = CHANNEL_NAMES[i] if i < len(CHANNEL_NAMES) else f"Channel {i}"
        program = settings.midi_program + (1 if i == 2 else 0)
        pm.instruments.append(
            tones_to_instrument(tones, name, program, settings.midi_velocity, settings.min_export_ticks)
        )
    out_path.parent.mkdir(parents=True, exist_ok=True)
    pm.write(str(out_path))
    return out_path
