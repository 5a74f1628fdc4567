from __future__ import annotations

from pathlib import Path
from typing import Sequence

import numpy as np
import soundfile as sf

from chipnotes.state import CycleShape, Tone
from chipnotes.transcription.range import is_sounded
from chipnotes.transcription.semitone import C0

DUTY = {
    CycleShape.EIGHTH: 0.125,
    CycleShape.QUARTER: 0.25,
    CycleShape.HALF: 0.5,
    CycleShape.THREE_QUARTERS: 0.75,
}


def semitone_to_hz(semitone: float) -> float:
    return C0 * (2.0 ** (semitone / 12.0))


def _waveform(shape: CycleShape, phase: np.ndarray) -> np.ndarray:
    frac = phase - np.floor(phase)
    if shape == CycleShape.TRIANGLE:
        return 1.0 - 4.0 * np.abs(frac - 0.5)
    duty = DUTY.get(shape, 0.5)
    return np.where(frac < duty, 1.0, -1.0)


def render_preview(channels: Sequence[Sequence[Tone]], sr: int = 44100) -> np.ndarray:
    sr = 44100 if int(sr) <= 0 else int(sr)
    tones = [t for ch in channels for t in ch if is_sounded(t) and t.shape != CycleShape.NONE and t.length]
    if not tones:
        return np.zeros(int(sr * 0.1), dtype=np.float32)

    end = max(t.end_sec for t in tones)
    buf = np.zeros(max(1, int(np.ceil(end * sr))), dtype=np.float64)

    for t in tones:
        st = int(t.start_sec * sr)
        en = min(int(t.end_sec * sr), len(buf))
        if en <= st:
            continue
        hz = semitone_to_hz(t.pitch)
        amp = 0.25 * ((t.volume / 15.0) if t.volume is not None else 1.0)
        phase = hz * np.arange(en - st) / sr
        buf[st:en] += amp * _waveform(t.shape, phase)

    peak = max(1e-9, float(np.max(np.abs(buf))))
    return (buf * (0.95 / peak)).astype(np.float32)


def render_preview_wav(channels: Sequence[Sequence[Tone]], out_path: Path, sr: int = 44100) -> Path:
    out_path.parent.mkdir(parents=True, exist_ok=True)
    sf.write(str(out_path), render_preview(channels, sr), sr, subtype="PCM_16")
    return out_path
