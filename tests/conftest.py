"""
Shared fixtures for the ChipNotes test suite.

Run with: pytest tests -v
"""

import gzip
import io
import lzma
import os
import sys

import numpy as np
import pytest
import soundfile as sf

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from chipnotes import config
from chipnotes.state import ApuLogEntry, Run


def pcm16(frames):
    """What soundfile returns as int16 for unsigned 8-bit frames."""
    return (np.asarray(frames, dtype=np.int16) - 128) << 8


def wav_bytes(frames, channels=config.WAV_CHANNELS, samplerate=config.CLOCK_HZ, subtype="PCM_U8", format="WAV"):
    frames = np.asarray(frames, dtype=np.uint8).reshape(-1, config.WAV_CHANNELS)[:, :channels]
    buf = io.BytesIO()
    sf.write(buf, pcm16(frames), samplerate, subtype=subtype, format=format)
    return buf.getvalue()


def square_frames(pattern, repeats=1, channel=0, channels=5, on_value=136, off_value=128):
    """Frames with a pulse train on one channel; `pattern` is [(on, off), ...]."""
    column = []
    for _ in range(repeats):
        for on, off in pattern:
            column += [on_value] * on + [off_value] * off
    frames = np.full((len(column), channels), 128, dtype=np.uint8)
    frames[:, channel] = column
    return frames


@pytest.fixture
def make_wav(tmp_path):
    def _make(frames, name="dump.wav", compress=None, **header):
        raw = wav_bytes(frames, **header)
        if compress == "gzip":
            raw = gzip.compress(raw)
            name += ".gz"
        elif compress == "xz":
            raw = lzma.compress(raw)
            name += ".xz"
        path = tmp_path / name
        path.write_bytes(raw)
        return path
    return _make


@pytest.fixture
def runs_from():
    """Build a contiguous Run list from [(length, level), ...]."""
    def _runs(pairs):
        runs = []
        start = 0
        for length, level in pairs:
            runs.append(Run(start, length, level))
            start += length
        return runs
    return _runs


@pytest.fixture
def square_setup():
    """Register writes that enable all channels and set square 1 playing."""
    def _setup(t=0, timer=100, duty=0, volume=15, base=0x4000):
        return [
            ApuLogEntry.write(t, 0x4015, 0x0F),
            ApuLogEntry.write(t, base + 0, (duty << 6) | 0x30 | volume),
            ApuLogEntry.write(t, base + 2, timer & 0xFF),
            ApuLogEntry.write(t, base + 3, (timer >> 8) & 0x07),
        ]
    return _setup
