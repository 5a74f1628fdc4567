"""
Tests for MIDI export and the preview render.
"""

import numpy as np
import pretty_midi
import pytest
import soundfile as sf

from chipnotes.midi.preview_synth import render_preview, render_preview_wav, semitone_to_hz
from chipnotes.midi.writer import write_midi
from chipnotes.state import CycleShape, Tone
from chipnotes.transcription.semitone import period_to_semitone, square_period

CLOCK = 1789773
A4 = period_to_semitone(square_period(253))


def channels():
    sq1 = [
        Tone(0, A4, CycleShape.HALF, length=CLOCK // 2, volume=15, timer=253),
        Tone(CLOCK // 2, A4, CycleShape.IRREGULAR, length=100, volume=15, timer=253),
        Tone(CLOCK // 2 + 100, A4, CycleShape.NONE, length=CLOCK // 2, volume=0, timer=253),
    ]
    tri = [Tone(0, A4 - 12, CycleShape.TRIANGLE, length=CLOCK, volume=15)]
    return [sq1, [], tri]


class TestWriteMidi:
    def test_one_instrument_per_channel(self, tmp_path):
        out = write_midi(channels(), tmp_path / "out" / "song.mid")
        pm = pretty_midi.PrettyMIDI(str(out))
        by_name = {i.name: i for i in pm.instruments}
        # instruments without notes do not survive a reload
        assert set(by_name) == {"Square 1", "Triangle"}
        sq1 = by_name["Square 1"].notes
        assert len(sq1) == 1
        assert sq1[0].pitch == 69
        assert sq1[0].start == pytest.approx(0.0, abs=1e-3)
        assert sq1[0].end == pytest.approx(0.5, abs=1e-3)
        assert by_name["Triangle"].notes[0].pitch == 57


class TestPreview:
    def test_render(self):
        audio = render_preview(channels(), sr=8000)
        assert audio.dtype == np.float32
        assert len(audio) == 8000
        assert float(np.max(np.abs(audio))) == pytest.approx(0.95, abs=1e-3)

    def test_render_nothing(self):
        audio = render_preview([[], [], []], sr=8000)
        assert len(audio) == 800
        assert not audio.any()

    def test_write_wav(self, tmp_path):
        out = render_preview_wav(channels(), tmp_path / "preview.wav", sr=8000)
        data, sr = sf.read(str(out))
        assert sr == 8000
        assert len(data) == 8000

    def test_a440(self):
        assert semitone_to_hz(57) == pytest.approx(440.0, rel=1e-9)
