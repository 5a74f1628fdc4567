"""
Tests for merging cycles into tones and for the pitch range scan.
"""

import pytest

from chipnotes.state import Cycle, CycleShape, PitchRange, Tone
from chipnotes.transcription.range import determine_range
from chipnotes.transcription.tones import find_tones, tones_to_cycles


def cyc(start, shape, pitch, *runs):
    return Cycle(start, shape, pitch, tuple(runs))


class TestFindTones:
    def test_empty(self):
        assert find_tones([]) == []

    def test_merges_identical_cycles(self):
        """Consecutive cycles with the same pitch and shape make one tone"""
        cycles = [
            cyc(0, CycleShape.HALF, 60.0, 80, 80),
            cyc(160, CycleShape.HALF, 60.0, 80, 80),
            cyc(320, CycleShape.QUARTER, 60.0, 40, 120),
            cyc(480, CycleShape.QUARTER, 48.0, 80, 240),
        ]
        tones = find_tones(cycles)
        assert [(t.start, t.length, t.shape, t.pitch) for t in tones] == [
            (0, 320, CycleShape.HALF, 60.0),
            (320, 160, CycleShape.QUARTER, 60.0),
            (480, 320, CycleShape.QUARTER, 48.0),
        ]

    def test_last_tone_length_comes_from_last_cycle(self):
        """The final tone is closed with its last cycle's runs"""
        cycles = [cyc(0, CycleShape.HALF, 60.0, 80, 80), cyc(160, CycleShape.HALF, 60.0, 80, 80)]
        tones = find_tones(cycles)
        assert len(tones) == 1
        assert tones[0].length == 160

    def test_single_run_cycle(self):
        cycles = [cyc(0, CycleShape.NONE, None, 30000)]
        tones = find_tones(cycles)
        assert tones == [Tone(start=0, pitch=None, shape=CycleShape.NONE, length=30000)]

    def test_idempotent(self):
        """Folding tones re-expressed as cycles gives the same tones"""
        cycles = [
            cyc(0, CycleShape.NONE, None, 30000),
            cyc(30000, CycleShape.EIGHTH, 50.0, 20, 140),
            cyc(30160, CycleShape.EIGHTH, 50.0, 20, 140),
            cyc(30320, CycleShape.IRREGULAR, 51.2, 30, 130),
            cyc(30480, CycleShape.EIGHTH, 50.0, 20, 140),
        ]
        tones = find_tones(cycles)
        again = find_tones(tones_to_cycles(tones))
        assert again == tones


class TestDetermineRange:
    def test_bounds(self):
        """highest is the max ceil, lowest the min floor"""
        tones = [
            Tone(0, 40.3, CycleShape.HALF, 10),
            Tone(10, 52.7, CycleShape.EIGHTH, 10),
        ]
        assert determine_range(tones) == PitchRange(lowest=40, highest=53)

    def test_skips_unsounded(self):
        """Irregular, negative, undefined and silent tones do not count"""
        tones = [
            Tone(0, 10.5, CycleShape.IRREGULAR, 10),
            Tone(0, -3.0, CycleShape.HALF, 10),
            Tone(0, None, CycleShape.NONE, 10),
            Tone(0, 80.0, CycleShape.HALF, 10, volume=0),
            Tone(0, 30.0, CycleShape.TRIANGLE, 10, volume=15),
        ]
        assert determine_range(tones) == PitchRange(lowest=30, highest=30)

    def test_multiple_channels(self):
        a = [Tone(0, 20.2, CycleShape.HALF, 1)]
        b = [Tone(0, 70.9, CycleShape.TRIANGLE, 1, volume=15)]
        assert determine_range(a, b) == PitchRange(lowest=20, highest=71)

    def test_nothing_sounded_keeps_prior(self):
        """No qualifying tone leaves the bounds where they were"""
        empty = determine_range([])
        assert empty == PitchRange()
        assert empty.is_empty
        prior = PitchRange(lowest=8, highest=96)
        assert determine_range([Tone(0, 5.0, CycleShape.IRREGULAR, 1)], prior=prior) == prior

    def test_prior_is_extended(self):
        prior = PitchRange(lowest=30, highest=40)
        result = determine_range([Tone(0, 45.5, CycleShape.HALF, 1)], prior=prior)
        assert result == PitchRange(lowest=30, highest=46)
        assert not result.is_empty

    @pytest.mark.parametrize("pitch", [12.0, 12.5])
    def test_integer_pitch(self, pitch):
        result = determine_range([Tone(0, pitch, CycleShape.HALF, 1)])
        assert result.lowest == 12
        assert result.highest == (12 if pitch == 12.0 else 13)
