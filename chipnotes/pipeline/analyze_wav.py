from __future__ import annotations

import logging
from pathlib import Path
from typing import List

from chipnotes.audio.io import WavBlockReader
from chipnotes.state import ChannelAnalysisResult, Tone
from chipnotes.transcription.base import ChannelAnalyzer, ProgressFn
from chipnotes.transcription.cycles import runs_to_cycles
from chipnotes.transcription.range import determine_range
from chipnotes.transcription.runs import RunExtractor
from chipnotes.transcription.tones import find_tones

logger = logging.getLogger(__name__)

# square 1, square 2, triangle; noise and DMC stay as runs only
TONE_CHANNELS = 3


class WavAnalyzer(ChannelAnalyzer):
    """Sample path: 5-channel 8-bit dumps, optionally gzip/xz compressed."""

    file_types = "5-channel WAV (*.wav *.wav.gz *.wav.xz)"

    def open(self, source: Path, progress: ProgressFn = None) -> ChannelAnalysisResult:
        warnings: List[str] = []

        def emit(pct: int, msg: str) -> None:
            if progress:
                progress(pct, msg)

        emit(5, "Opening WAV…")
        extractor = RunExtractor()
        with WavBlockReader(source) as reader:
            total = reader.frames
            consumed = 0
            emit(10, "Reading runs…")
            for block in reader:
                extractor.feed(block)
                consumed += len(block)
                if total:
                    emit(10 + min(50, 50 * consumed // total), "Reading runs…")
        runs = extractor.finish()
        if extractor.sample_count == 0:
            warnings.append("File contains no samples.")

        emit(65, "Converting runs to cycles…")
        tones: List[List[Tone]] = []
        for channel_i in range(TONE_CHANNELS):
            cycles = runs_to_cycles(runs[channel_i])
            tones.append(find_tones(cycles))
            logger.info("Channel %d: %d cycles, %d tones", channel_i, len(cycles), len(tones[-1]))

        emit(90, "Determining range…")
        pitch_range = determine_range(*tones)
        if pitch_range.is_empty:
            warnings.append("No sounded tones found.")

        emit(100, "Analysis complete.")
        return ChannelAnalysisResult(
            source=source,
            kind="wav",
            tones=tuple(tuple(t) for t in tones),
            pitch_range=pitch_range,
            runs=tuple(tuple(r) for r in runs),
            warnings=tuple(warnings),
        )
