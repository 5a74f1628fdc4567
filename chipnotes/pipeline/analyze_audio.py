from __future__ import annotations
from pathlib import Path
from typing import Optional

from chipnotes.apu.emulator import EmulatorFactory
from chipnotes.errors import EmulatorOpenFailure
from chipnotes.pipeline.analyze_nsf import ApuLogAnalyzer, NsfAnalyzer
from chipnotes.pipeline.analyze_wav import WavAnalyzer
from chipnotes.state import ChannelAnalysisResult, Settings
from chipnotes.transcription.base import ChannelAnalyzer, ProgressFn


NSF_SUFFIXES = {".nsf", ".nsfe"}
LOG_SUFFIXES = {".csv"}


def analyzer_for(
    input_path: Path,
    settings: Settings,
    emulator_factory: Optional[EmulatorFactory] = None,
) -> ChannelAnalyzer:
    suffix = input_path.suffix.lower()
    if suffix in NSF_SUFFIXES:
        if emulator_factory is None:
            raise EmulatorOpenFailure("No emulator backend is configured for NSF files", source=input_path)
        return NsfAnalyzer(emulator_factory, settings)
    if suffix in LOG_SUFFIXES:
        return ApuLogAnalyzer(settings)
    # .wav, .wav.gz, .wav.xz and anything else gets the header check
    return WavAnalyzer(settings)


def analyze_file(
    input_path: Path,
    settings: Optional[Settings] = None,
    track: Optional[int] = None,
    emulator_factory: Optional[EmulatorFactory] = None,
    progress: ProgressFn = None,
) -> ChannelAnalysisResult:
    settings = settings or Settings()
    analyzer = analyzer_for(input_path, settings, emulator_factory)
    if track is not None and isinstance(analyzer, NsfAnalyzer):
        return analyzer.select_track(input_path, track, progress)
    return analyzer.open(input_path, progress)
