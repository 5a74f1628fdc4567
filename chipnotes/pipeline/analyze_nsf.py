from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional, Sequence

from chipnotes.apu.emulator import ApuEmulator, EmulatorFactory
from chipnotes.apu.log_io import read_apu_log_csv
from chipnotes.apu.replay import replay_apu_log
from chipnotes.errors import ContainerOpenFailure, EmulatorOpenFailure
from chipnotes.state import ApuLogEntry, ChannelAnalysisResult, Settings, TrackInfo
from chipnotes.transcription.base import ChannelAnalyzer, ProgressFn, TrackAnalyzer
from chipnotes.transcription.range import determine_range

logger = logging.getLogger(__name__)

MAX_TRACKS = 256


def analyze_apu_log(
    entries: Sequence[ApuLogEntry],
    source: Path,
    settings: Settings,
    track: Optional[int] = None,
    progress: ProgressFn = None,
) -> ChannelAnalysisResult:
    def emit(pct: int, msg: str) -> None:
        if progress:
            progress(pct, msg)

    warnings: List[str] = []
    if not entries:
        warnings.append("APU log is empty.")

    emit(60, "Replaying APU log…")
    tones = replay_apu_log(entries, settings)

    emit(90, "Determining range…")
    pitch_range = determine_range(*tones)
    if pitch_range.is_empty:
        warnings.append("No sounded tones found.")

    emit(100, "Analysis complete.")
    return ChannelAnalysisResult(
        source=source,
        kind="nsf",
        tones=tuple(tuple(t) for t in tones),
        pitch_range=pitch_range,
        track=track,
        warnings=tuple(warnings),
    )


class NsfAnalyzer(TrackAnalyzer):
    """Log path: NSF/NSFe files rendered through an external APU emulator."""

    file_types = "NSF/NSFe (*.nsf *.NSF *.nsfe *.NSFE)"

    def __init__(self, emulator_factory: EmulatorFactory, settings: Optional[Settings] = None) -> None:
        super().__init__(settings)
        self.emulator_factory = emulator_factory

    def _open_emulator(self, source: Path) -> ApuEmulator:
        try:
            return self.emulator_factory(source, self.settings.emulator_sample_rate)
        except Exception as e:
            raise EmulatorOpenFailure(f"Emulator rejected {source.name}: {e}", source=source) from e

    def list_tracks(self, source: Path) -> List[TrackInfo]:
        emu = self._open_emulator(source)
        tracks = [emu.track_info(i) for i in range(emu.track_count())]
        logger.info("Track count: %d", len(tracks))
        return tracks

    def select_track(self, source: Path, index: int, progress: ProgressFn = None) -> ChannelAnalysisResult:
        def emit(pct: int, msg: str) -> None:
            if progress:
                progress(pct, msg)

        emit(5, "Starting emulator…")
        emu = self._open_emulator(source)
        count = emu.track_count()
        if not (0 <= index < min(count, MAX_TRACKS)):
            raise ValueError(f"Track {index} out of range (file has {count} tracks)")
        try:
            emu.start_track(index)
        except Exception as e:
            raise EmulatorOpenFailure(
                f"Emulator could not start track {index}: {e}", source=source, context={"track": index}
            ) from e
        logger.info("Track %d selected", index)

        emit(20, f"Rendering {self.settings.render_seconds} s…")
        entries = emu.render(self.settings.render_seconds)
        logger.info("APU log entries: %d", len(entries))
        return analyze_apu_log(entries, source, self.settings, track=index, progress=progress)

    def open(self, source: Path, progress: ProgressFn = None) -> ChannelAnalysisResult:
        return self.select_track(source, 0, progress)


class ApuLogAnalyzer(ChannelAnalyzer):
    """Log path from a previously captured APU log (CSV)."""

    file_types = "APU log (*.csv)"

    def open(self, source: Path, progress: ProgressFn = None) -> ChannelAnalysisResult:
        if progress:
            progress(5, "Loading APU log…")
        try:
            entries = read_apu_log_csv(source)
        except OSError as e:
            raise ContainerOpenFailure(f"Could not open {source.name}: {e}", source=source) from e
        except (KeyError, ValueError) as e:
            raise ContainerOpenFailure(f"Could not parse {source.name}: {e}", source=source) from e
        return analyze_apu_log(entries, source, self.settings, progress=progress)
