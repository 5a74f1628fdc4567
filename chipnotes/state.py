from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, IntEnum
from pathlib import Path
from typing import List, Optional, Tuple

from chipnotes import config


class CycleShape(IntEnum):
    NONE = 0
    EIGHTH = 1
    QUARTER = 2
    HALF = 3
    THREE_QUARTERS = 4
    TRIANGLE = 5
    IRREGULAR = 6


@dataclass
class Settings:
    micro_tone_ticks: int = config.MICRO_TONE_TICKS
    render_seconds: int = config.RENDER_SECONDS
    emulator_sample_rate: int = config.EMULATOR_SAMPLE_RATE
    midi_program: int = 80  # GM "Lead 1 (square)"
    midi_velocity: int = 96
    min_export_ticks: int = config.MICRO_TONE_TICKS


@dataclass(frozen=True)
class Run:
    start: int
    length: int
    level: int

    @property
    def on(self) -> bool:
        return self.level != 0


@dataclass(frozen=True)
class Cycle:
    start: int
    shape: CycleShape = CycleShape.IRREGULAR
    pitch: Optional[float] = None
    runs: Tuple[int, ...] = ()


@dataclass
class Tone:
    start: int
    pitch: Optional[float]
    shape: CycleShape
    length: Optional[int] = None
    volume: Optional[int] = None
    timer: Optional[int] = None
    timer_end: Optional[int] = None  # sweep target reached by the end of the tone

    @property
    def end(self) -> Optional[int]:
        if self.length is None:
            return None
        return self.start + self.length

    @property
    def start_sec(self) -> float:
        return self.start / config.CLOCK_HZ

    @property
    def end_sec(self) -> float:
        return (self.start + (self.length or 0)) / config.CLOCK_HZ


class ApuEventKind(Enum):
    REGISTER_WRITE = "write"
    TIMEOUT = "timeout"
    TIMEOUT_LINEAR = "timeout_linear"
    RELOADED_LINEAR = "reloaded_linear"
    SWEEP = "sweep"


@dataclass(frozen=True)
class ApuLogEntry:
    timestamp: int
    kind: ApuEventKind
    channel: Optional[int] = None
    address: Optional[int] = None
    data: Optional[int] = None

    @classmethod
    def write(cls, timestamp: int, address: int, data: int) -> "ApuLogEntry":
        return cls(timestamp, ApuEventKind.REGISTER_WRITE, address=address, data=data)

    @classmethod
    def timeout(cls, timestamp: int, channel: int) -> "ApuLogEntry":
        return cls(timestamp, ApuEventKind.TIMEOUT, channel=channel)

    @classmethod
    def sweep(cls, timestamp: int, channel: int, target_timer: int) -> "ApuLogEntry":
        return cls(timestamp, ApuEventKind.SWEEP, channel=channel, data=target_timer)


@dataclass(frozen=True)
class PitchRange:
    lowest: int = 999
    highest: int = -999

    @property
    def is_empty(self) -> bool:
        return self.lowest > self.highest


@dataclass(frozen=True)
class TrackInfo:
    index: int
    title: str = ""
    length_ms: int = -1

    @property
    def label(self) -> str:
        return f"{self.index + 1}: {self.title}" if self.title else str(self.index + 1)


@dataclass(frozen=True)
class ChannelAnalysisResult:
    source: Path
    kind: str  # "wav" | "nsf"
    tones: Tuple[Tuple[Tone, ...], ...]
    pitch_range: PitchRange
    runs: Tuple[Tuple[Run, ...], ...] = ()
    track: Optional[int] = None
    warnings: Tuple[str, ...] = field(default_factory=tuple)

    def channel(self, index: int) -> Tuple[Tone, ...]:
        return self.tones[index]

    def all_tones(self) -> List[Tone]:
        return [t for channel in self.tones for t in channel]
