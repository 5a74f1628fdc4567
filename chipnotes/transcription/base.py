from __future__ import annotations
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Callable, List, Optional

from chipnotes.state import ChannelAnalysisResult, Settings, TrackInfo


ProgressFn = Optional[Callable[[int, str], None]]


class ChannelAnalyzer(ABC):
    file_types: str = ""

    def __init__(self, settings: Optional[Settings] = None) -> None:
        self.settings = settings or Settings()

    @abstractmethod
    def open(self, source: Path, progress: ProgressFn = None) -> ChannelAnalysisResult:
        raise NotImplementedError


class TrackAnalyzer(ChannelAnalyzer):
    """Analyzers whose files hold several tracks."""

    @abstractmethod
    def list_tracks(self, source: Path) -> List[TrackInfo]:
        raise NotImplementedError

    @abstractmethod
    def select_track(self, source: Path, index: int, progress: ProgressFn = None) -> ChannelAnalysisResult:
        raise NotImplementedError
