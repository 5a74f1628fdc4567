from __future__ import annotations

from pathlib import Path
from typing import Callable, List, Protocol

from chipnotes.state import ApuLogEntry, TrackInfo


class ApuEmulator(Protocol):
    """
    What the NSF path needs from a chip emulator: track metadata, and a
    rendered track's APU event log (in production order).
    """

    def track_count(self) -> int: ...

    def track_info(self, index: int) -> TrackInfo: ...

    def start_track(self, index: int) -> None: ...

    def render(self, seconds: int) -> List[ApuLogEntry]: ...


# Opens a music file at the given output sample rate; raises on rejection.
EmulatorFactory = Callable[[Path, int], ApuEmulator]
