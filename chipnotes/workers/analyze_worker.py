from __future__ import annotations
from pathlib import Path
from typing import Callable, Optional

from PySide6.QtCore import QObject, Signal, Slot, QThread

from chipnotes.apu.emulator import EmulatorFactory
from chipnotes.pipeline.analyze_audio import analyze_file
from chipnotes.state import Settings


class AnalyzeWorker(QObject):
    progress = Signal(int, str)
    finished = Signal(object)  # ChannelAnalysisResult
    error = Signal(str)

    def __init__(
        self,
        input_path: Path,
        settings: Settings,
        track: Optional[int] = None,
        emulator_factory: Optional[EmulatorFactory] = None,
    ) -> None:
        super().__init__()
        self.input_path = input_path
        self.settings = settings
        self.track = track
        self.emulator_factory = emulator_factory

    @Slot()
    def run(self) -> None:
        # a pass either publishes a whole result or only an error
        try:
            result = analyze_file(
                self.input_path,
                self.settings,
                track=self.track,
                emulator_factory=self.emulator_factory,
                progress=lambda p, m: self.progress.emit(p, m),
            )
        except Exception as e:
            self.error.emit(str(e))
            return
        self.finished.emit(result)


def start_analyze_worker(
    input_path: Path,
    settings: Settings,
    track: Optional[int] = None,
    emulator_factory: Optional[EmulatorFactory] = None,
    on_finished: Optional[Callable[[object], None]] = None,
):
    thread = QThread()
    worker = AnalyzeWorker(input_path, settings, track, emulator_factory)
    worker.moveToThread(thread)
    if on_finished is not None:
        worker.finished.connect(on_finished)

    thread.started.connect(worker.run)
    worker.finished.connect(thread.quit)
    worker.finished.connect(worker.deleteLater)
    thread.finished.connect(thread.deleteLater)

    worker.error.connect(thread.quit)
    worker.error.connect(worker.deleteLater)

    thread.start()
    return thread, worker
