from __future__ import annotations

import logging
from typing import Iterable, List, Optional, Tuple

import numpy as np

from chipnotes import config
from chipnotes.state import Run

logger = logging.getLogger(__name__)


def quantize(samples: np.ndarray, digital_channels: int = config.DIGITAL_CHANNELS) -> np.ndarray:
    """
    Map int16 frames (n, channels) decoded from unsigned 8-bit PCM back to
    signed levels around the 128 bias. The digital channels keep only their
    top 5 bits.
    """
    levels = samples.astype(np.int16) >> 8
    if digital_channels:
        levels[:, :digital_channels] >>= 3
    return levels


class RunExtractor:
    """
    Incrementally splits frame blocks into per-channel runs of constant
    quantized level. Feed blocks in order, then call finish().
    """

    def __init__(self, channels: int = config.WAV_CHANNELS, digital_channels: int = config.DIGITAL_CHANNELS) -> None:
        self.channels = channels
        self.digital_channels = min(digital_channels, channels)
        self.sample_count = 0
        self._start = [0] * channels
        self._level: List[Optional[int]] = [None] * channels
        self._runs: List[List[Run]] = [[] for _ in range(channels)]

    def feed(self, block: np.ndarray) -> None:
        frames = np.asarray(block).reshape(-1, self.channels)
        if len(frames) == 0:
            return

        levels = quantize(frames, self.digital_channels)
        offset = self.sample_count

        for ch in range(self.channels):
            col = levels[:, ch]
            if self._level[ch] is None:
                self._level[ch] = int(col[0])
                self._start[ch] = offset
            prev = np.empty_like(col)
            prev[0] = self._level[ch]
            prev[1:] = col[:-1]
            runs = self._runs[ch]
            for idx in np.flatnonzero(col != prev):
                pos = offset + int(idx)
                runs.append(Run(self._start[ch], pos - self._start[ch], self._level[ch]))
                self._start[ch] = pos
                self._level[ch] = int(col[idx])

        self.sample_count += len(levels)

    def finish(self) -> Tuple[List[Run], ...]:
        for ch in range(self.channels):
            level = self._level[ch]
            if level is None:
                continue
            # The sample path knows where the stream ends, so the last run is exact.
            self._runs[ch].append(Run(self._start[ch], self.sample_count - self._start[ch], level))
            self._level[ch] = None
            logger.info("Channel %d run count: %d", ch, len(self._runs[ch]))
        return tuple(self._runs)


def extract_runs(
    blocks: Iterable[np.ndarray],
    channels: int = config.WAV_CHANNELS,
    digital_channels: int = config.DIGITAL_CHANNELS,
) -> Tuple[List[Run], ...]:
    extractor = RunExtractor(channels, digital_channels)
    for block in blocks:
        extractor.feed(block)
    return extractor.finish()
