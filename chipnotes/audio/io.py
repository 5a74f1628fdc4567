from __future__ import annotations

import gzip
import logging
import lzma
from pathlib import Path
from typing import BinaryIO, Iterator, Optional

import numpy as np
import soundfile as sf

from chipnotes import config
from chipnotes.errors import ContainerOpenFailure, MalformedHeader

logger = logging.getLogger(__name__)

GZIP_MAGIC = b"\x1f\x8b"
XZ_MAGIC = b"\xfd7zXZ\x00"


def sniff_container(path: Path) -> str:
    with path.open("rb") as f:
        head = f.read(6)
    if head.startswith(GZIP_MAGIC):
        return "gzip"
    if head.startswith(XZ_MAGIC):
        return "xz"
    return "raw"


def open_container(path: Path) -> BinaryIO:
    """
    Open a possibly gzip/xz-compressed file for streaming reads.
    """
    try:
        kind = sniff_container(path)
        if kind == "gzip":
            return gzip.open(path, "rb")
        if kind == "xz":
            return lzma.open(path, "rb")
        return path.open("rb")
    except OSError as e:
        raise ContainerOpenFailure(f"Could not open {path.name}: {e}", source=path) from e


def check_format(snd: sf.SoundFile, source: Optional[Path] = None) -> None:
    expected = (
        ("format", config.WAV_FORMAT, snd.format),
        ("subtype", config.WAV_SUBTYPE, snd.subtype),
        ("channels", config.WAV_CHANNELS, snd.channels),
        ("samplerate", config.CLOCK_HZ, snd.samplerate),
    )
    for field, want, got in expected:
        if got != want:
            raise MalformedHeader.field_mismatch(field, want, got, source)


class WavBlockReader:
    """
    Reads a 5-channel 8-bit dump one second (CLOCK_HZ frames) at a time.
    The header is checked on open; any mismatch rejects the whole file.

    Blocks are int16 arrays of shape (frames, channels); for unsigned 8-bit
    data soundfile returns (byte - 128) << 8.
    """

    def __init__(self, path: Path, block_frames: int = config.BLOCK_FRAMES) -> None:
        self.path = path
        self.block_frames = block_frames
        self.frames = 0
        self._f: Optional[BinaryIO] = None
        self._snd: Optional[sf.SoundFile] = None

    def open(self) -> "WavBlockReader":
        f = open_container(self.path)
        try:
            # decompress the header first so a broken container fails here
            head = f.read(config.WAV_HEADER_SIZE)
            if len(head) < config.WAV_HEADER_SIZE:
                raise MalformedHeader.field_mismatch("header_size", config.WAV_HEADER_SIZE, len(head), self.path)
            f.seek(0)
            snd = sf.SoundFile(f)
        except (OSError, EOFError, lzma.LZMAError) as e:
            f.close()
            raise ContainerOpenFailure(f"Could not read {self.path.name}: {e}", source=self.path) from e
        except sf.LibsndfileError as e:
            f.close()
            raise MalformedHeader(
                f"Unsupported WAV header: {e}",
                source=self.path,
                context={"field": "format", "expected": config.WAV_FORMAT, "actual": None},
            ) from e
        except MalformedHeader:
            f.close()
            raise

        try:
            check_format(snd, self.path)
        except MalformedHeader:
            snd.close()
            f.close()
            raise
        self.frames = snd.frames
        logger.debug("Opened %s: %d frames", self.path.name, self.frames)
        self._f = f
        self._snd = snd
        return self

    def read_block(self) -> np.ndarray:
        if self._snd is None:
            raise RuntimeError("WavBlockReader is not open")
        try:
            return self._snd.read(self.block_frames, dtype="int16", always_2d=True)
        except sf.LibsndfileError as e:
            raise ContainerOpenFailure(f"Could not read {self.path.name}: {e}", source=self.path) from e

    def __iter__(self) -> Iterator[np.ndarray]:
        if self._snd is None:
            raise RuntimeError("WavBlockReader is not open")
        return self._snd.blocks(blocksize=self.block_frames, dtype="int16", always_2d=True)

    def close(self) -> None:
        if self._snd is not None:
            self._snd.close()
            self._snd = None
        if self._f is not None:
            self._f.close()
            self._f = None

    def __enter__(self) -> "WavBlockReader":
        return self.open()

    def __exit__(self, *exc) -> None:
        self.close()
