from __future__ import annotations
from pathlib import Path


def project_root() -> Path:
    # chipnotes/ is one level under the project root
    return Path(__file__).resolve().parents[1]


ROOT_DIR = project_root()
DEFAULT_EXPORT_DIR = ROOT_DIR / "exports"

# NES CPU clock; the 5-channel dumps are sampled at this rate too
CLOCK_HZ = 1789773

WAV_HEADER_SIZE = 44
WAV_CHANNELS = 5
WAV_FORMAT = "WAV"
WAV_SUBTYPE = "PCM_U8"
DIGITAL_CHANNELS = 4  # channels 0-3 drop the low 3 bits before comparison
BLOCK_FRAMES = CLOCK_HZ  # one second of audio

MIN_NORMAL_PERIOD = 144
MAX_PERIOD = 32768
PERIOD_ALIGN = 16
LONG_SILENCE = 28672

MICRO_TONE_TICKS = 179  # ~100 us at CLOCK_HZ
RENDER_SECONDS = 100
EMULATOR_SAMPLE_RATE = 44100


def export_dir() -> Path:
    DEFAULT_EXPORT_DIR.mkdir(parents=True, exist_ok=True)
    return DEFAULT_EXPORT_DIR
