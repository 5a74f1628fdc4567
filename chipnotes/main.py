from __future__ import annotations
import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from chipnotes import config
from chipnotes.errors import AnalysisError
from chipnotes.midi.preview_synth import render_preview_wav
from chipnotes.midi.writer import CHANNEL_NAMES, write_midi
from chipnotes.pipeline.analyze_audio import analyze_file
from chipnotes.state import ChannelAnalysisResult, Settings
from chipnotes.transcription.semitone import semitone_name

logger = logging.getLogger("chipnotes")


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="chipnotes",
        description="Transcribe NES square/triangle channels into tones.",
    )
    ap.add_argument("input", type=Path, help="5-channel WAV (.wav/.wav.gz/.wav.xz) or APU log (.csv)")
    ap.add_argument("--midi", type=Path, nargs="?", const=Path(""), default=None,
                    help="write the tones as a MIDI file (default: exports/<name>.mid)")
    ap.add_argument("--preview", type=Path, default=None, help="render the tones to a preview WAV")
    ap.add_argument("--micro-tone-ticks", type=int, default=config.MICRO_TONE_TICKS,
                    help="APU log tones shorter than this many CPU cycles are marked irregular")
    ap.add_argument("-v", "--verbose", action="store_true")
    return ap


def summarize(result: ChannelAnalysisResult) -> List[str]:
    lines = [f"{result.source.name} ({result.kind})"]
    for i, tones in enumerate(result.tones):
        lines.append(f"  {CHANNEL_NAMES[i]}: {len(tones)} tones")
    r = result.pitch_range
    if r.is_empty:
        lines.append("  range: none")
    else:
        lines.append(f"  range: {semitone_name(r.lowest)} ({r.lowest}) .. {semitone_name(r.highest)} ({r.highest})")
    for w in result.warnings:
        lines.append(f"  warning: {w}")
    return lines


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    settings = Settings(micro_tone_ticks=args.micro_tone_ticks)

    def progress(pct: int, msg: str) -> None:
        logger.info("[%3d%%] %s", pct, msg)

    try:
        result = analyze_file(args.input, settings, progress=progress)
    except AnalysisError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1

    print("\n".join(summarize(result)))
    if args.midi is not None:
        out_path = args.midi
        if str(out_path) in ("", "."):
            out_path = config.export_dir() / (args.input.name.split(".")[0] + ".mid")
        write_midi(result.tones, out_path, settings)
        print(f"MIDI written to {out_path}")
    if args.preview:
        render_preview_wav(result.tones, args.preview)
        print(f"Preview written to {args.preview}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
