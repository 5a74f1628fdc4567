from __future__ import annotations

import csv
from pathlib import Path
from typing import Iterable, List, Optional

from chipnotes.state import ApuEventKind, ApuLogEntry

CSV_FIELDS = ["timestamp", "event", "channel", "address", "data"]


def _int_or_none(text: str) -> Optional[int]:
    text = (text or "").strip()
    if not text:
        return None
    return int(text, 0)


def _fmt(value: Optional[int], hex_digits: int = 0) -> str:
    if value is None:
        return ""
    if hex_digits:
        return f"0x{value:0{hex_digits}X}"
    return str(value)


# channels each event kind may name
EVENT_CHANNELS = {
    ApuEventKind.TIMEOUT: range(3),
    ApuEventKind.SWEEP: range(2),
}


def check_entry(entry: ApuLogEntry, line: int) -> ApuLogEntry:
    if entry.kind is ApuEventKind.REGISTER_WRITE:
        if entry.address is None or entry.data is None:
            raise ValueError(f"line {line}: register write needs both address and data")
    elif entry.kind in EVENT_CHANNELS:
        if entry.channel not in EVENT_CHANNELS[entry.kind]:
            raise ValueError(f"line {line}: {entry.kind.value} event has bad channel {entry.channel}")
        if entry.kind is ApuEventKind.SWEEP and entry.data is None:
            raise ValueError(f"line {line}: sweep event needs a target timer")
    return entry


def write_apu_log_csv(path: Path, entries: Iterable[ApuLogEntry]) -> None:
    """
    One row per logged event, in the order given:
      timestamp,event,channel,address,data
    Addresses are written as hex, everything else decimal; unused columns are empty.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8", newline="") as f:
        w = csv.writer(f)
        w.writerow(CSV_FIELDS)
        for e in entries:
            w.writerow([
                e.timestamp,
                e.kind.value,
                _fmt(e.channel),
                _fmt(e.address, 4),
                _fmt(e.data),
            ])


def read_apu_log_csv(path: Path) -> List[ApuLogEntry]:
    entries: List[ApuLogEntry] = []
    with path.open("r", encoding="utf-8", newline="") as f:
        reader = csv.DictReader(f)
        missing = [c for c in CSV_FIELDS if c not in (reader.fieldnames or [])]
        if missing:
            raise ValueError(f"APU log {path} is missing columns: {', '.join(missing)}")
        for row in reader:
            entry = ApuLogEntry(
                timestamp=int(row["timestamp"]),
                kind=ApuEventKind(row["event"].strip()),
                channel=_int_or_none(row["channel"]),
                address=_int_or_none(row["address"]),
                data=_int_or_none(row["data"]),
            )
            entries.append(check_entry(entry, reader.line_num))
    return entries
