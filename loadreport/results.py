from __future__ import annotations

import csv
from datetime import datetime, timezone
from typing import Iterator, Optional

from loadreport.events import EPOCH, Event


REQUIRED = ("status", "latency_ms")


def parse_ts(raw: str) -> datetime:
    raw = (raw or "").strip()
    if raw == "":
        return EPOCH
    try:
        secs = float(raw)
    except ValueError:
        secs = None
    if secs is not None:
        try:
            return datetime.fromtimestamp(secs, tz=timezone.utc)
        except (ValueError, OverflowError, OSError) as e:
            raise ValueError(f"timestamp out of range: {raw!r}") from e
    if raw.endswith("Z"):
        raw = raw[:-1] + "+00:00"
    ts = datetime.fromisoformat(raw)
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=timezone.utc)
    return ts


def _to_int(raw: Optional[str]) -> int:
    raw = (raw or "").strip()
    if not raw:
        return 0
    try:
        return int(float(raw))
    except OverflowError as e:
        raise ValueError(f"integer out of range: {raw!r}") from e


def parse_row(row: dict) -> Event:
    err = (row.get("error") or "").strip()
    return Event(
        status=_to_int(row.get("status")),
        latency_ms=float((row.get("latency_ms") or "0").strip() or "0"),
        bytes_out=_to_int(row.get("bytes_out")),
        bytes_in=_to_int(row.get("bytes_in")),
        ts=parse_ts(row.get("ts", "")),
        error=err or None,
    )


def read_events(path: str, require_ts: bool = False) -> Iterator[Event]:
    """
    Yield one event per row of a per-request CSV.

    Raises ValueError when a required column is missing (``ts`` too when
    require_ts is set) or a row does not parse; the message names the file
    and line. Undecodable files surface as UnicodeDecodeError, a ValueError.
    """
    with open(path, "r", encoding="utf-8", newline="") as f:
        reader = csv.DictReader(f)
        required = REQUIRED + ("ts",) if require_ts else REQUIRED
        missing = [c for c in required if c not in (reader.fieldnames or [])]
        if missing:
            raise ValueError(f"{path}: missing column(s) {', '.join(missing)}")
        for row in reader:
            try:
                yield parse_row(row)
            except ValueError as e:
                raise ValueError(f"{path}:{reader.line_num}: {e}") from e
