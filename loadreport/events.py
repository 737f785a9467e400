from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import BinaryIO, Optional, Protocol


EPOCH = datetime.fromtimestamp(0, tz=timezone.utc)


@dataclass(frozen=True)
class Event:
    """Outcome of one measured request."""

    status: int = 0            # 0 = no response code (transport failure)
    latency_ms: float = 0.0
    bytes_out: int = 0
    bytes_in: int = 0
    ts: datetime = EPOCH
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300


class Reporter(Protocol):
    def add(self, event: Event) -> None:
        ...

    def report(self, out: BinaryIO) -> None:
        ...
