from __future__ import annotations

import bisect
import math
from typing import BinaryIO, Dict, List, Set

from loadreport.events import Event


def _avg(total: float, n: int) -> float:
    # empty run -> nan, never ZeroDivisionError
    return total / n if n else math.nan


def _one_line(msg: str) -> str:
    return msg.replace("\r", "\\r").replace("\n", "\\n")


class SummaryAggregator:
    """
    Flat digest of a run: averages, status code histogram and error set.

    Arrival order is not relevant. Only running totals are kept, the
    averages themselves are computed when the report is written.
    """

    def __init__(self, n: int = 0) -> None:
        # n is a sizing hint; only running totals are kept, so it is unused
        self.requests = 0
        self.total_latency_ms = 0.0
        self.total_bytes_out = 0
        self.total_bytes_in = 0
        self.total_success = 0
        self._histogram: Dict[int, int] = {}
        self._errors: Set[str] = set()

    def add(self, event: Event) -> None:
        self.requests += 1
        self.total_latency_ms += event.latency_ms
        self.total_bytes_out += event.bytes_out
        self.total_bytes_in += event.bytes_in
        if event.ok:
            self.total_success += 1
        self._histogram[event.status] = self._histogram.get(event.status, 0) + 1
        if event.error is not None:
            self._errors.add(event.error)

    def histogram(self) -> Dict[int, int]:
        return dict(self._histogram)

    def errors(self) -> Set[str]:
        return set(self._errors)

    def averages(self) -> Dict[str, float]:
        n = self.requests
        return {
            "latency_ms": _avg(self.total_latency_ms, n),
            "bytes_out": _avg(self.total_bytes_out, n),
            "bytes_in": _avg(self.total_bytes_in, n),
            "success": _avg(self.total_success, n),
        }

    def render(self) -> str:
        avg = self.averages()
        lines = [
            "Results:",
            f"Time      (avg): {avg['latency_ms']:.3f}ms",
            f"Bytes out (avg): {avg['bytes_out']:f}",
            f"Bytes in  (avg): {avg['bytes_in']:f}",
            f"Success ratio:   {avg['success']:f}",
            f"Requests:        {self.requests}",
            "",
            "Status codes histogram:",
        ]
        # dict/set iteration order, callers needing stable output sort themselves
        for code, count in self._histogram.items():
            lines.append(f"{code:3d}\t{count}")
        lines += ["", "Error set:"]
        lines.extend(_one_line(e) for e in self._errors)
        return "\n".join(lines) + "\n"

    def report(self, out: BinaryIO) -> None:
        out.write(self.render().encode("utf-8"))


class ChronologicalAggregator:
    """
    Keeps events sorted by timestamp as they arrive, for a time-ordered trace.

    Completions arrive nearly sorted, so appending at the tail is the common
    case. Equal timestamps keep their arrival order.
    """

    def __init__(self) -> None:
        self._events: List[Event] = []

    def __len__(self) -> int:
        return len(self._events)

    def add(self, event: Event) -> None:
        evs = self._events
        if not evs or event.ts >= evs[-1].ts:
            evs.append(event)
            return
        if event.ts < evs[0].ts:
            evs.insert(0, event)
            return
        # first element strictly after event.ts
        idx = bisect.bisect_right(evs, event.ts, key=lambda e: e.ts)
        evs.insert(idx, event)

    def events(self) -> List[Event]:
        return list(self._events)

    def render(self) -> str:
        return "".join(f"{e.ts.isoformat()}\n" for e in self._events)

    def report(self, out: BinaryIO) -> None:
        out.write(self.render().encode("utf-8"))
