"""Tests for the time-ordered reporter."""

from __future__ import annotations

import io
import random

import pytest

from loadreport.reporters import ChronologicalAggregator


def _lines(agg: ChronologicalAggregator) -> list[str]:
    buf = io.BytesIO()
    agg.report(buf)
    return buf.getvalue().decode("utf-8").splitlines()


def test_chronological_reorders_out_of_order_arrivals(at) -> None:
    agg = ChronologicalAggregator()
    for s in [3, 1, 2]:
        agg.add(at(s))

    assert _lines(agg) == [
        "2026-01-02T10:00:01+00:00",
        "2026-01-02T10:00:02+00:00",
        "2026-01-02T10:00:03+00:00",
    ]


def test_chronological_empty_report_writes_nothing() -> None:
    buf = io.BytesIO()
    ChronologicalAggregator().report(buf)

    assert buf.getvalue() == b""


def test_chronological_fast_paths_and_middle_insert(at) -> None:
    agg = ChronologicalAggregator()
    agg.add(at(5))    # empty
    agg.add(at(9))    # after tail
    agg.add(at(1))    # before head
    agg.add(at(5.5))  # middle
    agg.add(at(9))    # equal to tail

    assert [e.ts for e in agg.events()] == [at(s).ts for s in [1, 5, 5.5, 9, 9]]


def test_chronological_ties_keep_arrival_order(at) -> None:
    agg = ChronologicalAggregator()
    agg.add(at(0, status=1))
    agg.add(at(10, status=2))
    agg.add(at(5, status=3))
    agg.add(at(5, status=4))
    agg.add(at(0, status=5))
    agg.add(at(10, status=6))
    agg.add(at(5, status=7))

    assert [e.status for e in agg.events()] == [1, 5, 3, 4, 7, 2, 6]


def test_chronological_random_arrivals_are_sorted_and_stable(at) -> None:
    rng = random.Random(7)
    arrivals = [at(rng.randint(0, 20), status=i) for i in range(300)]

    agg = ChronologicalAggregator()
    for ev in arrivals:
        agg.add(ev)

    assert agg.events() == sorted(arrivals, key=lambda e: e.ts)
    assert len(agg) == 300


def test_chronological_report_propagates_sink_failure(at) -> None:
    class Broken:
        def write(self, data: bytes) -> int:
            raise OSError("broken pipe")

    agg = ChronologicalAggregator()
    agg.add(at(1))

    with pytest.raises(OSError, match="broken pipe"):
        agg.report(Broken())
