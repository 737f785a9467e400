#!/usr/bin/env python3

from __future__ import annotations

import argparse
import glob
import os
import sys
from typing import List, Optional

import matplotlib.pyplot as plt

from loadreport.events import Event
from loadreport.reporters import ChronologicalAggregator
from loadreport.results import read_events

RESULTS_DIR = os.getenv("RESULTS_DIR", "results")
RUN_TAG = os.getenv("RUN_TAG", "local")


def plot_timeline(events: List[Event], out_png: str) -> None:
    """Latency of every request against seconds since the first one, failures in red."""
    plt.figure()
    if events:
        t0 = events[0].ts
        ok = [e for e in events if e.ok and e.error is None]
        bad = [e for e in events if not (e.ok and e.error is None)]
        if ok:
            plt.scatter([(e.ts - t0).total_seconds() for e in ok], [e.latency_ms for e in ok], s=6, label="ok")
        if bad:
            plt.scatter([(e.ts - t0).total_seconds() for e in bad], [e.latency_ms for e in bad], s=6, c="red", label="failed")
        plt.legend()
    plt.xlabel("Seconds since first request")
    plt.ylabel("Latency (ms)")
    plt.title("Request latency over time")
    plt.tight_layout()
    os.makedirs(os.path.dirname(out_png) or ".", exist_ok=True)
    plt.savefig(out_png, dpi=180)
    plt.close()


def main(argv: Optional[List[str]] = None) -> None:
    ap = argparse.ArgumentParser()
    ap.add_argument("--results_dir", default=RESULTS_DIR, help="Folder containing per-request CSVs")
    ap.add_argument("--pattern", default=None, help="Glob inside results_dir (default <RUN_TAG>_chain_rps*.csv)")
    ap.add_argument("--out_dir", default="figures", help="Output directory for figures")
    args = ap.parse_args(argv)

    pattern = os.path.join(args.results_dir, args.pattern or f"{RUN_TAG}_chain_rps*.csv")
    paths = sorted(glob.glob(pattern))
    if not paths:
        raise SystemExit(f"No result CSVs found with pattern: {pattern}")

    timeline = ChronologicalAggregator()
    used = 0
    for p in paths:
        try:
            events = list(read_events(p, require_ts=True))
        except (OSError, ValueError) as e:
            print(f"[WARN] Skipping {p}: {e}", file=sys.stderr)
            continue
        for ev in events:
            timeline.add(ev)
        used += 1

    if not used:
        raise SystemExit(f"No usable result CSVs found with pattern: {pattern}")

    out_png = os.path.join(args.out_dir, "latency_timeline.png")
    plot_timeline(timeline.events(), out_png)
    print(f"Wrote: {out_png}", file=sys.stderr)


if __name__ == "__main__":
    main()
