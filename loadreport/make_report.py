#!/usr/bin/env python3

from __future__ import annotations

import argparse
import glob
import os
import sys
from typing import List, Optional

from loadreport.events import Reporter
from loadreport.reporters import ChronologicalAggregator, SummaryAggregator
from loadreport.results import read_events

RESULTS_DIR = os.getenv("RESULTS_DIR", "results")
RUN_TAG = os.getenv("RUN_TAG", "local")
REPORT_OUT = os.getenv("REPORT_OUT", "-")

REPORTERS = {
    "summary": SummaryAggregator,
    "timeline": ChronologicalAggregator,
}


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(description="Aggregate per-request load test CSVs into text reports")
    ap.add_argument("--results_dir", default=RESULTS_DIR, help="Folder containing per-request CSVs")
    ap.add_argument("--pattern", default=None, help="Glob inside results_dir (default <RUN_TAG>_chain_rps*.csv)")
    ap.add_argument("--reporter", action="append", choices=sorted(REPORTERS), help="Repeatable, default summary")
    ap.add_argument("--out", default=REPORT_OUT, help="Output file, '-' for stdout")
    return ap


def log(msg: str) -> None:
    print(msg, file=sys.stderr)


def main(argv: Optional[List[str]] = None) -> None:
    args = build_parser().parse_args(argv)
    names = args.reporter or ["summary"]

    pattern = os.path.join(args.results_dir, args.pattern or f"{RUN_TAG}_chain_rps*.csv")
    paths = sorted(glob.glob(pattern))
    if not paths:
        raise SystemExit(f"No result CSVs found with pattern: {pattern}")

    reporters: List[Reporter] = [REPORTERS[n]() for n in names]
    need_ts = "timeline" in names

    used = 0
    for p in paths:
        try:
            events = list(read_events(p, require_ts=need_ts))
        except (OSError, ValueError) as e:
            log(f"[WARN] Skipping {p}: {e}")
            continue
        for ev in events:
            for r in reporters:
                r.add(ev)
        used += 1

    if not used:
        raise SystemExit(f"No usable result CSVs found with pattern: {pattern}")

    if args.out == "-":
        for r in reporters:
            r.report(sys.stdout.buffer)
        sys.stdout.flush()
    else:
        os.makedirs(os.path.dirname(args.out) or ".", exist_ok=True)
        with open(args.out, "wb") as f:
            for r in reporters:
                r.report(f)
        log(f"Wrote: {args.out}")

    log(f"Read {used}/{len(paths)} file(s)")


if __name__ == "__main__":
    main()
