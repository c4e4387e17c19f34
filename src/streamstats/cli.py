"""streamstats CLI entry point.

Usage: streamstats summarize [FILE ...] [options]

Reads whitespace-separated numbers from files (or stdin) and prints a
one-pass summary: moments, extrema, P² quantiles and an optional
histogram. With --partitions K the input is dealt round-robin into K
partial summaries that are merged at the end, the same way a caller
would combine per-shard results.
"""
from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Iterator
from typing import TextIO

from streamstats.base import merge_all
from streamstats.composite import Composite
from streamstats.errors import IncompatibleMergeError, InvalidInputError
from streamstats.extrema import Max, Min
from streamstats.histogram import Histogram, OutOfRange
from streamstats.moments import Kurtosis
from streamstats.quantile import Quantile
from streamstats.report import format_summary

log = logging.getLogger(__name__)


def _add_summarize_parser(subparsers: argparse._SubParsersAction) -> None:
    p = subparsers.add_parser(
        "summarize",
        help="Summarize numbers read from files or stdin in one pass.",
    )
    p.add_argument(
        "files", nargs="*", metavar="FILE",
        help="Input files; '-' or no files reads stdin.",
    )
    p.add_argument(
        "-q", "--quantile", type=float, action="append", default=None,
        help="Quantile to estimate, in (0, 1); repeatable (default: 0.5)",
    )
    p.add_argument(
        "--bins", nargs=3, metavar=("START", "END", "N"), default=None,
        help="Add a histogram of N equal-width bins over [START, END).",
    )
    p.add_argument(
        "--clamp", action="store_true",
        help="Count out-of-range samples in the edge bins instead of failing.",
    )
    p.add_argument(
        "--partitions", type=int, default=1,
        help="Accumulate K partial summaries and merge them (default: 1)",
    )
    p.add_argument(
        "--skip-invalid", action="store_true",
        help="Log and skip tokens that are not finite numbers.",
    )


def _open_inputs(paths: list[str]) -> Iterator[tuple[str, TextIO]]:
    if not paths:
        paths = ["-"]
    for path in paths:
        if path == "-":
            yield "<stdin>", sys.stdin
        else:
            with open(path, encoding="utf-8") as fh:
                yield path, fh


def _build_summary(args: argparse.Namespace, with_quantiles: bool) -> Composite:
    members = {"moments": Kurtosis(), "min": Min(), "max": Max()}
    if with_quantiles:
        for p in args.quantile:
            members[f"p{p * 100:g}"] = Quantile(p)
    if args.bins is not None:
        start, end, n = float(args.bins[0]), float(args.bins[1]), int(args.bins[2])
        policy = OutOfRange.CLAMP if args.clamp else OutOfRange.RAISE
        members["histogram"] = Histogram.with_const_width(start, end, n, out_of_range=policy)
    return Composite(**members)


def _run_summarize(args: argparse.Namespace) -> int:
    if args.quantile is None:
        args.quantile = [0.5]
    if args.partitions < 1:
        log.error("--partitions must be positive, got %d", args.partitions)
        return 1
    for p in args.quantile:
        if not (0.0 < p < 1.0):
            log.error("Quantiles must be in (0, 1), got %g", p)
            return 1

    # P² markers do not merge, so partitioned runs read quantiles off the histogram
    with_quantiles = args.partitions == 1
    if not with_quantiles and args.bins is None:
        log.warning(
            "P² quantiles are skipped with --partitions > 1; "
            "pass --bins to get histogram quantiles"
        )
    try:
        parts = [_build_summary(args, with_quantiles) for _ in range(args.partitions)]
    except ValueError as exc:
        log.error("Invalid configuration: %s", exc)
        return 1

    seen = 0
    try:
        for name, fh in _open_inputs(args.files):
            for line_no, line in enumerate(fh, 1):
                for token in line.split():
                    try:
                        parts[seen % len(parts)].update(float(token))
                    except (ValueError, InvalidInputError) as exc:
                        if not args.skip_invalid:
                            log.error("%s:%d: %s", name, line_no, exc)
                            return 1
                        log.warning("Skipping %r at %s:%d", token, name, line_no)
                        continue
                    seen += 1
    except (OSError, UnicodeDecodeError) as exc:
        log.error("Cannot read input: %s", exc)
        return 1

    if seen == 0:
        log.error("No samples read")
        return 1

    for i, part in enumerate(parts):
        log.debug("Partition %d: %d samples", i, len(part))
    try:
        summary = merge_all(parts)
    except IncompatibleMergeError as exc:
        log.error("Cannot merge partitions: %s", exc)
        return 1

    print(format_summary(summary, histogram_quantiles=args.quantile))
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="streamstats",
        description="Single-pass descriptive statistics -- pure Python, no dependencies.",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true",
        help="Enable debug logging.",
    )
    subparsers = parser.add_subparsers(dest="command")

    _add_summarize_parser(subparsers)

    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    if args.command is None:
        parser.print_help()
        return 0

    if args.command == "summarize":
        return _run_summarize(args)
    return 0


if __name__ == "__main__":
    sys.exit(main())
