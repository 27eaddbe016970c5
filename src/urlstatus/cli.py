# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""URL Status Checker CLI.

Usage:
    urlstatus [INPUT_CSV] [OUTPUT_CSV] [CONCURRENCY] [--no-llm] [--headed] [--max-retries N]
    python -m urlstatus input.csv output.csv 4

Reads the ``Domain`` (or ``URL``) column of INPUT_CSV, checks every unique
URL in a shared headless Chromium and writes one row per URL to OUTPUT_CSV.
"""

from __future__ import annotations

import argparse
import asyncio
import csv
import sys
import time
from pathlib import Path

from ._progress import batch_progress, print_step
from .browser_session import BrowserConfig, BrowserEngine
from .checker import UrlChecker
from .config import CheckerConfig, from_env
from .content_classifier import ContentClassifier
from .logging_config import configure
from .oracle import ParkedOracle
from .problem_details import ProblemDetail, ProblemType, from_exception, sanitize_detail
from .report import Report, build_report, format_summary, read_urls_from_csv, write_report_csv
from .rules import RULESET_VERSION
from .scheduler import DEFAULT_CONCURRENCY, run_batch

_RULE = "=" * 60


def _positive_int(value: str) -> int:
    try:
        n = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected a positive integer, got {value!r}") from None
    if n < 1:
        raise argparse.ArgumentTypeError(f"expected a positive integer, got {value!r}")
    return n


def _non_negative_int(value: str) -> int:
    try:
        n = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected a non-negative integer, got {value!r}") from None
    if n < 0:
        raise argparse.ArgumentTypeError(f"expected a non-negative integer, got {value!r}")
    return n


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Check a list of domains in headless Chromium and classify each one.",
        prog="urlstatus",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""\
examples:
  %(prog)s                              input.csv -> output.csv, 4 workers
  %(prog)s domains.csv report.csv 5     Custom paths and concurrency
  %(prog)s domains.csv --no-llm         Keyword rules only
""",
    )
    parser.add_argument("input", nargs="?", default="input.csv", help="Input CSV with a Domain column")
    parser.add_argument("output", nargs="?", default="output.csv", help="Output CSV path (default: output.csv)")
    parser.add_argument(
        "concurrency",
        nargs="?",
        type=_positive_int,
        default=DEFAULT_CONCURRENCY,
        help=f"Concurrent checks (default: {DEFAULT_CONCURRENCY})",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    parser.add_argument("--json-logs", action="store_true", help="Emit logs as JSON lines on stderr")
    parser.add_argument("--no-llm", action="store_true", help="Disable the parked-page LLM check")
    parser.add_argument("--headed", action="store_true", help="Show the browser window")
    parser.add_argument(
        "--max-retries",
        type=_non_negative_int,
        metavar="N",
        help="Retries after the first attempt (default: 3)",
    )
    return parser


def resolve_config(args: argparse.Namespace, base: CheckerConfig | None = None) -> CheckerConfig:
    """Apply CLI overrides on top of the environment configuration."""
    config = base or from_env()
    changes: dict = {"concurrency": args.concurrency}
    if args.headed:
        changes["headless"] = False
    if args.max_retries is not None:
        changes["max_retries"] = args.max_retries
    if args.no_llm:
        changes["oracle"] = CheckerConfig().oracle
    return config.replace(**changes)


def _print_banner(input_path: Path, output_path: Path, config: CheckerConfig) -> None:
    print(_RULE)
    print("URL Status Checker")
    print(_RULE)
    print(f"Input file: {input_path}")
    print(f"Output file: {output_path}")
    print(f"Concurrency: {config.concurrency}")
    print(f"LLM check: {'on (' + config.oracle.model + ')' if config.oracle.is_active else 'off'}")
    print(_RULE)


async def run_checks(urls: list[str], config: CheckerConfig) -> Report:
    """Check *urls* in one shared browser and build the ordered report.

    Raises:
        SetupError: Chromium could not be started.
    """
    browser_config = BrowserConfig(headless=config.headless)
    print_step("Launching browser...")
    async with BrowserEngine(browser_config) as engine, ParkedOracle(config.oracle) as oracle:
        checker = UrlChecker(
            engine,
            config=config,
            classifier=ContentClassifier(config.oracle, oracle),
        )
        print_step(f"Processing {len(urls)} URLs with concurrency of {config.concurrency}...")
        with batch_progress(len(urls)) as advance:
            indexed = await run_batch(
                urls,
                checker.check,
                concurrency=config.concurrency,
                on_result=lambda _count, _result: advance(),
            )
    return build_report(indexed)


def main(argv: list[str] | None = None) -> None:
    """CLI entry point."""
    args = build_parser().parse_args(argv)
    configure(
        json_output=args.json_logs,
        level="DEBUG" if args.verbose else "INFO",
        ruleset=RULESET_VERSION,
    )

    config = resolve_config(args)
    input_path = Path(args.input)
    output_path = Path(args.output)
    _print_banner(input_path, output_path, config)

    if not input_path.is_file():
        print(f'Error: Input file "{input_path}" not found.', file=sys.stderr)
        print('Please provide a CSV file with a "Domain" column.', file=sys.stderr)
        sys.exit(1)

    try:
        urls = read_urls_from_csv(input_path)
    except (OSError, UnicodeDecodeError, csv.Error) as e:
        print(f"Error reading input file: {e}", file=sys.stderr)
        sys.exit(1)

    if not urls:
        print("No valid URLs found in input file.", file=sys.stderr)
        sys.exit(1)

    started = time.monotonic()
    try:
        report = asyncio.run(run_checks(urls, config))
    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        sys.exit(130)
    except Exception as e:
        problem = from_exception(e)
        print(problem.to_cli_text(), file=sys.stderr)
        if args.verbose:
            import traceback

            traceback.print_exc(file=sys.stderr)
        sys.exit(1)

    try:
        write_report_csv(report, output_path)
    except OSError as e:
        problem = ProblemDetail(
            ProblemType.OUTPUT_UNWRITABLE,
            sanitize_detail(f"Could not write {output_path}: {e.strerror or e}"),
        )
        print(problem.to_cli_text(), file=sys.stderr)
        sys.exit(1)

    print()
    print(_RULE)
    print("Summary")
    print(_RULE)
    print(format_summary(report, elapsed_s=time.monotonic() - started))
    print(_RULE)
    print(f"Results saved to: {output_path}")
    print(_RULE)


if __name__ == "__main__":
    main()
