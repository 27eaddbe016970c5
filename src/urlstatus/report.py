# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""CSV input/output and the status report.

Input: any CSV with a ``Domain`` or ``URL`` column (case-insensitive).
Output columns: Domain, Status, Timestamp, Notes.
"""

from __future__ import annotations

import csv
import logging
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from datetime import UTC, datetime
from pathlib import Path

from tabulate import tabulate

from . import CheckResult, Status
from .normalize import dedupe_urls
from .scheduler import IndexedResult

logger = logging.getLogger(__name__)

# Column names accepted for the raw URL, in priority order.
INPUT_COLUMNS: tuple[str, ...] = ("domain", "url")
OUTPUT_HEADER: tuple[str, ...] = ("Domain", "Status", "Timestamp", "Notes")


# ── Types ────────────────────────────────────────────────────────────────────


@dataclass(frozen=True, slots=True)
class ReportRow:
    domain: str
    status: Status
    timestamp: str
    notes: str

    def as_csv_row(self) -> dict[str, str]:
        return {
            "Domain": self.domain,
            "Status": self.status.value,
            "Timestamp": self.timestamp,
            "Notes": self.notes,
        }


@dataclass(frozen=True, slots=True)
class Report:
    generated_at: str
    rows: tuple[ReportRow, ...]
    counts: dict[Status, int]

    @property
    def total(self) -> int:
        return len(self.rows)


# ── Input ────────────────────────────────────────────────────────────────────


def _url_cells(rows: Iterable[dict[str, str]], fieldnames: Iterable[str]) -> Iterator[str]:
    by_lower: dict[str, list[str]] = {}
    for name in fieldnames:
        if name is not None:
            by_lower.setdefault(name.strip().lower(), []).append(name)
    columns = [col for key in INPUT_COLUMNS for col in by_lower.get(key, [])]
    for row in rows:
        for col in columns:
            value = (row.get(col) or "").strip()
            if value:
                yield value
                break


def read_urls_from_csv(path: Path) -> list[str]:
    """Read, normalize and deduplicate URLs from *path*.

    Rows without a non-empty Domain/URL cell are ignored.
    """
    with path.open(newline="", encoding="utf-8-sig") as f:
        reader = csv.DictReader(f)
        urls = dedupe_urls(_url_cells(reader, reader.fieldnames or []))
    logger.info("Loaded %d unique URLs from %s", len(urls), path)
    return urls


# ── Report ───────────────────────────────────────────────────────────────────


def iso_timestamp(now: datetime | None = None) -> str:
    """UTC ISO-8601 instant with millisecond precision and a ``Z`` suffix."""
    now = now or datetime.now(UTC)
    return now.astimezone(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def count_statuses(results: Iterable[CheckResult]) -> dict[Status, int]:
    counts: dict[Status, int] = {s: 0 for s in Status}
    for r in results:
        counts[r.status] += 1
    return counts


def build_report(indexed: Iterable[IndexedResult], *, now: datetime | None = None) -> Report:
    """Restore input order and stamp every row with the generation time."""
    ordered = [item.result for item in sorted(indexed, key=lambda item: item.index)]
    timestamp = iso_timestamp(now)
    rows = tuple(
        ReportRow(
            domain=r.url,
            status=r.status,
            timestamp=timestamp,
            notes=r.notes or r.error or "",
        )
        for r in ordered
    )
    return Report(generated_at=timestamp, rows=rows, counts=count_statuses(ordered))


def write_report_csv(report: Report, output_path: Path) -> None:
    output_path.parent.mkdir(parents=True, exist_ok=True)
    with output_path.open("w", newline="", encoding="utf-8") as f:
        writer = csv.DictWriter(f, fieldnames=OUTPUT_HEADER)
        writer.writeheader()
        for row in report.rows:
            writer.writerow(row.as_csv_row())
    logger.info("Results written to %s", output_path)


def format_summary(report: Report, *, elapsed_s: float | None = None) -> str:
    """Plain-text summary: totals, elapsed time and the status breakdown."""
    lines = [f"Total URLs checked: {report.total}"]
    if elapsed_s is not None:
        lines.append(f"Time taken: {elapsed_s / 60:.2f} minutes")
    table = [(status.value, report.counts.get(status, 0)) for status in Status]
    lines.append("")
    lines.append(tabulate(table, headers=["Status", "Count"], tablefmt="simple"))
    return "\n".join(lines)
