"""File sinks for dry-run exports of extracted leads."""
from __future__ import annotations

import csv
from pathlib import Path
from typing import Any, Dict, Iterable, List

from openpyxl import Workbook

from leadsync.reporting.templates import LEAD_HEADERS


def ensure_output_dir(output_path: Path) -> None:
    """Create parent folders for sink outputs when missing."""

    output_path.parent.mkdir(parents=True, exist_ok=True)


def write_csv(rows: Iterable[Dict[str, Any]], output_path: Path) -> None:
    """Write lead rows to a CSV file with consistent headers."""

    rows = list(rows)
    if not rows:
        return

    ensure_output_dir(output_path)
    with output_path.open("w", newline="", encoding="utf-8") as csvfile:
        writer = csv.DictWriter(csvfile, fieldnames=LEAD_HEADERS)
        writer.writeheader()
        writer.writerows(rows)


def write_excel(rows: Iterable[Dict[str, Any]], output_path: Path) -> None:
    """Write lead rows to an Excel workbook using openpyxl."""

    rows = list(rows)
    if not rows:
        return

    ensure_output_dir(output_path)
    workbook = Workbook()
    sheet = workbook.active
    sheet.title = "leads"
    headers: List[str] = list(rows[0].keys())
    sheet.append(headers)
    for row in rows:
        sheet.append([row.get(header, "") for header in headers])
    workbook.save(output_path)
