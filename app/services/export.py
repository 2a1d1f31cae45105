"""CSV export of the full weight history."""

from __future__ import annotations

import csv
import io
from collections.abc import Sequence
from datetime import date

from app.schemas.weight import WeightRecordRead

CSV_HEADER = ("date", "weight_kg", "memo")
# Spreadsheet apps need the BOM to detect UTF-8 (memos are free text)
UTF8_BOM = "\ufeff"


def export_filename(today: date) -> str:
    return f"weight-records-{today.isoformat()}.csv"


def records_to_csv(records: Sequence[WeightRecordRead]) -> str:
    """Oldest first, BOM-prefixed. Memos with commas or quotes are quoted by csv."""
    buf = io.StringIO()
    buf.write(UTF8_BOM)
    writer = csv.writer(buf, lineterminator="\n")
    writer.writerow(CSV_HEADER)
    for r in sorted(records, key=lambda r: r.date):
        writer.writerow([r.date.isoformat(), r.weight, r.memo or ""])
    return buf.getvalue()
