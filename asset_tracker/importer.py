#!/usr/bin/env python3
"""
Bulk-load equipment from a CSV export.

Usage:
  python -m asset_tracker.importer cleaned_equipment_data.csv

Expected headers (extra columns are ignored):
  Asset ID, Category, Status, Model, Serial Number, Expiry Date, Location,
  Comment, Assignee Name, Position, Employee Email, Phone Number,
  Department, Damage Description, Purchase Price, isDeleted

Rows without an asset id get one from the generator, rows whose asset id
already exists are skipped, and a row that fails validation is logged and
counted without stopping the run.

Exit codes:
  0 = every row imported or skipped
  1 = at least one row failed
  2 = the file could not be read
"""

from __future__ import annotations

import argparse
import csv
import logging
import sys
from pathlib import Path
from typing import Any, Iterable

from sqlalchemy.orm import Session

from .core.config import settings
from .core.errors import AssetTrackerError
from .core.logging import configure_logging
from .core.statuses import DEFAULT_STATUS
from .crud.equipment import asset_id_exists, create_equipment, soft_delete_equipment
from .db.session import SessionLocal
from .services.asset_ids import generate_asset_id

logger = logging.getLogger("asset_tracker.importer")

DEFAULT_CATEGORY = "Uncategorized"

COLUMN_MAP = {
    "Asset ID": "asset_id",
    "Category": "category",
    "Status": "status",
    "Model": "model",
    "Serial Number": "serial_number",
    "Expiry Date": "warranty_expiry",
    "Location": "location",
    "Comment": "comment",
    "Assignee Name": "assignee_name",
    "Position": "position",
    "Employee Email": "employee_email",
    "Phone Number": "phone_number",
    "Department": "department",
    "Damage Description": "damage_description",
    "Purchase Price": "purchase_price",
    "Purchase Date": "purchase_date",
}


class ImportReport:
    def __init__(self) -> None:
        self.imported = 0
        self.skipped = 0
        self.failed = 0

    def as_dict(self) -> dict[str, int]:
        return {"imported": self.imported, "skipped": self.skipped, "failed": self.failed}


def row_to_payload(row: dict[str, Any]) -> tuple[dict[str, Any], bool]:
    """Map one CSV row to an equipment payload plus its ``isDeleted`` flag."""

    payload: dict[str, Any] = {}
    for header, field in COLUMN_MAP.items():
        value = (row.get(header) or "").strip()
        if value:
            payload[field] = value
    payload.setdefault("category", DEFAULT_CATEGORY)
    payload.setdefault("status", DEFAULT_STATUS)
    deleted = (row.get("isDeleted") or "").strip().upper() == "TRUE"
    return payload, deleted


def import_rows(db: Session, rows: Iterable[dict[str, Any]]) -> ImportReport:
    report = ImportReport()
    for line_no, row in enumerate(rows, start=2):
        payload, deleted = row_to_payload(row)
        asset_id = payload.get("asset_id")
        if asset_id and asset_id_exists(db, asset_id):
            logger.info("import.skipped", extra={"extra_data": {"line": line_no, "asset_id": asset_id}})
            report.skipped += 1
            continue
        if not asset_id:
            payload["asset_id"] = generate_asset_id(db, payload["category"])
        try:
            item = create_equipment(db, payload)
            if deleted:
                soft_delete_equipment(db, item.id)
        except AssetTrackerError as exc:
            logger.warning(
                "import.failed",
                extra={"extra_data": {"line": line_no, "asset_id": payload["asset_id"], "error": exc.message}},
            )
            report.failed += 1
            continue
        report.imported += 1
    return report


def import_csv(db: Session, path: Path) -> ImportReport:
    with path.open(newline="", encoding="utf-8-sig") as handle:
        return import_rows(db, csv.DictReader(handle))


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Import equipment records from a CSV file.")
    p.add_argument("csv_path", type=Path, help="Path to the CSV export.")
    return p.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    configure_logging(settings.LOG_LEVEL)

    db = SessionLocal()
    try:
        report = import_csv(db, args.csv_path)
    except OSError as exc:
        print(f"Cannot read {args.csv_path}: {exc}", file=sys.stderr)
        return 2
    finally:
        db.close()

    logger.info("import.finished", extra={"extra_data": {"path": str(args.csv_path), **report.as_dict()}})
    print(f"Imported {report.imported}, skipped {report.skipped}, failed {report.failed}.")
    return 1 if report.failed else 0


if __name__ == "__main__":
    sys.exit(main())
