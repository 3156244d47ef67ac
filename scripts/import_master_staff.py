#!/usr/bin/env python3
"""
Load a CFMS master staff CSV into ext_cfms_stg_t.

Column names in the CSV must match the table's columns (employeeid, cfms_id,
name, surname, dob, ...); unknown columns are ignored. Rows are upserted on
employeeid and normalized dates/status are filled in on write.

Usage:
    python scripts/import_master_staff.py staff.csv
    python scripts/import_master_staff.py staff.csv --dry-run
"""

import argparse
import csv
import sys
from pathlib import Path

from dotenv import load_dotenv
from sqlalchemy.orm import Session

# Load environment variables
load_dotenv()

from personnel_directory.core.dates import parse_date
from personnel_directory.db.session import SessionLocal
from personnel_directory.models.master_staff import MasterStaff

NUMERIC_COLUMNS = {"dept_id": int, "basicpay": float, "gross": float}
SKIP_COLUMNS = {"dob_date", "doj_date", "dor_date", "status_bucket"}
IMPORT_COLUMNS = {c.key for c in MasterStaff.__table__.columns} - SKIP_COLUMNS


def clean_row(row: dict[str, str]) -> dict:
    values = {}
    for key, raw in row.items():
        key = (key or "").strip().lower()
        if key not in IMPORT_COLUMNS:
            continue
        value = (raw or "").strip() or None
        if value is not None and key in NUMERIC_COLUMNS:
            value = NUMERIC_COLUMNS[key](value)
        values[key] = value
    return values


def upsert_staff(db: Session, values: dict) -> bool:
    """Returns True when a new row was created."""
    staff = db.get(MasterStaff, values["employeeid"])
    if staff:
        for key, value in values.items():
            setattr(staff, key, value)
        return False
    db.add(MasterStaff(**values))
    return True


def main():
    parser = argparse.ArgumentParser(description="Import master staff CSV")
    parser.add_argument("csv_file", type=Path, help="CSV export of the CFMS staff table")
    parser.add_argument("--dry-run", action="store_true", help="Validate rows without writing")
    args = parser.parse_args()

    if not args.csv_file.exists():
        print(f"❌ Error: CSV not found: {args.csv_file}")
        sys.exit(1)

    with args.csv_file.open(newline="", encoding="utf-8") as fh:
        rows = [clean_row(r) for r in csv.DictReader(fh)]

    missing_id = [i for i, r in enumerate(rows, start=2) if not r.get("employeeid")]
    if missing_id:
        print(f"❌ Rows without employeeid (CSV line numbers): {missing_id[:20]}")
        sys.exit(1)

    unparsable = sum(1 for r in rows if r.get("dob") and parse_date(r["dob"]) is None)

    if args.dry_run:
        print(f"Dry run: {len(rows)} rows valid, {unparsable} with unparseable dob")
        return

    created = 0
    db = SessionLocal()
    try:
        for values in rows:
            if upsert_staff(db, values):
                created += 1
        db.commit()
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()

    print(f"Imported {len(rows)} rows: {created} created, {len(rows) - created} updated")
    if unparsable:
        print(f"⚠️  {unparsable} rows have a dob that could not be parsed")


if __name__ == "__main__":
    main()
