#!/usr/bin/env python3
"""
Seed the commissioner directory (cdma_cmsnr_drctry) from a CSV export.

Rows are upserted on cfms_id, so the script can be re-run after the sheet
changes. Dates in the sheet are DD/MM/YYYY.

Usage:
    python scripts/seed_directory.py
    python scripts/seed_directory.py --csv /path/to/commissioners.csv
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
from personnel_directory.models.directory_entry import DirectoryEntry


def status_from_sheet(raw: str) -> str:
    return "ON LEAVE" if (raw or "").strip().lower() == "leave" else "ACTIVE"


def upsert_entry(db: Session, row: dict[str, str]) -> tuple[DirectoryEntry, bool]:
    """Insert or update one sheet row. Returns (entry, created)."""
    cfms_id = row["cfms_id"].strip()
    first_name = row["first_name"].strip()
    sir_name = row["surname"].strip()

    values = {
        "employee_id": row["employee_id"].strip() or None,
        "employee_name": f"{first_name} {sir_name}".strip(),
        "sir_name": sir_name,
        "first_name": first_name,
        "mobile_no": row["mobile_number"].strip() or None,
        "email": row["email"].strip() or None,
        "dob": parse_date(row["dob"]),
        "dor": parse_date(row["date_of_retirement"]),
        "status": status_from_sheet(row["status"]),
        "gender": row["gender"].strip() or None,
        "designation": row["designation"].strip() or None,
        "department": row["department"].strip() or None,
        "district": row["district"].strip() or None,
    }

    entry = db.query(DirectoryEntry).filter(DirectoryEntry.cfms_id == cfms_id).one_or_none()
    if entry:
        for key, value in values.items():
            setattr(entry, key, value)
        return entry, False

    entry = DirectoryEntry(cfms_id=cfms_id, **values)
    db.add(entry)
    return entry, True


def main():
    parser = argparse.ArgumentParser(description="Seed the commissioner directory from CSV")
    parser.add_argument(
        "--csv",
        type=Path,
        default=Path(__file__).parent.parent / "data" / "commissioners.csv",
        help="CSV file to load (default: data/commissioners.csv)",
    )
    args = parser.parse_args()

    if not args.csv.exists():
        print(f"❌ Error: CSV not found: {args.csv}")
        sys.exit(1)

    created = updated = 0
    db = SessionLocal()
    try:
        with args.csv.open(newline="", encoding="utf-8") as fh:
            for row in csv.DictReader(fh):
                _, was_created = upsert_entry(db, row)
                if was_created:
                    created += 1
                else:
                    updated += 1
        db.commit()
        total = db.query(DirectoryEntry).count()
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()

    print(f"Seeded directory: {created} created, {updated} updated, {total} total")


if __name__ == "__main__":
    main()
