#!/usr/bin/env python3
"""
Recompute dob_date / doj_date / dor_date / status_bucket for every master row.

Needed after the table is reloaded outside this application (bulk SQL loads
bypass the ORM hooks that normally keep these columns current).
"""

from dotenv import load_dotenv
from sqlalchemy import select

# Load environment variables
load_dotenv()

from personnel_directory.db.session import SessionLocal
from personnel_directory.models.master_staff import MasterStaff

BATCH_SIZE = 1000


def main():
    db = SessionLocal()
    changed = 0
    missing_dob = 0
    try:
        for staff in db.execute(select(MasterStaff).execution_options(yield_per=BATCH_SIZE)).scalars():
            before = (staff.dob_date, staff.doj_date, staff.dor_date, staff.status_bucket)
            staff.apply_normalization()
            if (staff.dob_date, staff.doj_date, staff.dor_date, staff.status_bucket) != before:
                changed += 1
            if staff.dob_date is None:
                missing_dob += 1
        db.commit()
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()

    print(f"Normalized master staff: {changed} rows changed, {missing_dob} without a usable dob")


if __name__ == "__main__":
    main()
