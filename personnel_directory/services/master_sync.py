"""
Catch-up normalization for master staff rows loaded with plain SQL.

The CFMS table is refreshed by bulk loads that bypass the ORM hooks on
MasterStaff, so those rows arrive with empty shadow date columns and the
default status bucket. Queries that bucket by date or status call
``normalize_pending`` first; ``scripts/normalize_master_dates.py`` does the
same for the whole table after a large reload.
"""
import logging

from sqlalchemy import select
from sqlalchemy.orm import Session

from personnel_directory.models.master_staff import MasterStaff

logger = logging.getLogger(__name__)


def normalize_pending(db: Session) -> int:
    """Normalize every master row that was never written through the ORM."""
    pending = (
        db.execute(select(MasterStaff).where(MasterStaff.normalized_at.is_(None)))
        .scalars()
        .all()
    )
    if not pending:
        return 0

    for staff in pending:
        staff.apply_normalization()
    db.flush()

    logger.info("Normalized %s master staff rows loaded outside the application", len(pending))
    return len(pending)
