from datetime import date

from sqlalchemy import ColumnElement, case, func, select
from sqlalchemy.orm import Session

from personnel_directory.core.status import StatusBucket
from personnel_directory.models.directory_entry import DirectoryEntry
from personnel_directory.schemas.stats import StatsSnapshot
from personnel_directory.services.query_builder import born_in_month, month_for, retiring_in_year


def _count_where(condition: ColumnElement[bool]):
    return func.coalesce(func.sum(case((condition, 1), else_=0)), 0)


def directory_stats(db: Session, today: date) -> StatsSnapshot:
    """
    Summary counts over the whole directory in a single aggregate query.
    Independent of any listing filter or page.
    """
    stmt = select(
        func.count(DirectoryEntry.sno),
        _count_where(DirectoryEntry.status_bucket == StatusBucket.REGULAR.value),
        _count_where(DirectoryEntry.status_bucket == StatusBucket.INCHARGE.value),
        _count_where(DirectoryEntry.status_bucket == StatusBucket.SUSPENDED.value),
        _count_where(born_in_month(DirectoryEntry.dob, month_for("current", today))),
        _count_where(born_in_month(DirectoryEntry.dob, month_for("next", today))),
        _count_where(retiring_in_year(DirectoryEntry.dor, today.year)),
    )
    total, regular, incharge, suspended, this_month, next_month, retiring = db.execute(stmt).one()

    return StatsSnapshot(
        total=int(total or 0),
        regular=int(regular or 0),
        incharge=int(incharge or 0),
        suspended=int(suspended or 0),
        birthdaysThisMonth=int(this_month or 0),
        birthdaysNextMonth=int(next_month or 0),
        retiringThisYear=int(retiring or 0),
    )
