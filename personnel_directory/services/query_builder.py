"""
Predicate composition for directory and master-table listings.

Every active filter dimension contributes exactly one predicate and the
predicates are ANDed. Date buckets compare extracted month/year of the typed
date columns with bound parameters, so no SQL is assembled from strings.
"""
import calendar
import logging
from dataclasses import dataclass
from datetime import date
from typing import Any

from sqlalchemy import ColumnElement, and_, extract, func, or_, select
from sqlalchemy.orm import InstrumentedAttribute, Session

from personnel_directory.core.filters import DirectoryFilter
from personnel_directory.models.directory_entry import DirectoryEntry
from personnel_directory.models.master_staff import MasterStaff

logger = logging.getLogger(__name__)

POSITION_KEYWORDS = ("COMMISSIONER", "DIRECTOR")


@dataclass(frozen=True)
class FieldMap:
    """Which columns of a table play which role in the filter vocabulary."""
    model: Any
    partial_text: tuple[InstrumentedAttribute, ...]
    exact_ids: tuple[InstrumentedAttribute, ...]
    district: InstrumentedAttribute
    department: InstrumentedAttribute
    designation: InstrumentedAttribute
    position: tuple[InstrumentedAttribute, ...]
    status_bucket: InstrumentedAttribute
    birth_date: InstrumentedAttribute
    retirement_date: InstrumentedAttribute
    order_by: tuple[InstrumentedAttribute, ...]


DIRECTORY_FIELDS = FieldMap(
    model=DirectoryEntry,
    partial_text=(DirectoryEntry.first_name, DirectoryEntry.sir_name, DirectoryEntry.employee_name),
    exact_ids=(DirectoryEntry.employee_id, DirectoryEntry.cfms_id, DirectoryEntry.mobile_no),
    district=DirectoryEntry.district_code,
    department=DirectoryEntry.department_id,
    designation=DirectoryEntry.designation,
    position=(DirectoryEntry.position, DirectoryEntry.designation),
    status_bucket=DirectoryEntry.status_bucket,
    birth_date=DirectoryEntry.dob,
    retirement_date=DirectoryEntry.dor,
    order_by=(DirectoryEntry.first_name, DirectoryEntry.sir_name, DirectoryEntry.sno),
)

MASTER_FIELDS = FieldMap(
    model=MasterStaff,
    partial_text=(
        MasterStaff.name,
        MasterStaff.surname,
        MasterStaff.designation,
        MasterStaff.department_name,
        MasterStaff.distname,
    ),
    exact_ids=(MasterStaff.employeeid, MasterStaff.cfms_id, MasterStaff.mobileno),
    district=MasterStaff.distcode,
    department=MasterStaff.dept_id,
    designation=MasterStaff.designation,
    position=(MasterStaff.position_name,),
    status_bucket=MasterStaff.status_bucket,
    birth_date=MasterStaff.dob_date,
    retirement_date=MasterStaff.dor_date,
    order_by=(MasterStaff.name, MasterStaff.employeeid),
)


def month_for(bucket: str, today: date) -> int:
    """Calendar month for a birthday bucket; "next" wraps December to January."""
    if bucket == "next":
        return today.month % 12 + 1
    return today.month


def born_in_month(column: InstrumentedAttribute, month: int) -> ColumnElement[bool]:
    return and_(column.is_not(None), extract("month", column) == month)


def born_on(column: InstrumentedAttribute, day: date) -> ColumnElement[bool]:
    same_day = and_(extract("month", column) == day.month, extract("day", column) == day.day)
    if (day.month, day.day) == (2, 28) and not calendar.isleap(day.year):
        # 29 Feb birthdays are celebrated on 28 Feb in common years
        same_day = or_(same_day, and_(extract("month", column) == 2, extract("day", column) == 29))
    return and_(column.is_not(None), same_day)


def retiring_in_year(column: InstrumentedAttribute, year: int) -> ColumnElement[bool]:
    return and_(column.is_not(None), extract("year", column) == year)


def search_predicate(fields: FieldMap, term: str) -> ColumnElement[bool]:
    # Names match partially, identifiers only exactly
    clauses = [col.icontains(term, autoescape=True) for col in fields.partial_text]
    clauses += [col == term for col in fields.exact_ids]
    return or_(*clauses)


def position_predicate(fields: FieldMap) -> ColumnElement[bool]:
    return or_(
        *(
            func.upper(col).contains(keyword, autoescape=True)
            for col in fields.position
            for keyword in POSITION_KEYWORDS
        )
    )


def build_predicates(fields: FieldMap, f: DirectoryFilter, today: date) -> list[ColumnElement[bool]]:
    predicates: list[ColumnElement[bool]] = []

    if f.search:
        predicates.append(search_predicate(fields, f.search))
    if f.distcode:
        predicates.append(fields.district == f.distcode)
    if f.dept_id is not None:
        predicates.append(fields.department == f.dept_id)
    if f.designation:
        predicates.append(fields.designation == f.designation)
    if f.position:
        predicates.append(position_predicate(fields))
    if f.status:
        predicates.append(fields.status_bucket == f.status.value)
    if f.birthday_month:
        predicates.append(born_in_month(fields.birth_date, month_for(f.birthday_month, today)))
    if f.retiring_year:
        predicates.append(retiring_in_year(fields.retirement_date, today.year))

    return predicates


def fetch_page(db: Session, fields: FieldMap, f: DirectoryFilter, today: date) -> tuple[int, list]:
    """(total matching, rows on the requested page)"""
    predicates = build_predicates(fields, f, today)
    where = and_(*predicates) if predicates else None

    count_stmt = select(func.count()).select_from(fields.model)
    rows_stmt = select(fields.model)
    if where is not None:
        count_stmt = count_stmt.where(where)
        rows_stmt = rows_stmt.where(where)

    logger.debug(
        "%s filters=%s page=%s limit=%s",
        fields.model.__tablename__,
        f.active_dimensions(),
        f.page,
        f.limit,
    )

    total = db.execute(count_stmt).scalar_one()
    rows = (
        db.execute(rows_stmt.order_by(*fields.order_by).offset(f.offset).limit(f.limit))
        .scalars()
        .all()
    )

    logger.debug("%s total=%s returned=%s", fields.model.__tablename__, total, len(rows))
    return total, list(rows)
