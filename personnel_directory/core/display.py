"""
Total mapping from stored rows to DisplayRecord.

``to_display_record`` never raises. A clean row yields ``Ok``; a row that
needed placeholders yields ``Defaulted`` carrying the list of substitutions,
so degraded data stays visible to logs and tests without failing a page.
"""
import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Any
from urllib.parse import quote

from personnel_directory.core.dates import (
    calculate_age,
    days_until_birthday,
    format_date,
    is_birthday,
    normalize_date,
    time_to_retirement,
    years_of_service,
)
from personnel_directory.core.status import status_label
from personnel_directory.models.directory_entry import DirectoryEntry
from personnel_directory.models.master_staff import MasterStaff
from personnel_directory.schemas.employee import DisplayRecord

logger = logging.getLogger(__name__)

DEFAULT_BIRTHDAY = "1970-01-01"
DEFAULT_PREVIOUS_POSITION = "Assistant Commissioner"
DEFAULT_CHARGES = "None"
AVATAR_URL = "https://ui-avatars.com/api/?name={name}&size=400&background=random"


@dataclass(frozen=True)
class Ok:
    record: DisplayRecord

    @property
    def warnings(self) -> list[str]:
        return []


@dataclass(frozen=True)
class Defaulted:
    record: DisplayRecord
    warnings: list[str] = field(default_factory=list)


MappedRecord = Ok | Defaulted


@dataclass
class _Source:
    """The subset of fields the view needs, read off either table."""
    first_name: Any = None
    surname: Any = None
    full_name: Any = None
    designation: Any = None
    office: Any = None
    cfms_id: Any = None
    employee_id: Any = None
    email: Any = None
    mobile: Any = None
    dob: Any = None
    doj: Any = None
    dor: Any = None
    status: Any = None


def _source_for(row: Any) -> _Source:
    if isinstance(row, DirectoryEntry):
        return _Source(
            first_name=row.first_name,
            surname=row.sir_name,
            full_name=row.employee_name,
            designation=row.designation,
            office=row.district or row.department,
            cfms_id=row.cfms_id,
            employee_id=row.employee_id,
            email=row.email,
            mobile=row.mobile_no,
            dob=row.dob,
            doj=row.doj,
            dor=row.dor,
            status=row.status,
        )
    if isinstance(row, MasterStaff):
        return _Source(
            first_name=row.name,
            surname=row.surname,
            designation=row.designation,
            office=row.description_long or row.distname or row.department_name,
            cfms_id=row.cfms_id,
            employee_id=row.employeeid,
            email=row.email1,
            mobile=row.mobileno,
            dob=row.dob,
            doj=row.doj,
            dor=row.dor,
            status=row.employee_status,
        )
    if isinstance(row, dict):
        return _Source(**{k: v for k, v in row.items() if k in _Source.__dataclass_fields__})
    raise TypeError(f"Cannot map {type(row).__name__} to a display record")


def _text(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def _build(src: _Source, index: int, today: date, warnings: list[str]) -> DisplayRecord:
    name = " ".join(p for p in (_text(src.first_name), _text(src.surname)) if p) or _text(src.full_name)
    if not name:
        name = f"Employee {index + 1}"
        warnings.append("name missing")

    office = _text(src.office)
    designation = _text(src.designation)

    birthday = normalize_date(src.dob)
    if birthday is None:
        birthday = DEFAULT_BIRTHDAY
        warnings.append("date of birth missing or invalid")
    retirement = normalize_date(src.dor) or ""
    if src.dor not in (None, "") and not retirement:
        warnings.append("date of retirement invalid")
    joining = normalize_date(src.doj) or ""
    if src.doj not in (None, "") and not joining:
        warnings.append("date of joining invalid")

    countdown = time_to_retirement(retirement, today)
    mobile = _text(src.mobile)

    return DisplayRecord(
        id=index + 1,
        name=name,
        designation=designation,
        department=office,
        cfmsId=_text(src.cfms_id),
        employeeId=_text(src.employee_id),
        email=_text(src.email),
        phone=mobile,
        mobile=mobile,
        office=f"{office} Municipal Office".strip(),
        birthday=birthday,
        birthdayDisplay=format_date(src.dob),
        retirementDate=retirement,
        retirementDisplay=format_date(retirement),
        joiningDate=joining,
        currentPosition=" - ".join(p for p in (designation, office) if p) or "Unknown Position",
        previousPosition=DEFAULT_PREVIOUS_POSITION,
        charges=DEFAULT_CHARGES,
        responsibilities=status_label(src.status),
        photo=AVATAR_URL.format(name=quote(_text(src.first_name) or "Employee")),
        age=calculate_age(src.dob, today),
        timeToRetirement=countdown.text,
        daysToRetirement=countdown.days,
        yearsOfService=years_of_service(joining, today),
        daysUntilBirthday=days_until_birthday(src.dob, today),
        birthdayToday=is_birthday(src.dob, today),
    )


def _placeholder(index: int) -> DisplayRecord:
    return DisplayRecord(
        id=index + 1,
        name=f"Employee {index + 1}",
        designation="",
        department="",
        cfmsId="",
        employeeId="",
        email="",
        phone="",
        mobile="",
        office="Municipal Office",
        birthday=DEFAULT_BIRTHDAY,
        birthdayDisplay="",
        retirementDate="",
        retirementDisplay="",
        joiningDate="",
        currentPosition="Unknown Position",
        previousPosition=DEFAULT_PREVIOUS_POSITION,
        charges=DEFAULT_CHARGES,
        responsibilities="Regular",
        photo=AVATAR_URL.format(name="Employee"),
        age=0,
        timeToRetirement="N/A",
        daysToRetirement=-1,
        yearsOfService=None,
        daysUntilBirthday=None,
        birthdayToday=False,
    )


def to_display_record(row: Any, index: int, today: date) -> MappedRecord:
    warnings: list[str] = []
    try:
        record = _build(_source_for(row), index, today, warnings)
    except Exception as e:
        logger.warning("Display mapping failed for row %s: %s", index, e)
        return Defaulted(_placeholder(index), [f"mapping failed: {e}"])

    if warnings:
        logger.debug("Row %s mapped with defaults: %s", index, warnings)
        return Defaulted(record, warnings)
    return Ok(record)


def display_records(rows: list[Any], today: date, start_index: int = 0) -> list[DisplayRecord]:
    return [to_display_record(row, start_index + i, today).record for i, row in enumerate(rows)]
