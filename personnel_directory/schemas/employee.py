from datetime import date, datetime
from typing import Any

from pydantic import BaseModel, Field, field_validator

from personnel_directory.core.dates import parse_date


class DisplayRecord(BaseModel):
    """Card/table view of a person. Rebuilt on every fetch, never stored."""
    id: int
    name: str
    designation: str
    department: str
    cfmsId: str
    employeeId: str
    email: str
    phone: str
    mobile: str
    office: str
    birthday: str
    birthdayDisplay: str
    retirementDate: str
    retirementDisplay: str
    joiningDate: str
    currentPosition: str
    previousPosition: str
    charges: str
    responsibilities: str
    photo: str
    age: int
    timeToRetirement: str
    daysToRetirement: int
    yearsOfService: int | None
    daysUntilBirthday: int | None
    birthdayToday: bool


class DirectoryEntryOut(BaseModel):
    sno: int
    cfms_id: str
    employee_id: str | None
    employee_name: str | None
    sir_name: str | None
    first_name: str | None
    mobile_no: str | None
    email: str | None
    position: str | None
    role: str | None
    designation: str | None
    department: str | None
    department_id: int | None
    district: str | None
    district_code: str | None
    dob: date | None
    doj: date | None
    dor: date | None
    gender: str | None
    status: str
    status_bucket: str
    created_at: datetime | None
    display: DisplayRecord | None = None


class MasterStaffOut(BaseModel):
    employeeid: str
    cfms_id: str | None
    name: str | None
    surname: str | None
    fathername: str | None
    designation: str | None
    desgcode: str | None
    position_name: str | None
    dept_id: int | None
    department_name: str | None
    department_code: str | None
    distcode: str | None
    distname: str | None
    description_long: str | None
    mobileno: str | None
    email1: str | None
    doj: str | None
    dor: str | None
    dob: str | None
    basicpay: float | None
    gross: float | None
    gender_desc: str | None
    employee_status: str | None
    status_bucket: str
    display: DisplayRecord | None = None


class DirectoryEntryCreate(BaseModel):
    """
    Body for creating a directory entry. Dates may arrive as DD/MM/YYYY, ISO
    text or be missing; anything unparseable is stored as no date.
    """
    cfms_id: str = Field(min_length=1, max_length=20)
    employee_id: str | None = Field(default=None, max_length=20)
    employee_name: str | None = None
    sir_name: str | None = None
    first_name: str | None = None
    mobile_no: str | None = Field(default=None, max_length=15)
    email: str | None = None
    position: str | None = None
    role: str | None = None
    designation: str | None = None
    department: str | None = None
    department_id: int | None = None
    district: str | None = None
    district_code: str | None = None
    dob: date | None = None
    doj: date | None = None
    dor: date | None = None
    gender: str | None = None
    status: str = "ACTIVE"

    @field_validator("dob", "doj", "dor", mode="before")
    @classmethod
    def _lenient_date(cls, value: Any) -> date | None:
        return parse_date(value)

    @field_validator("cfms_id", "employee_id", mode="before")
    @classmethod
    def _strip_identifier(cls, value: Any) -> Any:
        return value.strip() if isinstance(value, str) else value

    @field_validator("status", mode="before")
    @classmethod
    def _default_status(cls, value: Any) -> str:
        text = str(value).strip() if value is not None else ""
        return text or "ACTIVE"


class ConflictingEntry(BaseModel):
    """Short summary of the entry that blocks a new one"""
    sno: int
    cfms_id: str
    employee_id: str | None
    name: str
    designation: str | None
    department: str | None


class ValidateCfmsOut(BaseModel):
    success: bool
    message: str
    exists: bool
    employee: ConflictingEntry | None = None


class MutationOut(BaseModel):
    success: bool = True
    message: str
    employee: DirectoryEntryOut | None = None
