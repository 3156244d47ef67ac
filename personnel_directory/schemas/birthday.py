from pydantic import BaseModel


class BirthdayCandidate(BaseModel):
    employeeid: str
    cfms_id: str | None = None
    name: str | None = None
    surname: str | None = None
    mobileno: str | None = None
    designation: str | None = None
    dob: str | None = None


class BirthdayTodayOut(BaseModel):
    success: bool = True
    count: int
    employees: list[BirthdayCandidate]


class BirthdayResult(BaseModel):
    """Outcome for one candidate: sent, skipped (no mobile) or failed"""
    success: bool
    employeeid: str
    name: str
    mobile: str | None = None
    reason: str | None = None
    status_code: int | None = None


class BirthdaySummary(BaseModel):
    sent: int = 0
    failed: int = 0
    skipped: int = 0
    results: list[BirthdayResult] = []


class BirthdaySendOut(BirthdaySummary):
    success: bool = True
