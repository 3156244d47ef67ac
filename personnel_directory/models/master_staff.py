from datetime import date, datetime

from sqlalchemy import Date, DateTime, Float, Integer, String, event
from sqlalchemy.orm import Mapped, mapped_column

from personnel_directory.core.clock import utc_now
from personnel_directory.core.dates import parse_date
from personnel_directory.core.status import StatusBucket, status_bucket
from personnel_directory.db.base import Base


class MasterStaff(Base):
    """
    Externally loaded CFMS staff table. Read-only for this service apart from
    the normalized shadow columns at the bottom.
    """
    __tablename__ = "ext_cfms_stg_t"

    employeeid: Mapped[str] = mapped_column(String(20), primary_key=True)
    cfms_id: Mapped[str | None] = mapped_column(String(20), index=True, nullable=True)

    name: Mapped[str | None] = mapped_column(String(150), nullable=True)
    surname: Mapped[str | None] = mapped_column(String(100), nullable=True)
    fathername: Mapped[str | None] = mapped_column(String(150), nullable=True)

    designation: Mapped[str | None] = mapped_column(String(150), nullable=True)
    desgcode: Mapped[str | None] = mapped_column(String(20), nullable=True)
    position_name: Mapped[str | None] = mapped_column(String(150), nullable=True)

    dept_id: Mapped[int | None] = mapped_column(Integer, nullable=True)
    department_name: Mapped[str | None] = mapped_column(String(150), nullable=True)
    department_code: Mapped[str | None] = mapped_column(String(20), nullable=True)
    distcode: Mapped[str | None] = mapped_column(String(20), nullable=True)
    distname: Mapped[str | None] = mapped_column(String(100), nullable=True)
    description_long: Mapped[str | None] = mapped_column(String(200), nullable=True)  # ULB name

    mobileno: Mapped[str | None] = mapped_column(String(15), nullable=True)
    email1: Mapped[str | None] = mapped_column(String(150), nullable=True)

    # Free text as delivered by the load, usually DD/MM/YYYY
    doj: Mapped[str | None] = mapped_column(String(30), nullable=True)
    dor: Mapped[str | None] = mapped_column(String(30), nullable=True)
    dob: Mapped[str | None] = mapped_column(String(30), nullable=True)

    basicpay: Mapped[float | None] = mapped_column(Float, nullable=True)
    gross: Mapped[float | None] = mapped_column(Float, nullable=True)

    gender_desc: Mapped[str | None] = mapped_column(String(20), nullable=True)
    employee_status: Mapped[str | None] = mapped_column(String(50), nullable=True)

    # Normalized from the raw columns above on every ORM write. Rows loaded
    # with plain SQL keep normalized_at NULL until services.master_sync runs.
    dob_date: Mapped[date | None] = mapped_column(Date, index=True, nullable=True)
    doj_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    dor_date: Mapped[date | None] = mapped_column(Date, index=True, nullable=True)
    status_bucket: Mapped[str] = mapped_column(
        String(20), index=True, nullable=False, default=StatusBucket.OTHER.value
    )
    normalized_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), index=True, nullable=True
    )

    @property
    def full_name(self) -> str:
        return " ".join(part for part in (self.name, self.surname) if part).strip()

    def apply_normalization(self) -> None:
        self.dob_date = parse_date(self.dob)
        self.doj_date = parse_date(self.doj)
        self.dor_date = parse_date(self.dor)
        self.status_bucket = status_bucket(self.employee_status).value
        self.normalized_at = utc_now()


@event.listens_for(MasterStaff, "before_insert")
@event.listens_for(MasterStaff, "before_update")
def _normalize_master(mapper, connection, target: MasterStaff) -> None:
    target.apply_normalization()
