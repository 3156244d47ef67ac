from datetime import date, datetime

from sqlalchemy import BigInteger, Date, DateTime, Integer, String, UniqueConstraint, event
from sqlalchemy.orm import Mapped, mapped_column

from personnel_directory.core.clock import utc_now
from personnel_directory.core.status import StatusBucket, status_bucket
from personnel_directory.db.base import Base


class DirectoryEntry(Base):
    __tablename__ = "cdma_cmsnr_drctry"
    __table_args__ = (
        UniqueConstraint("cfms_id", name="uq_cmsnr_drctry_cfms_id"),
    )

    # BIGINT on the server, INTEGER on SQLite so autoincrement works in tests
    sno: Mapped[int] = mapped_column(
        BigInteger().with_variant(Integer, "sqlite"), primary_key=True, autoincrement=True
    )

    cfms_id: Mapped[str] = mapped_column(String(20), nullable=False)
    employee_id: Mapped[str | None] = mapped_column(String(20), index=True, nullable=True)

    employee_name: Mapped[str | None] = mapped_column(String(150), nullable=True)  # full name fallback
    sir_name: Mapped[str | None] = mapped_column(String(100), nullable=True)
    first_name: Mapped[str | None] = mapped_column(String(100), nullable=True)

    mobile_no: Mapped[str | None] = mapped_column(String(15), nullable=True)
    email: Mapped[str | None] = mapped_column(String(150), nullable=True)

    position: Mapped[str | None] = mapped_column(String(150), nullable=True)
    role: Mapped[str | None] = mapped_column(String(100), nullable=True)
    designation: Mapped[str | None] = mapped_column(String(150), nullable=True)
    department: Mapped[str | None] = mapped_column(String(150), nullable=True)
    department_id: Mapped[int | None] = mapped_column(Integer, nullable=True)
    district: Mapped[str | None] = mapped_column(String(150), nullable=True)
    district_code: Mapped[str | None] = mapped_column(String(20), nullable=True)

    dob: Mapped[date | None] = mapped_column(Date, nullable=True)
    doj: Mapped[date | None] = mapped_column(Date, nullable=True)
    dor: Mapped[date | None] = mapped_column(Date, nullable=True)

    gender: Mapped[str | None] = mapped_column(String(20), nullable=True)
    status: Mapped[str] = mapped_column(String(50), nullable=False, default="ACTIVE")
    status_bucket: Mapped[str] = mapped_column(
        String(20), index=True, nullable=False, default=StatusBucket.REGULAR.value
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utc_now
    )

    @property
    def full_name(self) -> str:
        joined = " ".join(part for part in (self.first_name, self.sir_name) if part).strip()
        return joined or (self.employee_name or "").strip()


@event.listens_for(DirectoryEntry, "before_insert")
@event.listens_for(DirectoryEntry, "before_update")
def _bucket_status(mapper, connection, target: DirectoryEntry) -> None:
    target.status = target.status or "ACTIVE"
    target.status_bucket = status_bucket(target.status).value
