from datetime import date

from sqlalchemy import insert

from personnel_directory.models.directory_entry import DirectoryEntry
from personnel_directory.models.master_staff import MasterStaff


def create_master(db, employeeid: str, name: str = "Staff", **fields) -> MasterStaff:
    fields.setdefault("cfms_id", f"C{employeeid}")
    m = MasterStaff(employeeid=employeeid, name=name, **fields)
    db.add(m)
    db.commit()
    db.refresh(m)
    return m


def create_entry(
    db,
    cfms_id: str,
    first_name: str = "Test",
    sir_name: str = "Person",
    *,
    dob: date | None = None,
    dor: date | None = None,
    status: str = "ACTIVE",
    **fields,
) -> DirectoryEntry:
    e = DirectoryEntry(
        cfms_id=cfms_id,
        first_name=first_name,
        sir_name=sir_name,
        employee_name=f"{first_name} {sir_name}",
        dob=dob,
        dor=dor,
        status=status,
        **fields,
    )
    db.add(e)
    db.commit()
    db.refresh(e)
    return e


def bulk_load_master(db, employeeid: str, name: str = "Staff", **fields) -> None:
    """Insert a master row with plain SQL, the way the CFMS reload does."""
    fields.setdefault("cfms_id", f"C{employeeid}")
    db.execute(insert(MasterStaff.__table__).values(employeeid=employeeid, name=name, **fields))
    db.commit()
