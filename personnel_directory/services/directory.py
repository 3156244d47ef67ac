"""
Directory mutations: adding entries copied from the master staff table and
removing entries by CFMS ID.
"""
import logging
from dataclasses import dataclass, field

from sqlalchemy import or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from personnel_directory.core.audit import log_event
from personnel_directory.core.errors import ConflictError, NotFoundError
from personnel_directory.core.flows import AddFlow, AddState, RemoveFlow
from personnel_directory.models.directory_entry import DirectoryEntry
from personnel_directory.models.master_staff import MasterStaff
from personnel_directory.schemas.employee import ConflictingEntry, DirectoryEntryCreate
from personnel_directory.services.query_builder import MASTER_FIELDS, search_predicate

logger = logging.getLogger(__name__)

MAX_CANDIDATES = 20


@dataclass
class AddLookup:
    flow: AddFlow
    existing: DirectoryEntry | None = None
    candidates: list[MasterStaff] = field(default_factory=list)


@dataclass
class RemoveLookup:
    flow: RemoveFlow
    entry: DirectoryEntry | None = None


def _blank(value) -> str:
    return "" if value is None else str(value).strip()


def conflict_summary(entry: DirectoryEntry) -> ConflictingEntry:
    return ConflictingEntry(
        sno=entry.sno,
        cfms_id=entry.cfms_id,
        employee_id=entry.employee_id,
        name=entry.full_name,
        designation=entry.designation,
        department=entry.department,
    )


def get_by_cfms_id(db: Session, cfms_id: str) -> DirectoryEntry | None:
    return db.execute(
        select(DirectoryEntry).where(DirectoryEntry.cfms_id == cfms_id.strip())
    ).scalar_one_or_none()


def get_by_identifier(db: Session, identifier: str) -> DirectoryEntry | None:
    """Entry whose CFMS ID or employee ID equals ``identifier``; CFMS ID wins."""
    identifier = identifier.strip()
    entry = get_by_cfms_id(db, identifier)
    if entry:
        return entry
    return db.execute(
        select(DirectoryEntry)
        .where(DirectoryEntry.employee_id == identifier)
        .order_by(DirectoryEntry.sno)
        .limit(1)
    ).scalar_one_or_none()


def get_master_by_identifier(db: Session, identifier: str) -> MasterStaff | None:
    identifier = identifier.strip()
    master = db.get(MasterStaff, identifier)
    if master:
        return master
    return db.execute(
        select(MasterStaff)
        .where(MasterStaff.cfms_id == identifier)
        .order_by(MasterStaff.employeeid)
        .limit(1)
    ).scalar_one_or_none()


def find_entry(db: Session, key: str) -> DirectoryEntry | None:
    """Exact identifier match first, then the first name match."""
    entry = get_by_identifier(db, key)
    if entry:
        return entry
    term = key.strip()
    return db.execute(
        select(DirectoryEntry)
        .where(
            or_(
                DirectoryEntry.first_name.icontains(term, autoescape=True),
                DirectoryEntry.sir_name.icontains(term, autoescape=True),
                DirectoryEntry.employee_name.icontains(term, autoescape=True),
            )
        )
        .order_by(DirectoryEntry.sno)
        .limit(1)
    ).scalar_one_or_none()


def search_master(db: Session, key: str, limit: int = MAX_CANDIDATES) -> list[MasterStaff]:
    term = key.strip()
    exact = (
        db.execute(
            select(MasterStaff)
            .where(or_(MasterStaff.cfms_id == term, MasterStaff.employeeid == term))
            .order_by(MasterStaff.employeeid)
            .limit(limit)
        )
        .scalars()
        .all()
    )
    if exact:
        return list(exact)
    return list(
        db.execute(
            select(MasterStaff)
            .where(search_predicate(MASTER_FIELDS, term))
            .order_by(*MASTER_FIELDS.order_by)
            .limit(limit)
        )
        .scalars()
        .all()
    )


# ---------------------------------------------------------------------------
# Add
# ---------------------------------------------------------------------------


def lookup_for_add(db: Session, key: str | None) -> AddLookup:
    flow = AddFlow().search(key)
    if flow.state is AddState.IDLE:
        return AddLookup(flow=flow)

    existing = find_entry(db, flow.key)
    if existing:
        return AddLookup(flow=flow.resolve(existing_cfms_id=existing.cfms_id, candidate_cfms_ids=[]), existing=existing)

    candidates = [m for m in search_master(db, flow.key) if m.cfms_id]
    flow = flow.resolve(existing_cfms_id=None, candidate_cfms_ids=[m.cfms_id for m in candidates])
    return AddLookup(flow=flow, candidates=candidates)


def entry_from_master(master: MasterStaff) -> DirectoryEntryCreate:
    """Field mapping used when a master record is copied into the directory."""
    return DirectoryEntryCreate(
        cfms_id=_blank(master.cfms_id),
        employee_id=_blank(master.employeeid) or None,
        employee_name=master.full_name,
        first_name=_blank(master.name),
        sir_name=_blank(master.surname),
        mobile_no=_blank(master.mobileno),
        email=_blank(master.email1),
        position=_blank(master.position_name),
        designation=_blank(master.designation),
        department=_blank(master.department_name),
        department_id=master.dept_id,
        district=_blank(master.distname),
        district_code=_blank(master.distcode),
        dob=master.dob_date or master.dob,
        doj=master.doj_date or master.doj,
        dor=master.dor_date or master.dor,
        gender=_blank(master.gender_desc),
        status=_blank(master.employee_status) or "ACTIVE",
    )


def _check_duplicates(db: Session, payload: DirectoryEntryCreate) -> None:
    existing = get_by_cfms_id(db, payload.cfms_id)
    if existing:
        raise ConflictError(
            "Employee with this CFMS ID already exists",
            exists=True,
            employee=conflict_summary(existing).model_dump(),
        )
    if payload.employee_id:
        same_employee = db.execute(
            select(DirectoryEntry).where(DirectoryEntry.employee_id == payload.employee_id).limit(1)
        ).scalar_one_or_none()
        if same_employee:
            raise ConflictError(
                "Employee with this Employee ID already exists",
                exists=True,
                employee=conflict_summary(same_employee).model_dump(),
            )


def add_entry(db: Session, payload: DirectoryEntryCreate, *, actor: str = "api") -> DirectoryEntry:
    """
    Insert a new directory entry. Either the row is created or a ConflictError
    is raised and nothing is written.
    """
    _check_duplicates(db, payload)

    entry = DirectoryEntry(**payload.model_dump())
    # SAVEPOINT so a unique-constraint race leaves the outer transaction usable
    try:
        with db.begin_nested():
            db.add(entry)
            db.flush()
    except IntegrityError:
        logger.warning("Duplicate insert rejected for CFMS ID %s", payload.cfms_id)
        raise ConflictError("Employee with this CFMS ID already exists", exists=True)

    log_event(
        db=db,
        actor=actor,
        action="DIRECTORY_ENTRY_ADDED",
        entity_type="directory_entry",
        entity_id=entry.cfms_id,
        metadata={"sno": entry.sno, "employee_id": entry.employee_id, "name": entry.full_name},
    )
    logger.info("Added directory entry %s (%s)", entry.cfms_id, entry.full_name)
    return entry


def add_from_master(db: Session, cfms_id: str, *, actor: str = "api") -> DirectoryEntry:
    """Confirmed add: copy the master record with this CFMS ID into the directory."""
    lookup = lookup_for_add(db, cfms_id)
    if lookup.flow.state is AddState.EXISTS:
        raise ConflictError(
            "Employee with this CFMS ID already exists",
            exists=True,
            employee=conflict_summary(lookup.existing).model_dump(),
        )
    if lookup.flow.state is not AddState.FOUND or cfms_id.strip() not in lookup.flow.candidate_cfms_ids:
        raise NotFoundError(f"No staff record with CFMS ID {cfms_id}")

    flow = lookup.flow.confirm(cfms_id.strip())
    master = next(m for m in lookup.candidates if m.cfms_id == flow.selected_cfms_id)
    return add_entry(db, entry_from_master(master), actor=actor)


# ---------------------------------------------------------------------------
# Remove
# ---------------------------------------------------------------------------


def lookup_for_remove(db: Session, key: str | None) -> RemoveLookup:
    flow = RemoveFlow().search(key)
    if flow.key is None:
        return RemoveLookup(flow=flow)
    entry = find_entry(db, flow.key)
    return RemoveLookup(flow=flow.resolve(cfms_id=entry.cfms_id if entry else None), entry=entry)


def remove_entry(db: Session, cfms_id: str, *, actor: str = "api") -> DirectoryEntry:
    entry = get_by_cfms_id(db, cfms_id)
    if entry is None:
        raise NotFoundError(f"No directory entry with CFMS ID {cfms_id}", exists=False)

    db.delete(entry)
    db.flush()
    log_event(
        db=db,
        actor=actor,
        action="DIRECTORY_ENTRY_REMOVED",
        entity_type="directory_entry",
        entity_id=entry.cfms_id,
        metadata={"sno": entry.sno, "employee_id": entry.employee_id, "name": entry.full_name},
    )
    logger.info("Removed directory entry %s (%s)", entry.cfms_id, entry.full_name)
    return entry
