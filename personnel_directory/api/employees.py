from datetime import date
from typing import Literal

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from personnel_directory.core.clock import get_today
from personnel_directory.core.config import settings
from personnel_directory.core.display import display_records
from personnel_directory.core.errors import ConflictError, NotFoundError
from personnel_directory.core.filters import DirectoryFilter, build_filter
from personnel_directory.core.flows import REMOVE_CONFIRMATION
from personnel_directory.db.session import get_db
from personnel_directory.models.directory_entry import DirectoryEntry
from personnel_directory.models.master_staff import MasterStaff
from personnel_directory.schemas.employee import (
    DirectoryEntryCreate,
    DirectoryEntryOut,
    MasterStaffOut,
    MutationOut,
    ValidateCfmsOut,
)
from personnel_directory.schemas.flows import AddLookupOut, RemoveLookupOut
from personnel_directory.schemas.pagination import PaginationMeta, RowsResponse
from personnel_directory.schemas.stats import StatsSnapshot
from personnel_directory.services import directory
from personnel_directory.services.master_sync import normalize_pending
from personnel_directory.services.query_builder import DIRECTORY_FIELDS, MASTER_FIELDS, fetch_page
from personnel_directory.services.stats import directory_stats

router = APIRouter(prefix="/employees", tags=["employees"])


def entry_to_out(e: DirectoryEntry) -> DirectoryEntryOut:
    return DirectoryEntryOut.model_validate(e, from_attributes=True)


def master_to_out(m: MasterStaff) -> MasterStaffOut:
    return MasterStaffOut.model_validate(m, from_attributes=True)


def listing_filter(
    page: int = Query(default=1, ge=1, description="1-based page number"),
    limit: int = Query(
        default=settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE, description="Rows per page"
    ),
    search: str | None = Query(default=None, description="Name (partial) or employee ID / CFMS ID / mobile (exact)"),
    distcode: str | None = Query(default=None, description="District code"),
    dept_id: str | None = Query(default=None, description="Department ID"),
    designation: str | None = Query(default=None, description="Exact designation"),
    position: str | None = Query(default=None, description="Any value restricts to commissioner/director posts"),
    status_filter: str | None = Query(default=None, alias="status", description="regular | incharge | suspended"),
    birthday_month: str | None = Query(default=None, alias="birthdayMonth", description="current | next"),
    retiring_year: str | None = Query(default=None, alias="retiringYear", description="current"),
    card: str | None = Query(default=None, description="Stats card key; overrides the other filters"),
) -> DirectoryFilter:
    return build_filter(
        search=search,
        distcode=distcode,
        dept_id=dept_id,
        designation=designation,
        position=position,
        status=status_filter,
        birthday_month=birthday_month,
        retiring_year=retiring_year,
        card=card,
        page=page,
        limit=limit,
    )


@router.get("", response_model=RowsResponse[DirectoryEntryOut])
def list_employees(
    f: DirectoryFilter = Depends(listing_filter),
    expand: str | None = Query(default=None, description="'display' adds the card/table view of each row"),
    db: Session = Depends(get_db),
    today: date = Depends(get_today),
):
    """
    List directory entries with optional filters and pagination.

    All supplied filters are combined with AND; ``total`` counts every match,
    ``rows`` holds only the requested page.
    """
    total, entries = fetch_page(db, DIRECTORY_FIELDS, f, today)
    items = [entry_to_out(e) for e in entries]

    if expand and "display" in expand.split(","):
        views = display_records(entries, today, start_index=f.offset)
        items = [item.model_copy(update={"display": view}) for item, view in zip(items, views)]

    return RowsResponse[DirectoryEntryOut].build(
        items, PaginationMeta(total=total, page=f.page, limit=f.limit)
    )


@router.get("/stats", response_model=StatsSnapshot)
def employee_stats(
    db: Session = Depends(get_db),
    today: date = Depends(get_today),
):
    """Summary counts over the whole directory (not the current page)."""
    return directory_stats(db, today)


@router.get("/search-all", response_model=RowsResponse[MasterStaffOut])
def search_all_employees(
    f: DirectoryFilter = Depends(listing_filter),
    expand: str | None = Query(default=None, description="'display' adds the card/table view of each row"),
    db: Session = Depends(get_db),
    today: date = Depends(get_today),
):
    """Search the master staff table; used to find candidates to add."""
    normalize_pending(db)
    total, staff = fetch_page(db, MASTER_FIELDS, f, today)
    items = [master_to_out(m) for m in staff]

    if expand and "display" in expand.split(","):
        views = display_records(staff, today, start_index=f.offset)
        items = [item.model_copy(update={"display": view}) for item, view in zip(items, views)]

    return RowsResponse[MasterStaffOut].build(
        items, PaginationMeta(total=total, page=f.page, limit=f.limit)
    )


@router.get("/validate/{cfms_id}", response_model=ValidateCfmsOut)
def validate_cfms_id(
    cfms_id: str,
    db: Session = Depends(get_db),
):
    """200 when the CFMS ID is free, 409 with the blocking entry when it is taken."""
    existing = directory.get_by_cfms_id(db, cfms_id)
    if existing:
        raise ConflictError(
            "Employee with this CFMS ID already exists",
            exists=True,
            employee=directory.conflict_summary(existing).model_dump(),
        )
    return ValidateCfmsOut(success=True, message="CFMS ID is available", exists=False)


@router.get("/add-lookup", response_model=AddLookupOut)
def add_lookup(
    key: str = Query(..., description="CFMS ID, employee ID or name"),
    db: Session = Depends(get_db),
):
    """Resolve the add flow for ``key``: exists, found (with candidates) or not_found."""
    lookup = directory.lookup_for_add(db, key)
    return AddLookupOut(
        state=lookup.flow.state,
        key=lookup.flow.key,
        existing=directory.conflict_summary(lookup.existing) if lookup.existing else None,
        candidates=[master_to_out(m) for m in lookup.candidates],
    )


@router.get("/remove-lookup", response_model=RemoveLookupOut)
def remove_lookup(
    key: str = Query(..., description="CFMS ID, employee ID or name"),
    db: Session = Depends(get_db),
):
    lookup = directory.lookup_for_remove(db, key)
    return RemoveLookupOut(
        state=lookup.flow.state,
        key=lookup.flow.key,
        employee=entry_to_out(lookup.entry) if lookup.entry else None,
        confirmation=REMOVE_CONFIRMATION,
    )


@router.post("", response_model=MutationOut, status_code=status.HTTP_201_CREATED)
def add_employee(
    payload: DirectoryEntryCreate,
    db: Session = Depends(get_db),
):
    entry = directory.add_entry(db, payload)
    return MutationOut(message="Employee added successfully", employee=entry_to_out(entry))


@router.post("/from-master/{cfms_id}", response_model=MutationOut, status_code=status.HTTP_201_CREATED)
def add_employee_from_master(
    cfms_id: str,
    db: Session = Depends(get_db),
):
    """Confirmed add: copy the master staff record with this CFMS ID into the directory."""
    entry = directory.add_from_master(db, cfms_id)
    return MutationOut(message="Employee added successfully", employee=entry_to_out(entry))


@router.delete("/remove/{cfms_id}", response_model=MutationOut)
def remove_employee(
    cfms_id: str,
    db: Session = Depends(get_db),
):
    entry = directory.remove_entry(db, cfms_id)
    return MutationOut(message="Employee removed successfully", employee=entry_to_out(entry))


@router.get("/{employee_id}")
def get_employee(
    employee_id: str,
    source: Literal["directory", "master"] = Query(default="directory"),
    expand: str | None = Query(default=None, description="'display' adds the card/table view"),
    db: Session = Depends(get_db),
    today: date = Depends(get_today),
):
    """
    Single record by employee ID or CFMS ID, from the directory (default) or
    the master staff table.
    """
    with_display = bool(expand and "display" in expand.split(","))

    if source == "master":
        staff = directory.get_master_by_identifier(db, employee_id)
        if not staff:
            raise NotFoundError("Not found")
        out = master_to_out(staff)
        row = staff
    else:
        entry = directory.get_by_identifier(db, employee_id)
        if not entry:
            raise NotFoundError("Not found")
        out = entry_to_out(entry)
        row = entry

    if with_display:
        out = out.model_copy(update={"display": display_records([row], today)[0]})
    return out
