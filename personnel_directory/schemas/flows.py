from pydantic import BaseModel

from personnel_directory.core.flows import AddState, RemoveState
from personnel_directory.schemas.employee import ConflictingEntry, DirectoryEntryOut, MasterStaffOut


class AddLookupOut(BaseModel):
    """Where the add flow stands after looking up a key"""
    success: bool = True
    state: AddState
    key: str | None
    existing: ConflictingEntry | None = None
    candidates: list[MasterStaffOut] = []


class RemoveLookupOut(BaseModel):
    success: bool = True
    state: RemoveState
    key: str | None
    employee: DirectoryEntryOut | None = None
    confirmation: str  # token the operator has to type before deleting
