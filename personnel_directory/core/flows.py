"""
Add/remove flows as explicit state machines.

    add:    idle -> searching -> {found | exists | not_found} -> confirmed_add
    remove: idle -> searching -> {found | not_found} -> confirmed_remove

Flows are immutable; each transition returns a new flow or raises
InvalidTransition. The lookup endpoints return the resolved flow so a client
can render the same states without re-deriving them.
"""
import enum

from pydantic import BaseModel, ConfigDict

from personnel_directory.core.errors import DirectoryError

REMOVE_CONFIRMATION = "REMOVE"


class InvalidTransition(DirectoryError):
    status_code = 400


class AddState(str, enum.Enum):
    IDLE = "idle"
    SEARCHING = "searching"
    FOUND = "found"
    EXISTS = "exists"
    NOT_FOUND = "not_found"
    CONFIRMED_ADD = "confirmed_add"


class RemoveState(str, enum.Enum):
    IDLE = "idle"
    SEARCHING = "searching"
    FOUND = "found"
    NOT_FOUND = "not_found"
    CONFIRMED_REMOVE = "confirmed_remove"


class AddFlow(BaseModel):
    model_config = ConfigDict(frozen=True)

    state: AddState = AddState.IDLE
    key: str | None = None
    existing_cfms_id: str | None = None
    candidate_cfms_ids: tuple[str, ...] = ()
    selected_cfms_id: str | None = None

    def search(self, key: str | None) -> "AddFlow":
        key = (key or "").strip()
        if not key:
            return AddFlow()
        return AddFlow(state=AddState.SEARCHING, key=key)

    def resolve(self, *, existing_cfms_id: str | None, candidate_cfms_ids: list[str]) -> "AddFlow":
        if self.state is not AddState.SEARCHING:
            raise InvalidTransition(f"Cannot resolve an add lookup from state {self.state.value}")
        if existing_cfms_id:
            # Already in the directory: nothing more can happen in this flow
            return self.model_copy(update={"state": AddState.EXISTS, "existing_cfms_id": existing_cfms_id})
        if not candidate_cfms_ids:
            return self.model_copy(update={"state": AddState.NOT_FOUND})
        return self.model_copy(
            update={"state": AddState.FOUND, "candidate_cfms_ids": tuple(candidate_cfms_ids)}
        )

    def confirm(self, cfms_id: str) -> "AddFlow":
        if self.state is not AddState.FOUND:
            raise InvalidTransition(f"Cannot confirm an add from state {self.state.value}")
        if cfms_id not in self.candidate_cfms_ids:
            raise InvalidTransition(f"CFMS ID {cfms_id} is not among the lookup results")
        return self.model_copy(update={"state": AddState.CONFIRMED_ADD, "selected_cfms_id": cfms_id})


class RemoveFlow(BaseModel):
    model_config = ConfigDict(frozen=True)

    state: RemoveState = RemoveState.IDLE
    key: str | None = None
    cfms_id: str | None = None

    def search(self, key: str | None) -> "RemoveFlow":
        key = (key or "").strip()
        if not key:
            return RemoveFlow()
        return RemoveFlow(state=RemoveState.SEARCHING, key=key)

    def resolve(self, *, cfms_id: str | None) -> "RemoveFlow":
        if self.state is not RemoveState.SEARCHING:
            raise InvalidTransition(f"Cannot resolve a remove lookup from state {self.state.value}")
        if not cfms_id:
            return self.model_copy(update={"state": RemoveState.NOT_FOUND})
        return self.model_copy(update={"state": RemoveState.FOUND, "cfms_id": cfms_id})

    def confirm(self, token: str | None) -> "RemoveFlow":
        if self.state is not RemoveState.FOUND:
            raise InvalidTransition(f"Cannot confirm a removal from state {self.state.value}")
        if token != REMOVE_CONFIRMATION:
            raise InvalidTransition(f"Type {REMOVE_CONFIRMATION} to confirm deletion")
        return self.model_copy(update={"state": RemoveState.CONFIRMED_REMOVE})
