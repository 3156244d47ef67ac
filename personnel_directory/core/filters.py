"""
Immutable filter state for directory listings.

A DirectoryFilter is never mutated; ``apply_filter_action`` returns the next
state. The transition table below is the single place where "card" quick
filters (one per stats card) override the other filter dimensions.
"""
from typing import Any, Callable, Literal

from pydantic import BaseModel, ConfigDict

from personnel_directory.core.status import StatusBucket, parse_status_filter

BirthdayMonth = Literal["current", "next"]
RetiringYear = Literal["current"]

# Card key -> filter dimensions it sets. Leave cards have no backing data yet,
# so selecting them only clears the other filters.
CARD_FILTERS: dict[str, dict[str, Any]] = {
    "all": {},
    "regular": {"status": StatusBucket.REGULAR},
    "incharge": {"status": StatusBucket.INCHARGE},
    "suspended": {"status": StatusBucket.SUSPENDED},
    "birthdaysThisMonth": {"birthday_month": "current"},
    "birthdaysNextMonth": {"birthday_month": "next"},
    "retiringThisYear": {"retiring_year": "current"},
    "onLeaveToday": {},
    "leaveTomorrow": {},
    "upcomingLeaves": {},
}

_CLEARED_BY_CARD = {
    "search": None,
    "distcode": None,
    "dept_id": None,
    "designation": None,
    "status": None,
    "birthday_month": None,
    "retiring_year": None,
}


class DirectoryFilter(BaseModel):
    model_config = ConfigDict(frozen=True)

    search: str | None = None
    distcode: str | None = None
    dept_id: int | None = None
    designation: str | None = None
    position: str | None = None
    status: StatusBucket | None = None
    birthday_month: BirthdayMonth | None = None
    retiring_year: RetiringYear | None = None
    card: str | None = None
    page: int = 1
    limit: int = 20

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit

    def active_dimensions(self) -> list[str]:
        """Names of the filter dimensions that contribute a predicate."""
        names = ("search", "distcode", "dept_id", "designation", "position",
                 "status", "birthday_month", "retiring_year")
        return [name for name in names if getattr(self, name) not in (None, "")]


class FilterAction(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: str
    value: Any = None


# ---------------------------------------------------------------------------
# Transitions
# ---------------------------------------------------------------------------


def _clean_text(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _set_field(name: str, coerce: Callable[[Any], Any] = _clean_text):
    def transition(state: DirectoryFilter, value: Any) -> DirectoryFilter:
        return state.model_copy(update={name: coerce(value), "page": 1})
    return transition


def _coerce_int(value: Any) -> int | None:
    try:
        return int(str(value).strip())
    except (TypeError, ValueError):
        return None


def _coerce_status(value: Any) -> StatusBucket | None:
    if isinstance(value, StatusBucket):
        return None if value is StatusBucket.OTHER else value
    return parse_status_filter(value)


def _coerce_birthday_month(value: Any) -> str | None:
    return value if value in ("current", "next") else None


def _coerce_retiring_year(value: Any) -> str | None:
    return value if value == "current" else None


def _set_page(state: DirectoryFilter, value: Any) -> DirectoryFilter:
    page = _coerce_int(value)
    if page is None or page < 1:
        return state
    return state.model_copy(update={"page": page})


def _set_limit(state: DirectoryFilter, value: Any) -> DirectoryFilter:
    limit = _coerce_int(value)
    if limit is None or limit < 1:
        return state
    return state.model_copy(update={"limit": limit, "page": 1})


def _select_card(state: DirectoryFilter, value: Any) -> DirectoryFilter:
    key = _clean_text(value)
    if key not in CARD_FILTERS:
        return state
    if state.card == key:
        # Selecting the active card again clears it
        return _clear_card(state, None)
    return state.model_copy(update={**_CLEARED_BY_CARD, **CARD_FILTERS[key], "card": key, "page": 1})


def _clear_card(state: DirectoryFilter, value: Any) -> DirectoryFilter:
    return state.model_copy(
        update={"card": None, "status": None, "birthday_month": None, "retiring_year": None, "page": 1}
    )


def _reset(state: DirectoryFilter, value: Any) -> DirectoryFilter:
    return DirectoryFilter(limit=state.limit)


TRANSITIONS: dict[str, Callable[[DirectoryFilter, Any], DirectoryFilter]] = {
    "search": _set_field("search"),
    "distcode": _set_field("distcode"),
    "dept_id": _set_field("dept_id", _coerce_int),
    "designation": _set_field("designation"),
    "position": _set_field("position"),
    "status": _set_field("status", _coerce_status),
    "birthday_month": _set_field("birthday_month", _coerce_birthday_month),
    "retiring_year": _set_field("retiring_year", _coerce_retiring_year),
    "page": _set_page,
    "limit": _set_limit,
    "card": _select_card,
    "clear_card": _clear_card,
    "reset": _reset,
}


def apply_filter_action(state: DirectoryFilter, action: FilterAction) -> DirectoryFilter:
    """Next filter state; unknown actions leave the state unchanged."""
    transition = TRANSITIONS.get(action.kind)
    if transition is None:
        return state
    return transition(state, action.value)


def build_filter(
    *,
    search: str | None = None,
    distcode: str | None = None,
    dept_id: Any = None,
    designation: str | None = None,
    position: str | None = None,
    status: str | None = None,
    birthday_month: str | None = None,
    retiring_year: str | None = None,
    card: str | None = None,
    page: int = 1,
    limit: int = 20,
) -> DirectoryFilter:
    """
    Filter state from raw query-string values. Values that do not parse are
    dropped rather than rejected; a card, when given, is applied last so it
    overrides the other dimensions.
    """
    state = DirectoryFilter(limit=max(limit, 1))
    for kind, value in (
        ("search", search),
        ("distcode", distcode),
        ("dept_id", dept_id),
        ("designation", designation),
        ("position", position),
        ("status", status),
        ("birthday_month", birthday_month),
        ("retiring_year", retiring_year),
    ):
        if value is not None:
            state = apply_filter_action(state, FilterAction(kind=kind, value=value))
    if card:
        state = apply_filter_action(state, FilterAction(kind="card", value=card))
    return apply_filter_action(state, FilterAction(kind="page", value=page))
