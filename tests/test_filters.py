import pytest
from pydantic import ValidationError

from personnel_directory.core.filters import (
    CARD_FILTERS,
    DirectoryFilter,
    FilterAction,
    apply_filter_action,
    build_filter,
)
from personnel_directory.core.status import StatusBucket


def test_build_filter_parses_query_values():
    f = build_filter(search=" shaik ", distcode="17", dept_id="5", status="regular", page=2, limit=10)
    assert f.search == "shaik"
    assert f.distcode == "17"
    assert f.dept_id == 5
    assert f.status is StatusBucket.REGULAR
    assert f.page == 2
    assert f.offset == 10
    assert f.active_dimensions() == ["search", "distcode", "dept_id", "status"]


def test_unrecognised_values_are_dropped():
    f = build_filter(status="retired", dept_id="abc", birthday_month="last", retiring_year="next")
    assert f.status is None
    assert f.dept_id is None
    assert f.birthday_month is None
    assert f.retiring_year is None
    assert f.active_dimensions() == []


def test_filter_state_is_immutable():
    f = DirectoryFilter()
    with pytest.raises(ValidationError):
        f.search = "x"


def test_changing_a_filter_resets_page():
    f = DirectoryFilter(page=4)
    nxt = apply_filter_action(f, FilterAction(kind="distcode", value="12"))
    assert nxt.page == 1
    assert f.page == 4


def test_card_overrides_other_filters():
    f = build_filter(search="kumar", designation="Municipal Commissioner", status="incharge", card="birthdaysThisMonth")
    assert f.card == "birthdaysThisMonth"
    assert f.birthday_month == "current"
    assert f.search is None
    assert f.designation is None
    assert f.status is None


def test_selecting_same_card_twice_clears_it():
    f = apply_filter_action(DirectoryFilter(), FilterAction(kind="card", value="suspended"))
    assert f.status is StatusBucket.SUSPENDED

    f = apply_filter_action(f, FilterAction(kind="card", value="suspended"))
    assert f.card is None
    assert f.status is None


def test_switching_cards_replaces_the_card_dimension():
    f = apply_filter_action(DirectoryFilter(), FilterAction(kind="card", value="retiringThisYear"))
    f = apply_filter_action(f, FilterAction(kind="card", value="birthdaysNextMonth"))
    assert f.retiring_year is None
    assert f.birthday_month == "next"


def test_leave_cards_only_clear_filters():
    for key in ("onLeaveToday", "leaveTomorrow", "upcomingLeaves"):
        assert CARD_FILTERS[key] == {}
        f = apply_filter_action(DirectoryFilter(search="x"), FilterAction(kind="card", value=key))
        assert f.card == key
        assert f.active_dimensions() == []


def test_unknown_action_and_card_leave_state_unchanged():
    f = DirectoryFilter(search="x", page=3)
    assert apply_filter_action(f, FilterAction(kind="sort", value="name")) is f
    assert apply_filter_action(f, FilterAction(kind="card", value="vip")) is f
    assert apply_filter_action(f, FilterAction(kind="page", value=0)) is f


def test_reset_keeps_page_size():
    f = DirectoryFilter(search="x", status=StatusBucket.REGULAR, page=3, limit=50)
    assert apply_filter_action(f, FilterAction(kind="reset")) == DirectoryFilter(limit=50)
