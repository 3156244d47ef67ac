import pytest

from personnel_directory.core.flows import AddFlow, AddState, InvalidTransition, RemoveFlow, RemoveState


def test_add_flow_happy_path():
    flow = AddFlow().search(" 555 ")
    assert flow.state is AddState.SEARCHING
    assert flow.key == "555"

    flow = flow.resolve(existing_cfms_id=None, candidate_cfms_ids=["555", "556"])
    assert flow.state is AddState.FOUND

    flow = flow.confirm("556")
    assert flow.state is AddState.CONFIRMED_ADD
    assert flow.selected_cfms_id == "556"


def test_add_flow_existing_entry_is_terminal():
    flow = AddFlow().search("555").resolve(existing_cfms_id="555", candidate_cfms_ids=["555"])
    assert flow.state is AddState.EXISTS
    with pytest.raises(InvalidTransition):
        flow.confirm("555")


def test_add_flow_rejects_unknown_candidate():
    flow = AddFlow().search("x").resolve(existing_cfms_id=None, candidate_cfms_ids=["1"])
    with pytest.raises(InvalidTransition):
        flow.confirm("2")


def test_add_flow_blank_key_returns_to_idle():
    assert AddFlow().search("").state is AddState.IDLE
    with pytest.raises(InvalidTransition):
        AddFlow().resolve(existing_cfms_id=None, candidate_cfms_ids=[])


def test_remove_flow_requires_typed_confirmation():
    flow = RemoveFlow().search("777").resolve(cfms_id="777")
    assert flow.state is RemoveState.FOUND

    with pytest.raises(InvalidTransition):
        flow.confirm("remove")
    assert flow.confirm("REMOVE").state is RemoveState.CONFIRMED_REMOVE


def test_remove_flow_not_found_cannot_confirm():
    flow = RemoveFlow().search("777").resolve(cfms_id=None)
    assert flow.state is RemoveState.NOT_FOUND
    with pytest.raises(InvalidTransition):
        flow.confirm("REMOVE")
