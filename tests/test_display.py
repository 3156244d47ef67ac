from datetime import date

from personnel_directory.core.display import (
    DEFAULT_BIRTHDAY,
    Defaulted,
    Ok,
    display_records,
    to_display_record,
)
from personnel_directory.models.directory_entry import DirectoryEntry
from personnel_directory.models.master_staff import MasterStaff

TODAY = date(2026, 6, 15)


def test_complete_directory_row_maps_cleanly():
    entry = DirectoryEntry(
        cfms_id="14410463",
        employee_id="2599713",
        first_name="MANOHAR",
        sir_name="SIMHADRI",
        designation="Municipal Commissioner",
        district="Krishna",
        mobile_no="9502789815",
        dob=date(1988, 6, 15),
        doj=date(2014, 6, 14),
        dor=date(2050, 6, 30),
        status="Working",
    )
    result = to_display_record(entry, 0, TODAY)

    assert isinstance(result, Ok)
    rec = result.record
    assert rec.id == 1
    assert rec.name == "MANOHAR SIMHADRI"
    assert rec.office == "Krishna Municipal Office"
    assert rec.currentPosition == "Municipal Commissioner - Krishna"
    assert rec.birthday == "1988-06-15"
    assert rec.birthdayDisplay == "15 Jun 1988"
    assert rec.retirementDisplay == "30 Jun 2050"
    assert rec.birthdayToday is True
    assert rec.daysUntilBirthday == 0
    assert rec.age == 38
    assert rec.yearsOfService == 12
    assert rec.timeToRetirement.startswith("24y")
    assert rec.responsibilities == "Regular"
    assert rec.photo.endswith("name=MANOHAR&size=400&background=random")


def test_master_row_with_bad_dates_is_defaulted():
    staff = MasterStaff(employeeid="E1", name="RAVI", dob="31/02/1990", dor="", employee_status="3")
    result = to_display_record(staff, 4, TODAY)

    assert isinstance(result, Defaulted)
    assert "date of birth missing or invalid" in result.warnings
    rec = result.record
    assert rec.id == 5
    assert rec.birthday == DEFAULT_BIRTHDAY
    assert rec.age == 0
    assert rec.timeToRetirement == "N/A"
    assert rec.daysToRetirement == -1
    assert rec.birthdayDisplay == ""
    assert rec.daysUntilBirthday is None
    assert rec.birthdayToday is False
    assert rec.responsibilities == "Suspended"


def test_nameless_row_gets_placeholder_name():
    result = to_display_record({"cfms_id": "1"}, 2, TODAY)
    assert isinstance(result, Defaulted)
    assert result.record.name == "Employee 3"


def test_unmappable_row_never_raises():
    result = to_display_record(object(), 0, TODAY)
    assert isinstance(result, Defaulted)
    assert result.record.name == "Employee 1"
    assert result.warnings[0].startswith("mapping failed")


def test_display_records_numbering_follows_page_offset():
    rows = [{"first_name": "A"}, {"first_name": "B"}]
    records = display_records(rows, TODAY, start_index=20)
    assert [r.id for r in records] == [21, 22]


def test_upcoming_birthday_countdown():
    rec = to_display_record({"first_name": "A", "dob": "20/06/1990"}, 0, TODAY).record
    assert rec.daysUntilBirthday == 5
    assert rec.birthdayToday is False

    rec = to_display_record({"first_name": "B", "dob": "14/06/1990"}, 0, TODAY).record
    assert rec.daysUntilBirthday == 364


def test_placeholder_record_has_no_birthday():
    rec = to_display_record(object(), 0, TODAY).record
    assert rec.birthdayDisplay == ""
    assert rec.daysUntilBirthday is None
    assert rec.birthdayToday is False
