import pytest

from coaching_api.core.errors import NotFoundError, PermissionDenied, ValidationError
from coaching_api.schemas.enums import Weekday
from coaching_api.schemas.timetable import SlotUpdate, TimetableSlot
from coaching_api.services import TimetableService

from .conftest import caller_for


@pytest.fixture
def timetable(db):
    return TimetableService(db)


async def test_upsert_same_slot_twice_keeps_one_entry(timetable, batch, teacher):
    caller = caller_for(teacher)
    await timetable.upsert_entry(caller, batch.id, "monday", 3, SlotUpdate(subject="Physics", teacher="Mr. Das"))
    await timetable.upsert_entry(caller, batch.id, "Mon", 3, SlotUpdate(subject="Chemistry"))
    await timetable.upsert_entry(caller, batch.id, "monday", 1, SlotUpdate(subject="Maths"))

    week = await timetable.get_timetable(caller, batch.id)
    monday = week[Weekday.MONDAY]
    assert [e.hour for e in monday] == [1, 3]
    assert monday[1].subject == "Chemistry"
    # Fields not supplied on update are kept
    assert monday[1].teacher == "Mr. Das"


async def test_new_slot_needs_subject(timetable, batch, teacher):
    with pytest.raises(ValidationError):
        await timetable.upsert_entry(caller_for(teacher), batch.id, "tuesday", 2, SlotUpdate(teacher="Ms. Roy"))


@pytest.mark.parametrize("hour", [0, 9])
async def test_hour_out_of_range(timetable, batch, teacher, hour):
    with pytest.raises(ValidationError):
        await timetable.upsert_entry(caller_for(teacher), batch.id, "monday", hour, SlotUpdate(subject="Physics"))


async def test_unknown_day(timetable, batch, teacher):
    with pytest.raises(ValidationError):
        await timetable.upsert_entry(caller_for(teacher), batch.id, "sunday", 1, SlotUpdate(subject="Physics"))


async def test_set_day_replaces_and_sorts(timetable, batch, teacher):
    caller = caller_for(teacher)
    await timetable.upsert_entry(caller, batch.id, "friday", 2, SlotUpdate(subject="Biology"))
    await timetable.upsert_entry(caller, batch.id, "friday", 6, SlotUpdate(subject="English"))

    entries = await timetable.set_day(caller, batch.id, "FRI", [
        TimetableSlot(hour=4, subject="Maths"),
        TimetableSlot(hour=2, subject="Physics", start_time="09:00", end_time="10:00"),
    ])

    assert [(e.hour, e.subject) for e in entries] == [(2, "Physics"), (4, "Maths")]
    week = await timetable.get_timetable(caller, batch.id)
    assert [e.hour for e in week[Weekday.FRIDAY]] == [2, 4]


async def test_set_day_validates_every_entry_first(timetable, batch, teacher):
    caller = caller_for(teacher)
    await timetable.upsert_entry(caller, batch.id, "wednesday", 1, SlotUpdate(subject="Biology"))

    with pytest.raises(ValidationError):
        await timetable.set_day(caller, batch.id, "wednesday", [
            TimetableSlot(hour=1, subject="Maths"),
            TimetableSlot(hour=1, subject="Physics"),
        ])
    with pytest.raises(ValidationError):
        await timetable.set_day(caller, batch.id, "wednesday", [
            TimetableSlot(hour=2, subject="Maths"),
            TimetableSlot(hour=3, subject="  "),
        ])

    week = await timetable.get_timetable(caller, batch.id)
    assert [e.subject for e in week[Weekday.WEDNESDAY]] == ["Biology"]


async def test_timetable_has_all_six_days(timetable, batch, student):
    week = await timetable.get_timetable(caller_for(student), batch.id)
    assert list(week) == list(Weekday)
    assert all(entries == [] for entries in week.values())


async def test_delete_entry_and_clear_day(timetable, batch, teacher):
    caller = caller_for(teacher)
    await timetable.upsert_entry(caller, batch.id, "thursday", 1, SlotUpdate(subject="Maths"))
    await timetable.upsert_entry(caller, batch.id, "thursday", 2, SlotUpdate(subject="Physics"))

    await timetable.delete_entry(caller, batch.id, "thursday", 1)
    with pytest.raises(NotFoundError):
        await timetable.delete_entry(caller, batch.id, "thursday", 1)

    await timetable.clear_day(caller, batch.id, "thursday")
    week = await timetable.get_timetable(caller, batch.id)
    assert week[Weekday.THURSDAY] == []


async def test_students_cannot_edit_timetable(timetable, batch, student):
    with pytest.raises(PermissionDenied):
        await timetable.upsert_entry(caller_for(student), batch.id, "monday", 1, SlotUpdate(subject="Free"))
