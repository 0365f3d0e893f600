from datetime import date

import pytest

from coaching_api.core.errors import NotFoundError, PermissionDenied, ValidationError
from coaching_api.schemas.exam import ExamUpdate, MarkEntry
from coaching_api.services import exam_service

from .conftest import caller_for


@pytest.fixture
def exams(db):
    return exam_service.TestResultService(db)


@pytest.fixture
async def enrolled_pair(batch_service, batch, teacher, student, other_student):
    await batch_service.add_students(caller_for(teacher), batch.id, [other_student.id])
    return student, other_student


async def test_create_starts_without_marks(exams, batch, teacher):
    test = await exams.create(caller_for(teacher), batch.id, "Unit Test 1", "Physics", 50, date(2024, 8, 3))

    assert test.id is not None
    assert test.student_marks == []
    assert test.created_by == teacher.id


async def test_marks_upsert_by_student(exams, batch, teacher, enrolled_pair):
    student, other_student = enrolled_pair
    caller = caller_for(teacher)
    test = await exams.create(caller, batch.id, "Unit Test 1", "Physics", 50)

    await exams.record_marks(caller, batch.id, test.id, [
        MarkEntry(student_id=student.id, marks=41),
        MarkEntry(student_id=other_student.id, marks=35, remarks="Revise optics"),
    ])
    await exams.record_marks(caller, batch.id, test.id, [MarkEntry(student_id=student.id, marks=44)])

    assert len(test.student_marks) == 2
    assert test.mark_for(student.id).marks == 44
    assert test.mark_for(other_student.id).remarks == "Revise optics"


@pytest.mark.parametrize("marks", [-1, 50.5])
async def test_marks_must_fit_maximum(exams, batch, teacher, student, marks):
    caller = caller_for(teacher)
    test = await exams.create(caller, batch.id, "Unit Test 1", "Physics", 50)
    with pytest.raises(ValidationError):
        await exams.record_marks(caller, batch.id, test.id, [MarkEntry(student_id=student.id, marks=marks)])


async def test_marks_only_for_enrolled_students(exams, batch, teacher, other_student):
    caller = caller_for(teacher)
    test = await exams.create(caller, batch.id, "Unit Test 1", "Physics", 50)
    with pytest.raises(ValidationError):
        await exams.record_marks(caller, batch.id, test.id, [MarkEntry(student_id=other_student.id, marks=10)])


async def test_update_fields_and_marks(exams, batch, teacher, student):
    caller = caller_for(teacher)
    test = await exams.create(caller, batch.id, "Unit Test 1", "Physics", 50)

    updated = await exams.update(caller, batch.id, test.id, ExamUpdate(
        exam_name="Unit Test 1 (retake)",
        maximum_marks=100,
        student_marks=[MarkEntry(student_id=student.id, marks=88)]
    ))

    assert updated.exam_name == "Unit Test 1 (retake)"
    assert updated.subject == "Physics"
    assert updated.maximum_marks == 100
    assert updated.mark_for(student.id).marks == 88


async def test_lowering_maximum_below_recorded_marks_fails(exams, batch, teacher, student):
    caller = caller_for(teacher)
    test = await exams.create(caller, batch.id, "Unit Test 1", "Physics", 100)
    await exams.record_marks(caller, batch.id, test.id, [MarkEntry(student_id=student.id, marks=80)])

    with pytest.raises(ValidationError):
        await exams.update(caller, batch.id, test.id, ExamUpdate(maximum_marks=50))


async def test_students_see_only_their_own_marks(exams, batch, teacher, enrolled_pair, parent):
    student, other_student = enrolled_pair
    caller = caller_for(teacher)
    test = await exams.create(caller, batch.id, "Unit Test 1", "Physics", 50)
    await exams.record_marks(caller, batch.id, test.id, [
        MarkEntry(student_id=student.id, marks=41),
        MarkEntry(student_id=other_student.id, marks=35),
    ])

    teacher_view = await exams.get(caller, batch.id, test.id)
    assert len(teacher_view.student_marks) == 2

    student_view = await exams.list(caller_for(student), batch.id)
    assert [[m.student_id for m in t.student_marks] for t in student_view] == [[student.id]]

    parent_view = await exams.get(caller_for(parent), batch.id, test.id, student_id=student.id)
    assert [m.marks for m in parent_view.student_marks] == [41]

    # The stored test still carries every mark
    assert len(test.student_marks) == 2


async def test_delete_test(exams, batch, teacher, student):
    caller = caller_for(teacher)
    test = await exams.create(caller, batch.id, "Unit Test 1", "Physics", 50)
    await exams.delete(caller, batch.id, test.id)

    with pytest.raises(NotFoundError):
        await exams.get(caller, batch.id, test.id)
    with pytest.raises(PermissionDenied):
        await exams.create(caller_for(student), batch.id, "Sneaky", "Physics", 50)
