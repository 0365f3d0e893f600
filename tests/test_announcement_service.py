import pytest

from coaching_api.core.errors import NotFoundError, PermissionDenied, ValidationError
from coaching_api.services import AnnouncementService

from .conftest import caller_for


@pytest.fixture
def announcements(db):
    return AnnouncementService(db)


@pytest.fixture
async def notice(announcements, batch, teacher):
    return await announcements.create(caller_for(teacher), batch.id, "Holiday on Friday", "Centre closed for Diwali")


async def test_partial_update_keeps_other_fields(announcements, batch, teacher, notice):
    updated = await announcements.update(caller_for(teacher), batch.id, notice.id, title="  Holiday on Monday ")

    assert updated.title == "Holiday on Monday"
    assert updated.content == "Centre closed for Diwali"

    updated = await announcements.update(caller_for(teacher), batch.id, notice.id, content="Classes resume Tuesday")
    assert updated.title == "Holiday on Monday"
    assert updated.content == "Classes resume Tuesday"


async def test_other_teacher_cannot_update_or_delete(announcements, batch, other_teacher, notice):
    with pytest.raises(PermissionDenied):
        await announcements.update(caller_for(other_teacher), batch.id, notice.id, title="Hijacked")
    with pytest.raises(PermissionDenied):
        await announcements.delete(caller_for(other_teacher), batch.id, notice.id)


async def test_student_cannot_post(announcements, batch, student):
    with pytest.raises(PermissionDenied):
        await announcements.create(caller_for(student), batch.id, "Party", "At my place")


async def test_blank_announcement_rejected(announcements, batch, teacher):
    with pytest.raises(ValidationError):
        await announcements.create(caller_for(teacher), batch.id, "  ", "Body")


async def test_unknown_announcement_is_not_found(announcements, batch, teacher):
    with pytest.raises(NotFoundError):
        await announcements.update(caller_for(teacher), batch.id, 9999, title="Nothing")
    with pytest.raises(NotFoundError):
        await announcements.delete(caller_for(teacher), batch.id, 9999)


async def test_delete_removes_from_list(announcements, batch, teacher, student, notice):
    later = await announcements.create(caller_for(teacher), batch.id, "Mock test", "Sunday 9am")

    await announcements.delete(caller_for(teacher), batch.id, notice.id)

    remaining = await announcements.list(caller_for(student), batch.id)
    assert [a.id for a in remaining] == [later.id]
