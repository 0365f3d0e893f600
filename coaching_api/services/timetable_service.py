# coaching_api/services/timetable_service.py
from typing import Dict, List, Optional, Union

from coaching_api.core.errors import NotFoundError, ValidationError
from coaching_api.core.permissions import authorize_batch_reader, ensure_teacher_owns_batch
from coaching_api.models import Batch, TimetableEntry
from coaching_api.schemas.auth import CallerContext
from coaching_api.schemas.enums import Weekday
from coaching_api.schemas.timetable import SlotUpdate, TimetableSlot
from coaching_api.services.base_service import BaseService

MIN_HOUR = 1
MAX_HOUR = 8


def parse_day(day: Union[str, Weekday]) -> Weekday:
    if isinstance(day, Weekday):
        return day
    try:
        return Weekday.parse(day)
    except ValueError as e:
        raise ValidationError(str(e))


def validate_hour(hour: int) -> int:
    if not isinstance(hour, int) or isinstance(hour, bool) or not MIN_HOUR <= hour <= MAX_HOUR:
        raise ValidationError(f"Hour must be between {MIN_HOUR} and {MAX_HOUR}")
    return hour


class TimetableService(BaseService):
    """Weekly schedule of a batch, addressed by (day, hour) slots"""

    @staticmethod
    def _day_entries(batch: Batch, day: Weekday) -> List[TimetableEntry]:
        return [e for e in batch.timetable_entries if e.day == day]

    @staticmethod
    def _build_week(batch: Batch) -> Dict[Weekday, List[TimetableEntry]]:
        week = {day: [] for day in Weekday}
        for entry in batch.timetable_entries:
            week[entry.day].append(entry)
        for entries in week.values():
            entries.sort(key=lambda e: e.hour)
        return week

    async def get_timetable(
        self,
        caller: CallerContext,
        batch_id: int,
        student_id: Optional[int] = None
    ) -> Dict[Weekday, List[TimetableEntry]]:
        """All six days, each sorted by hour"""
        batch = await self._get_batch(batch_id)
        await authorize_batch_reader(self.db, caller, batch, student_id)
        return self._build_week(batch)

    async def set_day(
        self,
        caller: CallerContext,
        batch_id: int,
        day: Union[str, Weekday],
        entries: List[TimetableSlot]
    ) -> List[TimetableEntry]:
        """Replace a whole day; nothing is written unless every entry is valid"""
        weekday = parse_day(day)
        batch = await self._get_batch(batch_id)
        ensure_teacher_owns_batch(caller, batch)

        seen = set()
        for slot in entries:
            validate_hour(slot.hour)
            if not slot.subject or not slot.subject.strip():
                raise ValidationError(f"Subject is required for hour {slot.hour}")
            if slot.hour in seen:
                raise ValidationError(f"Hour {slot.hour} appears more than once")
            seen.add(slot.hour)

        async with self.transaction():
            for entry in self._day_entries(batch, weekday):
                batch.timetable_entries.remove(entry)
            # Old slots must be gone before new ones claim the same (day, hour)
            await self.db.flush()
            for slot in sorted(entries, key=lambda s: s.hour):
                batch.timetable_entries.append(
                    TimetableEntry(
                        day=weekday,
                        hour=slot.hour,
                        subject=slot.subject.strip(),
                        teacher=slot.teacher,
                        start_time=slot.start_time,
                        end_time=slot.end_time
                    )
                )
            self._touch(batch)

        return self._build_week(batch)[weekday]

    async def upsert_entry(
        self,
        caller: CallerContext,
        batch_id: int,
        day: Union[str, Weekday],
        hour: int,
        fields: SlotUpdate
    ) -> TimetableEntry:
        """Update only the supplied fields of a slot, or create it"""
        weekday = parse_day(day)
        validate_hour(hour)
        batch = await self._get_batch(batch_id)
        ensure_teacher_owns_batch(caller, batch)

        changes = fields.model_dump(exclude_unset=True, exclude_none=True)
        if "subject" in changes and not changes["subject"].strip():
            raise ValidationError("Subject cannot be empty")

        entry = next((e for e in self._day_entries(batch, weekday) if e.hour == hour), None)
        if not entry and not changes.get("subject"):
            raise ValidationError("Subject is required for a new timetable entry")

        async with self.transaction():
            if entry:
                for key, value in changes.items():
                    setattr(entry, key, value.strip() if key == "subject" else value)
            else:
                entry = TimetableEntry(day=weekday, hour=hour, **changes)
                entry.subject = entry.subject.strip()
                batch.timetable_entries.append(entry)
            self._touch(batch)
        return entry

    async def delete_entry(self, caller: CallerContext, batch_id: int, day: Union[str, Weekday], hour: int) -> None:
        weekday = parse_day(day)
        batch = await self._get_batch(batch_id)
        ensure_teacher_owns_batch(caller, batch)

        entry = next((e for e in self._day_entries(batch, weekday) if e.hour == hour), None)
        if not entry:
            raise NotFoundError("Timetable entry not found")

        async with self.transaction():
            batch.timetable_entries.remove(entry)
            self._touch(batch)

    async def clear_day(self, caller: CallerContext, batch_id: int, day: Union[str, Weekday]) -> None:
        weekday = parse_day(day)
        batch = await self._get_batch(batch_id)
        ensure_teacher_owns_batch(caller, batch)

        async with self.transaction():
            for entry in self._day_entries(batch, weekday):
                batch.timetable_entries.remove(entry)
            self._touch(batch)
