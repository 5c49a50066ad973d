from __future__ import annotations

import logging
from datetime import date
from typing import Optional

from ..common.datetime_utils import parse_clock_time, parse_weekday, weekday_of
from ..common.matching import SubjectMatcher
from ..core.enums import ScheduleState
from ..core.exceptions import ScheduleNotFoundError
from ..subjects.model import Subject
from ..subjects.repository import SubjectRepository
from .model import IngestResult, Schedule, ScheduleDraft, ScheduleSubject, SlotDescriptor, TimeSlot
from .repository import ScheduleRepository

logger = logging.getLogger(__name__)


class ScheduleService:
    def __init__(self, schedules: ScheduleRepository, subjects: SubjectRepository):
        self._schedules = schedules
        self._subjects = subjects

    def ingest(self, *, student_id: int, draft: ScheduleDraft) -> IngestResult:
        """Reconcile parsed subjects/slots into canonical subjects and replace the schedule.

        Every stored slot references a subject that is also in the stored subject list.
        Slots whose subject code cannot be matched (exactly or after normalization) are dropped.
        """

        schedule_subjects: list[ScheduleSubject] = []
        seen_ids: set[int] = set()
        for desc in draft.subjects:
            code = (desc.code or "").strip()
            name = (desc.name or "").strip()
            if not code or not name:
                logger.warning("Skipping subject without code or name: %r", desc)
                continue

            subject = self._find_or_create_subject(code=code, name=name)
            if subject.subject_id in seen_ids:
                continue
            seen_ids.add(subject.subject_id)
            schedule_subjects.append(
                ScheduleSubject(subject_id=subject.subject_id, code=code, name=name, credits=desc.credits)
            )

        matcher = SubjectMatcher((s.code, s) for s in schedule_subjects)
        time_slots: list[TimeSlot] = []
        dropped: list[SlotDescriptor] = []
        for slot in draft.slots:
            day = parse_weekday(slot.day)
            subject = matcher.resolve(slot.subject_code)
            start, end = parse_clock_time(slot.start_time), parse_clock_time(slot.end_time)
            if not day or not subject or not start or not end:
                logger.warning(
                    "Dropping slot %s %s-%s %r: no matching subject, day or time",
                    slot.day,
                    slot.start_time,
                    slot.end_time,
                    slot.subject_code,
                )
                dropped.append(slot)
                continue
            time_slots.append(TimeSlot(day=day, start_time=start, end_time=end, subject_id=subject.subject_id))

        schedule = self._schedules.replace_for_student(
            student_id=int(student_id),
            semester=draft.semester,
            subjects=schedule_subjects,
            time_slots=time_slots,
        )
        logger.info(
            "Stored schedule for student %s: %d subjects, %d slots, %d dropped",
            student_id,
            len(schedule_subjects),
            len(time_slots),
            len(dropped),
        )
        return IngestResult(schedule=schedule, dropped_slots=dropped)

    def _find_or_create_subject(self, *, code: str, name: str) -> Subject:
        subject = self._subjects.find_by_code(code)
        if subject:
            return subject
        subject_id = self._subjects.create(code=code, name=name)
        logger.info("Created subject %s (%s)", code, subject_id)
        return Subject(subject_id=subject_id, code=code, name=name, total_classes=0)

    def get(self, student_id: int) -> Optional[Schedule]:
        return self._schedules.get_for_student(int(student_id))

    def require(self, student_id: int) -> Schedule:
        schedule = self.get(student_id)
        if not schedule:
            raise ScheduleNotFoundError("No schedule has been uploaded yet")
        return schedule

    def get_state(self, student_id: int) -> ScheduleState:
        schedule = self.get(student_id)
        if not schedule:
            return ScheduleState.MISSING
        if not schedule.time_slots:
            return ScheduleState.EMPTY
        return ScheduleState.READY

    def subjects_on(self, schedule: Schedule, day: date) -> list[ScheduleSubject]:
        """Distinct subjects meeting on the weekday of day, in slot order."""
        out: list[ScheduleSubject] = []
        seen: set[int] = set()
        for slot in schedule.slots_on(weekday_of(day)):
            if slot.subject_id in seen:
                continue
            subject = schedule.subject_by_id(slot.subject_id)
            if subject:
                seen.add(slot.subject_id)
                out.append(subject)
        return out

    def delete(self, student_id: int) -> bool:
        return self._schedules.delete_for_student(int(student_id))
