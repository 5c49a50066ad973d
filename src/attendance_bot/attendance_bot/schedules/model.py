from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from ..core.enums import Weekday


@dataclass(frozen=True)
class ScheduleSubject:
    """Denormalized subject entry stored with a schedule."""

    subject_id: int
    code: str
    name: str
    credits: Optional[int] = None


@dataclass(frozen=True)
class TimeSlot:
    day: Weekday
    start_time: str
    end_time: str
    subject_id: int


@dataclass(frozen=True)
class Schedule:
    schedule_id: int
    student_id: int
    semester: Optional[int]
    subjects: tuple[ScheduleSubject, ...] = ()
    time_slots: tuple[TimeSlot, ...] = ()
    created_at: Optional[datetime] = None

    def subject_by_id(self, subject_id: int) -> Optional[ScheduleSubject]:
        for s in self.subjects:
            if s.subject_id == subject_id:
                return s
        return None

    def slots_on(self, day: Weekday) -> list[TimeSlot]:
        return [slot for slot in self.time_slots if slot.day == day]


# Ingestion input, as produced by an upstream schedule parser.


@dataclass(frozen=True)
class SubjectDescriptor:
    code: str
    name: str
    credits: Optional[int] = None


@dataclass(frozen=True)
class SlotDescriptor:
    day: str
    start_time: str
    end_time: str
    subject_code: str


@dataclass(frozen=True)
class ScheduleDraft:
    semester: Optional[int] = None
    subjects: tuple[SubjectDescriptor, ...] = ()
    slots: tuple[SlotDescriptor, ...] = ()


@dataclass(frozen=True)
class IngestResult:
    schedule: Schedule
    dropped_slots: list[SlotDescriptor] = field(default_factory=list)
