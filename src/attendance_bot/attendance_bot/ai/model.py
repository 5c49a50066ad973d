from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional

from ..attendance.model import AttendanceEntry, AttendanceReport
from ..schedules.model import ScheduleDraft


@dataclass(frozen=True)
class ParsedAttendance:
    day: date
    is_holiday: bool = False
    entries: tuple[AttendanceEntry, ...] = ()
    needs_more_info: bool = False
    clarification_question: Optional[str] = None

    def to_report(self) -> AttendanceReport:
        return AttendanceReport(day=self.day, is_holiday=self.is_holiday, entries=self.entries)


@dataclass(frozen=True)
class ParsedSchedule:
    draft: ScheduleDraft
    student_name: Optional[str] = None
    roll_number: Optional[str] = None
    confidence: Optional[str] = None

    @property
    def semester(self) -> Optional[int]:
        return self.draft.semester
