from __future__ import annotations

from ...core.constants import HOLIDAY_NOTE
from ...core.enums import AttendanceStatus
from ...schedules.model import Schedule, ScheduleSubject
from ..model import AttendanceReport
from .base import PlannedRecord, RecordingPlan, RecordingStrategy


class HolidayStrategy(RecordingStrategy):
    """Whole day off: one HOLIDAY record per subject scheduled on that weekday."""

    def plan(
        self,
        *,
        report: AttendanceReport,
        schedule: Schedule,
        scheduled_subjects: list[ScheduleSubject],
    ) -> RecordingPlan:
        return RecordingPlan(
            writes=[
                PlannedRecord(subject=s, status=AttendanceStatus.HOLIDAY, notes=HOLIDAY_NOTE)
                for s in scheduled_subjects
            ],
            purge_day=True,
        )
