from __future__ import annotations

from ...common.matching import SubjectMatcher
from ...schedules.model import Schedule, ScheduleSubject
from ..model import AttendanceReport
from .base import PlannedRecord, RecordingPlan, RecordingStrategy


class EntriesStrategy(RecordingStrategy):
    """Per-subject statuses, resolved against the student's schedule."""

    def plan(
        self,
        *,
        report: AttendanceReport,
        schedule: Schedule,
        scheduled_subjects: list[ScheduleSubject],
    ) -> RecordingPlan:
        matcher = SubjectMatcher((s.code, s) for s in schedule.subjects)
        plan = RecordingPlan()
        for entry in report.entries:
            subject = matcher.resolve(entry.subject_code)
            if subject is None:
                plan.unresolved.append(entry)
                continue
            plan.writes.append(PlannedRecord(subject=subject, status=entry.status, notes=entry.notes))
        return plan
