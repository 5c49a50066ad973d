from __future__ import annotations

import logging
from collections import defaultdict
from datetime import date, datetime
from typing import Optional, Union

from ..common.datetime_utils import to_day
from ..core.enums import AttendanceStatus
from ..core.exceptions import ValidationError
from ..schedules.service import ScheduleService
from ..subjects.repository import SubjectRepository
from .factory import RecordingStrategyFactory
from .model import AppliedEntry, AttendanceEntry, AttendanceReport, RecordResult
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


def _counts(status: Optional[AttendanceStatus]) -> int:
    return 1 if status is not None and status.counts_as_class else 0


class AttendanceService:
    """Apply one day's attendance report to storage.

    total_classes of a subject counts class sessions, not submissions: replacing a
    record moves the counter by (new counts) - (old counted), so re-sending the same
    day changes nothing and a correction to CANCELLED takes the session back out.
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        subjects: SubjectRepository,
        schedules: ScheduleService,
        *,
        strategy_factory: Optional[RecordingStrategyFactory] = None,
    ):
        self._attendance = attendance
        self._subjects = subjects
        self._schedules = schedules
        self._factory = strategy_factory or RecordingStrategyFactory()

    def record(self, student_id: int, report: AttendanceReport) -> RecordResult:
        day = to_day(report.day)
        if not report.is_holiday and not report.entries:
            raise ValidationError("The report does not mention any class")

        schedule = self._schedules.require(student_id)
        scheduled = self._schedules.subjects_on(schedule, day) if report.is_holiday else []

        strategy = self._factory.for_report(report)
        plan = strategy.plan(report=report, schedule=schedule, scheduled_subjects=scheduled)

        deltas: dict[int, int] = defaultdict(int)
        applied: list[AppliedEntry] = []

        if plan.purge_day:
            purged = self._attendance.replace_day(
                student_id=student_id,
                record_date=day,
                subject_ids=[w.subject.subject_id for w in plan.writes],
                status=AttendanceStatus.HOLIDAY,
                notes=plan.writes[0].notes if plan.writes else None,
            )
            for old in purged:
                deltas[old.subject_id] -= _counts(old.status)
            for w in plan.writes:
                deltas[w.subject.subject_id] += _counts(w.status)
                applied.append(AppliedEntry(w.subject.subject_id, w.subject.code, w.subject.name, w.status))
        else:
            for w in plan.writes:
                previous = self._attendance.replace_record(
                    student_id=student_id,
                    subject_id=w.subject.subject_id,
                    record_date=day,
                    status=w.status,
                    notes=w.notes,
                )
                deltas[w.subject.subject_id] += _counts(w.status) - _counts(previous.status if previous else None)
                applied.append(AppliedEntry(w.subject.subject_id, w.subject.code, w.subject.name, w.status))

        for subject_id, delta in deltas.items():
            if delta:
                self._subjects.increment_total(subject_id, delta)

        for entry in plan.unresolved:
            logger.warning("Student %s: no subject matches %r on %s", student_id, entry.subject_code, day)
        logger.info(
            "Recorded %s for student %s on %s: %d applied, %d unresolved",
            "holiday" if report.is_holiday else "attendance",
            student_id,
            day.isoformat(),
            len(applied),
            len(plan.unresolved),
        )
        return RecordResult(day=day, is_holiday=report.is_holiday, applied=applied, unresolved=list(plan.unresolved))

    def mark_holiday(self, student_id: int, day: Union[date, datetime]) -> RecordResult:
        return self.record(student_id, AttendanceReport(day=to_day(day), is_holiday=True))

    def mark(
        self,
        student_id: int,
        day: Union[date, datetime],
        entries: list[AttendanceEntry],
    ) -> RecordResult:
        return self.record(student_id, AttendanceReport(day=to_day(day), entries=tuple(entries)))

    def clear(self, student_id: int) -> int:
        """Delete every record of the student (explicit reset)."""
        removed = self._attendance.delete_for_student(student_id)
        logger.info("Deleted %d attendance records of student %s", removed, student_id)
        return removed
