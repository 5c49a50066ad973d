from __future__ import annotations

from collections import Counter

from ..attendance.repository import AttendanceRepository
from ..core.constants import DEFAULT_LOW_ATTENDANCE_THRESHOLD
from ..core.enums import AttendanceStatus
from ..schedules.service import ScheduleService
from ..subjects.repository import SubjectRepository
from .model import AttendanceSummary, SubjectStats


class AttendanceSummaryService:
    """Read-only projection of a student's attendance.

    present is counted from stored records; total comes from the subject's
    total_classes counter.
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        subjects: SubjectRepository,
        schedules: ScheduleService,
        *,
        low_threshold: float = DEFAULT_LOW_ATTENDANCE_THRESHOLD,
    ):
        self._attendance = attendance
        self._subjects = subjects
        self._schedules = schedules
        self._low_threshold = float(low_threshold)

    def build_summary(self, student_id: int) -> AttendanceSummary:
        schedule = self._schedules.require(student_id)
        records = self._attendance.list_for_student(student_id)
        totals = {s.subject_id: s.total_classes for s in self._subjects.get_many(s.subject_id for s in schedule.subjects)}

        by_subject: dict[int, Counter] = {}
        for r in records:
            by_subject.setdefault(r.subject_id, Counter())[r.status] += 1

        stats: list[SubjectStats] = []
        for subject in schedule.subjects:
            counts = by_subject.get(subject.subject_id, Counter())
            stats.append(
                SubjectStats(
                    code=subject.code,
                    name=subject.name,
                    present=counts[AttendanceStatus.PRESENT],
                    absent=counts[AttendanceStatus.ABSENT],
                    cancelled=counts[AttendanceStatus.CANCELLED],
                    holidays=counts[AttendanceStatus.HOLIDAY],
                    total=int(totals.get(subject.subject_id, 0)),
                )
            )

        overall = SubjectStats(
            code="ALL",
            name="Overall",
            present=sum(s.present for s in stats),
            absent=sum(s.absent for s in stats),
            cancelled=sum(s.cancelled for s in stats),
            holidays=sum(s.holidays for s in stats),
            total=sum(s.total for s in stats),
        )
        return AttendanceSummary(overall=overall, subjects=stats)

    def low_attendance(self, summary: AttendanceSummary) -> list[SubjectStats]:
        """Subjects below the threshold. Subjects with no classes yet are never flagged."""
        return [
            s
            for s in summary.subjects
            if s.percentage_value is not None and s.percentage_value < self._low_threshold
        ]
