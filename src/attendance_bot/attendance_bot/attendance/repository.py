from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from ..core.enums import AttendanceStatus
from .model import AttendanceRecord


class AttendanceRepository(Protocol):
    def list_for_student(self, student_id: int) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def list_for_date(self, student_id: int, record_date: date) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def replace_record(
        self,
        *,
        student_id: int,
        subject_id: int,
        record_date: date,
        status: AttendanceStatus,
        notes: Optional[str] = None,
    ) -> Optional[AttendanceRecord]:
        """Delete the (student, subject, date) record if any, then insert the new one.

        Returns the record that was replaced.
        """

        raise NotImplementedError

    def replace_day(
        self,
        *,
        student_id: int,
        record_date: date,
        subject_ids: Sequence[int],
        status: AttendanceStatus,
        notes: Optional[str] = None,
    ) -> Sequence[AttendanceRecord]:
        """Purge every record of the student on that date, then insert one record per subject.

        Returns the purged records.
        """

        raise NotImplementedError

    def delete_for_student(self, student_id: int) -> int:
        raise NotImplementedError
