from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Schedule, ScheduleSubject, TimeSlot


class ScheduleRepository(Protocol):
    def get_for_student(self, student_id: int) -> Optional[Schedule]:
        raise NotImplementedError

    def replace_for_student(
        self,
        *,
        student_id: int,
        semester: Optional[int],
        subjects: Sequence[ScheduleSubject],
        time_slots: Sequence[TimeSlot],
    ) -> Schedule:
        """Delete any existing schedule of the student and insert this one.

        Returns the stored schedule.
        """

        raise NotImplementedError

    def delete_for_student(self, student_id: int) -> bool:
        raise NotImplementedError
