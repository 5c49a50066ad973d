from __future__ import annotations

from enum import Enum


class AttendanceStatus(str, Enum):
    """Outcome of one subject on one calendar day."""

    PRESENT = "PRESENT"
    ABSENT = "ABSENT"
    CANCELLED = "CANCELLED"
    HOLIDAY = "HOLIDAY"

    @property
    def counts_as_class(self) -> bool:
        """A class happened and attendance was taken."""
        return self in (AttendanceStatus.PRESENT, AttendanceStatus.ABSENT)


class ChatState(str, Enum):
    """Where a student is in the conversation."""

    IDLE = "IDLE"
    AWAITING_SCHEDULE = "AWAITING_SCHEDULE"
    AWAITING_ATTENDANCE = "AWAITING_ATTENDANCE"
    AWAITING_CONFIRMATION = "AWAITING_CONFIRMATION"


class Weekday(str, Enum):
    MONDAY = "Monday"
    TUESDAY = "Tuesday"
    WEDNESDAY = "Wednesday"
    THURSDAY = "Thursday"
    FRIDAY = "Friday"
    SATURDAY = "Saturday"
    SUNDAY = "Sunday"


class ScheduleState(str, Enum):
    MISSING = "MISSING"
    EMPTY = "EMPTY"
    READY = "READY"
