from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Optional

from ...core.enums import AttendanceStatus
from ...schedules.model import Schedule, ScheduleSubject
from ..model import AttendanceEntry, AttendanceReport


@dataclass(frozen=True)
class PlannedRecord:
    subject: ScheduleSubject
    status: AttendanceStatus
    notes: Optional[str] = None


@dataclass(frozen=True)
class RecordingPlan:
    """Writes decided by a strategy. purge_day replaces every record of the day at once."""

    writes: list[PlannedRecord] = field(default_factory=list)
    unresolved: list[AttendanceEntry] = field(default_factory=list)
    purge_day: bool = False


class RecordingStrategy(ABC):
    """Strategy Pattern: encapsulate how a report turns into attendance records."""

    @abstractmethod
    def plan(
        self,
        *,
        report: AttendanceReport,
        schedule: Schedule,
        scheduled_subjects: list[ScheduleSubject],
    ) -> RecordingPlan:
        raise NotImplementedError
