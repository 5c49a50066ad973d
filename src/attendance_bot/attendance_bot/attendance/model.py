from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Optional

from ..core.enums import AttendanceStatus


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: outcome of one subject on one day. At most one per (student, subject, date)."""

    record_id: int
    student_id: int
    subject_id: int
    record_date: date
    status: AttendanceStatus
    notes: Optional[str] = None


@dataclass(frozen=True)
class AttendanceEntry:
    subject_code: str
    status: AttendanceStatus
    notes: Optional[str] = None


@dataclass(frozen=True)
class AttendanceReport:
    """One day's report, usually parsed from a free-text message."""

    day: date
    is_holiday: bool = False
    entries: tuple[AttendanceEntry, ...] = ()


@dataclass(frozen=True)
class AppliedEntry:
    subject_id: int
    code: str
    name: str
    status: AttendanceStatus


@dataclass(frozen=True)
class RecordResult:
    """What a report changed. unresolved lists entries whose subject code matched nothing."""

    day: date
    is_holiday: bool
    applied: list[AppliedEntry] = field(default_factory=list)
    unresolved: list[AttendanceEntry] = field(default_factory=list)

    @property
    def is_partial(self) -> bool:
        return bool(self.unresolved)
