from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from ..core.constants import NOT_APPLICABLE


def percentage(present: int, total: int) -> str:
    """present/total as a two-decimal string, or 'N/A' when no class has been held."""
    if total <= 0:
        return NOT_APPLICABLE
    return f"{present / total * 100:.2f}"


@dataclass(frozen=True)
class SubjectStats:
    code: str
    name: str
    present: int
    total: int
    absent: int = 0
    cancelled: int = 0
    holidays: int = 0

    @property
    def percentage(self) -> str:
        return percentage(self.present, self.total)

    @property
    def percentage_value(self) -> Optional[float]:
        """Float percentage, or None for 'N/A'."""
        return None if self.total <= 0 else round(self.present / self.total * 100, 2)

    def to_dict(self) -> dict:
        return {
            "code": self.code,
            "name": self.name,
            "present": self.present,
            "absent": self.absent,
            "cancelled": self.cancelled,
            "holidays": self.holidays,
            "total": self.total,
            "percentage": self.percentage,
        }


@dataclass(frozen=True)
class AttendanceSummary:
    overall: SubjectStats
    subjects: list[SubjectStats] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "overall": {
                "present": self.overall.present,
                "total": self.overall.total,
                "percentage": self.overall.percentage,
            },
            "subjects": [s.to_dict() for s in self.subjects],
        }
