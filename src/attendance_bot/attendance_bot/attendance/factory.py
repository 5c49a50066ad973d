from __future__ import annotations

from dataclasses import dataclass

from .model import AttendanceReport
from .strategies.base import RecordingStrategy
from .strategies.entries_strategy import EntriesStrategy
from .strategies.holiday_strategy import HolidayStrategy


@dataclass
class RecordingStrategyFactory:
    """Factory Pattern: choose appropriate strategy based on the report."""

    def for_report(self, report: AttendanceReport) -> RecordingStrategy:
        if report.is_holiday:
            return HolidayStrategy()
        return EntriesStrategy()
