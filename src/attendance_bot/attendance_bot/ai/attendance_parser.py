from __future__ import annotations

import json
import logging
from datetime import date
from typing import Optional

from ..attendance.model import AttendanceEntry
from ..common.datetime_utils import now_local, parse_date_text
from ..core.enums import AttendanceStatus
from ..schedules.model import Schedule
from .client import AIGateway
from .model import ParsedAttendance

logger = logging.getLogger(__name__)

_REPORTABLE = {AttendanceStatus.PRESENT, AttendanceStatus.ABSENT, AttendanceStatus.CANCELLED}

SYSTEM_PROMPT = """You are an attendance tracking assistant that parses student messages about their attendance.

Current date: {today} ({weekday})
Student schedule: {context}

Extract:
1. The date the student is reporting for (today unless they say otherwise)
2. Which classes they attended or missed
3. Any classes that were cancelled
4. Whether the entire day was a holiday

Use only subject codes from the schedule. Reply with JSON:
{{
  "date": "YYYY-MM-DD",
  "isHoliday": boolean,
  "attendance": [{{"subjectCode": "string", "status": "PRESENT|ABSENT|CANCELLED"}}],
  "needsMoreInfo": boolean,
  "clarificationQuestion": "string (only if needsMoreInfo is true)"
}}"""

DATE_QUESTION = "Which date are you reporting for? You can say 'today', 'yesterday' or a date like 2024-03-04."


def schedule_context(schedule: Schedule) -> dict:
    """Compact view of a schedule for the prompt."""
    codes = {s.subject_id: s.code for s in schedule.subjects}
    return {
        "subjects": [{"code": s.code, "name": s.name} for s in schedule.subjects],
        "timeSlots": [
            {
                "day": t.day.value,
                "startTime": t.start_time,
                "endTime": t.end_time,
                "subject": codes.get(t.subject_id),
            }
            for t in schedule.time_slots
        ],
    }


class AttendanceParser:
    def __init__(self, gateway: AIGateway):
        self._gateway = gateway

    def parse(self, text: str, schedule: Schedule, *, today: Optional[date] = None) -> ParsedAttendance:
        today = today or now_local().date()
        system = SYSTEM_PROMPT.format(
            today=today.isoformat(),
            weekday=today.strftime("%A"),
            context=json.dumps(schedule_context(schedule)),
        )
        data = self._gateway.complete_json(system=system, user=text)
        return self.from_reply(data, today=today)

    @staticmethod
    def from_reply(data: dict, *, today: date) -> ParsedAttendance:
        date_text = str(data.get("date") or "").strip()
        day = parse_date_text(date_text, today=today) if date_text else today
        if day is None:
            # An unreadable date is asked about, never replaced by today.
            logger.warning("Unreadable date %r in attendance reply", date_text)
            return ParsedAttendance(day=today, needs_more_info=True, clarification_question=DATE_QUESTION)

        if data.get("needsMoreInfo"):
            question = (data.get("clarificationQuestion") or "").strip()
            return ParsedAttendance(
                day=day,
                needs_more_info=True,
                clarification_question=question or "Could you tell me which classes you attended?",
            )

        entries: list[AttendanceEntry] = []
        for item in data.get("attendance") or []:
            if not isinstance(item, dict):
                continue
            code = str(item.get("subjectCode") or "").strip()
            status_s = str(item.get("status") or "").strip().upper()
            try:
                status = AttendanceStatus(status_s)
            except ValueError:
                status = None
            if not code or status not in _REPORTABLE:
                logger.warning("Ignoring attendance item %r", item)
                continue
            entries.append(AttendanceEntry(subject_code=code, status=status, notes=item.get("notes") or None))

        return ParsedAttendance(day=day, is_holiday=bool(data.get("isHoliday")), entries=tuple(entries))
