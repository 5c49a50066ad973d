from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Sequence

from ..common.validators import optional_int
from ..schedules.model import ScheduleDraft, SlotDescriptor, SubjectDescriptor
from .client import AIGateway
from .model import ParsedSchedule

logger = logging.getLogger(__name__)

SCHEDULE_PROMPT = """Analyze this class schedule/timetable and extract structured data.

Extract:
1. Student info (name, roll number, semester)
2. Subject codes and full names
3. Weekly schedule with days and times (24h HH:MM)

Use the same subject code in "subjects" and in the slots. Ignore instructor codes and set room to null.

Return JSON:
{
  "studentName": "name or null",
  "rollNumber": "roll or null",
  "semester": number or null,
  "subjects": [{"code": "CS101", "name": "Computer Science", "credits": 3}],
  "schedule": [
    {"day": "Monday", "slots": [{"subject": "CS101", "startTime": "09:00", "endTime": "10:00", "room": null}]}
  ],
  "confidence": "high/medium/low"
}"""


def _text(value) -> Optional[str]:
    if value is None:
        return None
    s = str(value).strip()
    return s if s and s.lower() not in ("null", "none") else None


class ScheduleParser:
    def __init__(self, gateway: AIGateway):
        self._gateway = gateway

    def parse_images(self, image_paths: Sequence[str | Path]) -> ParsedSchedule:
        data = self._gateway.describe_images(prompt=SCHEDULE_PROMPT, image_paths=image_paths)
        return self.from_reply(data)

    def parse_text(self, text: str) -> ParsedSchedule:
        data = self._gateway.complete_json(system=SCHEDULE_PROMPT, user=text)
        return self.from_reply(data)

    @staticmethod
    def from_reply(data: dict) -> ParsedSchedule:
        # Vision replies sometimes nest student fields under "studentInfo".
        info = data.get("studentInfo") if isinstance(data.get("studentInfo"), dict) else {}

        subjects: list[SubjectDescriptor] = []
        for item in data.get("subjects") or []:
            if not isinstance(item, dict):
                continue
            code, name = _text(item.get("code")), _text(item.get("name"))
            if code and name:
                subjects.append(SubjectDescriptor(code=code, name=name, credits=optional_int(item.get("credits"))))

        slots: list[SlotDescriptor] = []
        for day_block in data.get("schedule") or []:
            if not isinstance(day_block, dict):
                continue
            day = _text(day_block.get("day")) or ""
            for slot in day_block.get("slots") or []:
                if not isinstance(slot, dict):
                    continue
                slots.append(
                    SlotDescriptor(
                        day=day,
                        start_time=_text(slot.get("startTime")) or "",
                        end_time=_text(slot.get("endTime")) or "",
                        subject_code=_text(slot.get("subject")) or "",
                    )
                )

        parsed = ParsedSchedule(
            draft=ScheduleDraft(
                semester=optional_int(data.get("semester") if data.get("semester") is not None else info.get("semester")),
                subjects=tuple(subjects),
                slots=tuple(slots),
            ),
            student_name=_text(data.get("studentName") or data.get("name") or info.get("name")),
            roll_number=_text(data.get("rollNumber") or info.get("rollNumber")),
            confidence=_text(data.get("confidence")),
        )
        logger.info(
            "Parsed schedule: %d subjects, %d slots (confidence=%s)",
            len(subjects),
            len(slots),
            parsed.confidence,
        )
        return parsed
