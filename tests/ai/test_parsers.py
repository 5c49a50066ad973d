from __future__ import annotations

from datetime import date
from types import SimpleNamespace

import pytest
from openai import OpenAIError

from src.attendance_bot.attendance_bot.ai.attendance_parser import DATE_QUESTION, AttendanceParser, schedule_context
from src.attendance_bot.attendance_bot.ai.client import OpenAIGateway, parse_json_reply
from src.attendance_bot.attendance_bot.ai.schedule_parser import ScheduleParser
from src.attendance_bot.attendance_bot.core.enums import AttendanceStatus, Weekday
from src.attendance_bot.attendance_bot.core.exceptions import ExternalServiceError
from src.attendance_bot.attendance_bot.schedules.model import Schedule, ScheduleSubject, TimeSlot

TODAY = date(2024, 3, 4)

SCHEDULE = Schedule(
    schedule_id=1,
    student_id=1,
    semester=4,
    subjects=(ScheduleSubject(subject_id=7, code="CS101", name="Programming"),),
    time_slots=(TimeSlot(day=Weekday.MONDAY, start_time="09:00", end_time="10:00", subject_id=7),),
)


def test_attendance_reply_is_mapped_to_entries(gateway):
    gateway.json_replies.append(
        {
            "date": "2024-03-04",
            "isHoliday": False,
            "attendance": [
                {"subjectCode": "CS101", "status": "present"},
                {"subjectCode": "MATH201", "status": "ABSENT"},
                {"subjectCode": "PHY100", "status": "LATE"},
            ],
            "needsMoreInfo": False,
        }
    )

    parsed = AttendanceParser(gateway).parse("went to cs, skipped maths", SCHEDULE, today=TODAY)

    assert parsed.day == TODAY
    assert [(e.subject_code, e.status) for e in parsed.entries] == [
        ("CS101", AttendanceStatus.PRESENT),
        ("MATH201", AttendanceStatus.ABSENT),
    ]
    assert "2024-03-04 (Monday)" in gateway.calls[0]["system"]
    assert '"CS101"' in gateway.calls[0]["system"]


def test_clarification_reply_carries_the_question(gateway):
    gateway.json_replies.append({"needsMoreInfo": True, "clarificationQuestion": "Which classes did you attend?"})

    parsed = AttendanceParser(gateway).parse("hmm", SCHEDULE, today=TODAY)

    assert parsed.needs_more_info
    assert parsed.clarification_question == "Which classes did you attend?"
    assert parsed.entries == ()


def test_relative_or_missing_dates_fall_back_sensibly():
    assert AttendanceParser.from_reply({"date": "yesterday", "isHoliday": True}, today=TODAY).day == date(2024, 3, 3)
    assert AttendanceParser.from_reply({"isHoliday": True}, today=TODAY).day == TODAY


def test_iso_timestamp_is_cut_to_its_calendar_day():
    parsed = AttendanceParser.from_reply(
        {"date": "2024-03-04T10:00:00", "attendance": [{"subjectCode": "CS101", "status": "PRESENT"}]},
        today=date(2024, 3, 9),
    )

    assert parsed.day == date(2024, 3, 4)
    assert not parsed.needs_more_info


def test_unreadable_date_asks_instead_of_assuming_today():
    parsed = AttendanceParser.from_reply(
        {"date": "the day before the exam", "attendance": [{"subjectCode": "CS101", "status": "PRESENT"}]},
        today=TODAY,
    )

    assert parsed.needs_more_info
    assert parsed.clarification_question == DATE_QUESTION
    assert parsed.entries == ()


def test_holiday_flag_is_kept():
    parsed = AttendanceParser.from_reply({"date": "2024-03-04", "isHoliday": True, "attendance": []}, today=TODAY)

    assert parsed.to_report().is_holiday


def test_schedule_context_uses_subject_codes():
    ctx = schedule_context(SCHEDULE)

    assert ctx["timeSlots"] == [{"day": "Monday", "startTime": "09:00", "endTime": "10:00", "subject": "CS101"}]


def test_schedule_reply_with_top_level_student_fields():
    parsed = ScheduleParser.from_reply(
        {
            "studentName": "Asha",
            "rollNumber": "21CS042",
            "semester": "4",
            "subjects": [{"code": "CS101", "name": "Programming", "credits": 3}, {"code": "", "name": "x"}],
            "schedule": [
                {"day": "Monday", "slots": [{"subject": "CS-101", "startTime": "09:00", "endTime": "10:00", "room": "B2"}]}
            ],
            "confidence": "high",
        }
    )

    assert (parsed.student_name, parsed.roll_number, parsed.semester) == ("Asha", "21CS042", 4)
    assert [(s.code, s.credits) for s in parsed.draft.subjects] == [("CS101", 3)]
    assert parsed.draft.slots[0].subject_code == "CS-101"
    assert parsed.confidence == "high"


def test_schedule_reply_with_nested_student_info(gateway, tmp_path):
    gateway.image_replies.append(
        {
            "studentInfo": {"name": "null", "rollNumber": "21CS042", "semester": 5},
            "subjects": [],
            "schedule": [],
        }
    )
    image = tmp_path / "timetable.png"

    parsed = ScheduleParser(gateway).parse_images([image])

    assert parsed.student_name is None
    assert parsed.roll_number == "21CS042"
    assert parsed.semester == 5
    assert gateway.calls[0]["image_paths"] == [image]


def test_fenced_json_is_accepted():
    assert parse_json_reply('```json\n{"ok": true}\n```') == {"ok": True}


@pytest.mark.parametrize("content", ["not json", "[1, 2]", ""])
def test_unusable_reply_raises(content):
    with pytest.raises(ExternalServiceError):
        parse_json_reply(content)


class _Completions:
    def __init__(self, result):
        self._result = result
        self.kwargs = None

    def create(self, **kwargs):
        self.kwargs = kwargs
        if isinstance(self._result, Exception):
            raise self._result
        message = SimpleNamespace(content=self._result)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])


def _client(result):
    completions = _Completions(result)
    return SimpleNamespace(chat=SimpleNamespace(completions=completions)), completions


def test_gateway_requests_json_from_chat_model():
    client, completions = _client('{"date": "2024-03-04"}')
    gateway = OpenAIGateway(api_key="k", chat_model="chat-model", client=client)

    assert gateway.complete_json(system="s", user="u") == {"date": "2024-03-04"}
    assert completions.kwargs["model"] == "chat-model"
    assert completions.kwargs["response_format"] == {"type": "json_object"}
    assert completions.kwargs["messages"][1] == {"role": "user", "content": "u"}


def test_gateway_wraps_transport_errors():
    client, _ = _client(OpenAIError("timed out"))
    gateway = OpenAIGateway(api_key="k", client=client)

    with pytest.raises(ExternalServiceError):
        gateway.complete_json(system="s", user="u")


def test_gateway_sends_downscaled_images(tmp_path):
    from PIL import Image

    image = tmp_path / "big.png"
    Image.new("RGB", (3600, 1200), "white").save(image)
    client, completions = _client('{"subjects": []}')
    gateway = OpenAIGateway(api_key="k", vision_model="vision-model", client=client)

    gateway.describe_images(prompt="read this", image_paths=[image])

    content = completions.kwargs["messages"][0]["content"]
    assert completions.kwargs["model"] == "vision-model"
    assert content[0] == {"type": "text", "text": "read this"}
    assert content[1]["image_url"]["url"].startswith("data:image/jpeg;base64,")


def test_gateway_rejects_unreadable_image(tmp_path):
    broken = tmp_path / "broken.png"
    broken.write_bytes(b"not an image")
    client, _ = _client("{}")

    with pytest.raises(ExternalServiceError):
        OpenAIGateway(api_key="k", client=client).describe_images(prompt="p", image_paths=[broken])
