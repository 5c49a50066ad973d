"""Reply texts (WhatsApp formatting: *bold*, one item per line)."""
from __future__ import annotations

from typing import Sequence

from ..attendance.model import RecordResult
from ..core.constants import NOT_APPLICABLE
from ..core.enums import AttendanceStatus
from ..reports.model import AttendanceSummary, SubjectStats
from ..schedules.model import IngestResult
from ..students.model import Student

WELCOME = (
    "Welcome to the Attendance Tracker! Please share your class schedule as an image or PDF to get started. "
    "You can also type 'help' for assistance."
)

HELP = (
    "*Attendance Tracker Help*\n\n"
    "- Send your schedule as an image or PDF\n"
    "- Tell me which classes you attended today, e.g. 'attended CS101, missed MATH201'\n"
    "- Say 'today is a holiday' to mark the whole day off\n"
    "- 'attendance' or 'summary' shows your overall attendance\n"
    "- 'subjects' shows subject-wise attendance\n"
    "- 'reset' deletes your data so you can upload a new schedule"
)

RESET_DONE = "Your data has been reset. Please send your new schedule as an image."
AWAITING_SCHEDULE = "I'm waiting for your schedule. Please send it as an image."
NO_SCHEDULE = "I don't have your schedule yet. Please send it as an image."
EMPTY_SCHEDULE = (
    "I couldn't read any classes from your schedule. "
    "Please send a clearer image of your timetable."
)
NOTHING_TO_RECORD = "I couldn't find any class in your message. Tell me which classes you attended or missed."
AI_UNAVAILABLE = "Sorry, I'm having trouble understanding messages right now. Please try again in a moment."
IMAGE_FAILED = (
    "Sorry, I had trouble processing your schedule. "
    "Please make sure the image is clear and contains your timetable."
)
DOCUMENT_FAILED = (
    "Sorry, I couldn't read that document. "
    "Please send a PDF with selectable text, or a photo of your timetable."
)
UNSUPPORTED_MEDIA = "Please send your schedule as an image (JPEG or PNG) or a PDF."

_STATUS_LABELS = {
    AttendanceStatus.PRESENT: "Present",
    AttendanceStatus.ABSENT: "Absent",
    AttendanceStatus.CANCELLED: "Cancelled",
    AttendanceStatus.HOLIDAY: "Holiday",
}


def _pct(value: str) -> str:
    return value if value == NOT_APPLICABLE else f"{value}%"


def format_summary(summary: AttendanceSummary) -> str:
    o = summary.overall
    lines = [
        "*Attendance Summary*",
        "",
        f"Overall: {o.present}/{o.total} ({_pct(o.percentage)})",
        "",
        "*Subject-wise Breakdown:*",
    ]
    for s in summary.subjects:
        lines.append(f"- {s.code}: {s.present}/{s.total} ({_pct(s.percentage)})")
    return "\n".join(lines)


def format_subjects(summary: AttendanceSummary, *, low: Sequence[SubjectStats] = ()) -> str:
    low_codes = {s.code for s in low}
    lines = ["*Subject-wise Attendance*", ""]
    for s in summary.subjects:
        flag = "(low) " if s.code in low_codes else ""
        lines.append(f"{flag}*{s.name} ({s.code})*")
        lines.append(f"   {s.present}/{s.total} classes ({_pct(s.percentage)})")
        if s.cancelled or s.holidays:
            lines.append(f"   cancelled: {s.cancelled}, holidays: {s.holidays}")
        lines.append("")
    return "\n".join(lines).rstrip()


def format_record_result(result: RecordResult) -> str:
    day = result.day.isoformat()
    if result.is_holiday:
        if not result.applied:
            return f"Marked {day} as a holiday. You have no classes scheduled that day."
        codes = ", ".join(a.code for a in result.applied)
        return f"Marked {day} as a holiday ({codes}). No classes counted for this day."

    lines = [f"Attendance recorded for {day}:", ""]
    for a in result.applied:
        lines.append(f"- {a.name}: {_STATUS_LABELS.get(a.status, a.status.value)}")
    if result.unresolved:
        unknown = ", ".join(e.subject_code for e in result.unresolved)
        lines.append("")
        lines.append(f"I couldn't match these to your schedule: {unknown}")
    return "\n".join(lines)


def format_ingest(student: Student, result: IngestResult) -> str:
    schedule = result.schedule
    lines = [
        "Your schedule has been processed successfully!",
        "",
        f"Roll Number: {student.roll_number}",
        f"Semester: {schedule.semester if schedule.semester is not None else '-'}",
        f"Subjects: {len(schedule.subjects)}",
        f"Weekly classes: {len(schedule.time_slots)}",
    ]
    if result.dropped_slots:
        lines.append(f"Skipped {len(result.dropped_slots)} class(es) I couldn't match to a subject.")
    lines.append("")
    lines.append("You can now report your daily attendance. Just tell me which classes you attended today.")
    return "\n".join(lines)
