from __future__ import annotations

from datetime import date
from itertools import count
from typing import Optional

import pytest

from src.attendance_bot.attendance_bot.attendance.model import AttendanceRecord
from src.attendance_bot.attendance_bot.container import build_services
from src.attendance_bot.attendance_bot.core.enums import AttendanceStatus, ChatState
from src.attendance_bot.attendance_bot.schedules.model import Schedule
from src.attendance_bot.attendance_bot.students.model import Student
from src.attendance_bot.attendance_bot.subjects.model import Subject


class InMemoryStudents:
    def __init__(self):
        self.by_id: dict[int, Student] = {}
        self._ids = count(1)

    def get_by_id(self, student_id: int) -> Optional[Student]:
        return self.by_id.get(int(student_id))

    def get_by_phone(self, phone_number: str) -> Optional[Student]:
        return next((s for s in self.by_id.values() if s.phone_number == phone_number), None)

    def get_by_roll_number(self, roll_number: str) -> Optional[Student]:
        return next((s for s in self.by_id.values() if s.roll_number == roll_number), None)

    def create(self, *, phone_number, roll_number, name, semester, chat_state) -> int:
        sid = next(self._ids)
        self.by_id[sid] = Student(
            student_id=sid,
            phone_number=phone_number,
            roll_number=roll_number,
            name=name,
            semester=semester,
            chat_state=chat_state,
        )
        return sid

    def update_profile(self, *, student_id, roll_number, name, semester) -> bool:
        s = self.by_id[student_id]
        self.by_id[student_id] = Student(
            student_id=s.student_id,
            phone_number=s.phone_number,
            roll_number=roll_number,
            name=name,
            semester=semester,
            chat_state=s.chat_state,
            temp_data=s.temp_data,
        )
        return True

    def set_chat_state(self, *, student_id, chat_state: ChatState, temp_data=None) -> bool:
        s = self.by_id[student_id]
        self.by_id[student_id] = Student(
            student_id=s.student_id,
            phone_number=s.phone_number,
            roll_number=s.roll_number,
            name=s.name,
            semester=s.semester,
            chat_state=chat_state,
            temp_data=temp_data,
        )
        return True

    def delete(self, student_id: int) -> bool:
        return self.by_id.pop(int(student_id), None) is not None


class InMemorySubjects:
    def __init__(self):
        self.by_id: dict[int, Subject] = {}
        self._ids = count(1)
        self.increments: list[tuple[int, int]] = []

    def find_by_code(self, code: str) -> Optional[Subject]:
        return next((s for s in self.by_id.values() if s.code == code), None)

    def get_many(self, subject_ids):
        return [self.by_id[i] for i in subject_ids if i in self.by_id]

    def create(self, *, code: str, name: str) -> int:
        existing = self.find_by_code(code)
        if existing:
            return existing.subject_id
        sid = next(self._ids)
        self.by_id[sid] = Subject(subject_id=sid, code=code, name=name, total_classes=0)
        return sid

    def increment_total(self, subject_id: int, delta: int = 1) -> None:
        self.increments.append((subject_id, delta))
        s = self.by_id[subject_id]
        self.by_id[subject_id] = Subject(s.subject_id, s.code, s.name, max(s.total_classes + delta, 0))

    def set_total(self, code: str, total: int) -> None:
        s = self.find_by_code(code)
        self.by_id[s.subject_id] = Subject(s.subject_id, s.code, s.name, total)


class InMemorySchedules:
    def __init__(self):
        self.by_student: dict[int, Schedule] = {}
        self._ids = count(1)

    def get_for_student(self, student_id: int) -> Optional[Schedule]:
        return self.by_student.get(student_id)

    def replace_for_student(self, *, student_id, semester, subjects, time_slots) -> Schedule:
        schedule = Schedule(
            schedule_id=next(self._ids),
            student_id=student_id,
            semester=semester,
            subjects=tuple(subjects),
            time_slots=tuple(time_slots),
        )
        self.by_student[student_id] = schedule
        return schedule

    def delete_for_student(self, student_id: int) -> bool:
        return self.by_student.pop(student_id, None) is not None


class InMemoryAttendance:
    def __init__(self):
        self.records: list[AttendanceRecord] = []
        self._ids = count(1)

    def list_for_student(self, student_id: int):
        return [r for r in self.records if r.student_id == student_id]

    def list_for_date(self, student_id: int, record_date: date):
        return [r for r in self.records if r.student_id == student_id and r.record_date == record_date]

    def _insert(self, student_id, subject_id, record_date, status, notes):
        self.records.append(
            AttendanceRecord(
                record_id=next(self._ids),
                student_id=student_id,
                subject_id=subject_id,
                record_date=record_date,
                status=status,
                notes=notes,
            )
        )

    def replace_record(self, *, student_id, subject_id, record_date, status: AttendanceStatus, notes=None):
        previous = [
            r
            for r in self.records
            if r.student_id == student_id and r.subject_id == subject_id and r.record_date == record_date
        ]
        self.records = [r for r in self.records if r not in previous]
        self._insert(student_id, subject_id, record_date, status, notes)
        return previous[0] if previous else None

    def replace_day(self, *, student_id, record_date, subject_ids, status, notes=None):
        purged = self.list_for_date(student_id, record_date)
        self.records = [r for r in self.records if r not in purged]
        for sid in subject_ids:
            self._insert(student_id, sid, record_date, status, notes)
        return purged

    def delete_for_student(self, student_id: int) -> int:
        before = len(self.records)
        self.records = [r for r in self.records if r.student_id != student_id]
        return before - len(self.records)


class FakeGateway:
    """Returns canned JSON replies and remembers what it was asked."""

    def __init__(self):
        self.json_replies: list = []
        self.image_replies: list = []
        self.calls: list[dict] = []

    def _next(self, queue: list):
        reply = queue.pop(0)
        if isinstance(reply, Exception):
            raise reply
        return reply

    def complete_json(self, *, system: str, user: str) -> dict:
        self.calls.append({"system": system, "user": user})
        return self._next(self.json_replies)

    def describe_images(self, *, prompt: str, image_paths) -> dict:
        self.calls.append({"prompt": prompt, "image_paths": list(image_paths)})
        return self._next(self.image_replies)


@pytest.fixture
def students_repo():
    return InMemoryStudents()


@pytest.fixture
def subjects_repo():
    return InMemorySubjects()


@pytest.fixture
def schedules_repo():
    return InMemorySchedules()


@pytest.fixture
def attendance_repo():
    return InMemoryAttendance()


@pytest.fixture
def gateway():
    return FakeGateway()


@pytest.fixture
def container(students_repo, subjects_repo, schedules_repo, attendance_repo, gateway):
    return build_services(
        students_repo=students_repo,
        subjects_repo=subjects_repo,
        schedules_repo=schedules_repo,
        attendance_repo=attendance_repo,
        gateway=gateway,
    )


@pytest.fixture
def student(container):
    return container.student_service.register("9876543210", roll_number="R-001", name="Asha", semester=4)


def _pdf_bytes(text: str) -> bytes:
    """Single-page PDF whose text layer is `text` (Helvetica, one line)."""
    stream = f"BT /F1 12 Tf 72 720 Td ({text}) Tj ET".encode("latin-1")
    objects = [
        b"<< /Type /Catalog /Pages 2 0 R >>",
        b"<< /Type /Pages /Kids [3 0 R] /Count 1 >>",
        b"<< /Type /Page /Parent 2 0 R /MediaBox [0 0 612 792] /Contents 4 0 R"
        b" /Resources << /Font << /F1 5 0 R >> >> >>",
        b"<< /Length %d >>\nstream\n" % len(stream) + stream + b"\nendstream",
        b"<< /Type /Font /Subtype /Type1 /BaseFont /Helvetica >>",
    ]
    out = bytearray(b"%PDF-1.4\n")
    offsets = []
    for number, body in enumerate(objects, start=1):
        offsets.append(len(out))
        out += b"%d 0 obj\n" % number + body + b"\nendobj\n"
    xref = len(out)
    out += b"xref\n0 %d\n" % (len(objects) + 1)
    out += b"0000000000 65535 f \n"
    for offset in offsets:
        out += b"%010d 00000 n \n" % offset
    out += b"trailer\n<< /Size %d /Root 1 0 R >>\nstartxref\n%d\n%%%%EOF\n" % (len(objects) + 1, xref)
    return bytes(out)


@pytest.fixture
def pdf_bytes():
    return _pdf_bytes
