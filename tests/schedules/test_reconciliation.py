from __future__ import annotations

from datetime import date

from src.attendance_bot.attendance_bot.core.enums import ScheduleState, Weekday
from src.attendance_bot.attendance_bot.schedules.model import ScheduleDraft, SlotDescriptor, SubjectDescriptor


def _draft(subjects, slots, semester=4) -> ScheduleDraft:
    return ScheduleDraft(
        semester=semester,
        subjects=tuple(SubjectDescriptor(code=c, name=n) for c, n in subjects),
        slots=tuple(SlotDescriptor(day=d, start_time=s, end_time=e, subject_code=code) for d, s, e, code in slots),
    )


def test_every_slot_references_a_listed_subject(container, student):
    draft = _draft(
        [("CS101", "Programming"), ("MATH201", "Linear Algebra")],
        [
            ("Monday", "09:00", "10:00", "CS101"),
            ("Monday", "11:00", "12:00", "MATH201"),
            ("Tuesday", "09:00", "10:00", "PHY100"),
        ],
    )

    result = container.schedule_service.ingest(student_id=student.student_id, draft=draft)

    listed = {s.subject_id for s in result.schedule.subjects}
    assert len(result.schedule.time_slots) == 2
    assert all(slot.subject_id in listed for slot in result.schedule.time_slots)
    assert [d.subject_code for d in result.dropped_slots] == ["PHY100"]


def test_normalized_code_match_keeps_slot(container, student, subjects_repo):
    draft = _draft([("CS101", "Programming")], [("Monday", "09:00", "10:00", "cs-101")])

    result = container.schedule_service.ingest(student_id=student.student_id, draft=draft)

    cs101 = subjects_repo.find_by_code("CS101")
    assert result.dropped_slots == []
    assert result.schedule.time_slots[0].subject_id == cs101.subject_id
    assert result.schedule.time_slots[0].day == Weekday.MONDAY


def test_subjects_are_created_once_and_reused(container, student, subjects_repo):
    draft = _draft([("CS101", "Programming")], [("Mon", "09:00", "10:00", "CS101")])

    container.schedule_service.ingest(student_id=student.student_id, draft=draft)
    other = container.student_service.register("9000000001", roll_number="R-002")
    container.schedule_service.ingest(student_id=other.student_id, draft=draft)

    assert len(subjects_repo.by_id) == 1


def test_reupload_replaces_previous_schedule(container, student):
    first = _draft([("CS101", "Programming")], [("Monday", "09:00", "10:00", "CS101")])
    second = _draft([("BIO110", "Biology")], [("Friday", "14:00", "15:00", "BIO110")])

    container.schedule_service.ingest(student_id=student.student_id, draft=first)
    container.schedule_service.ingest(student_id=student.student_id, draft=second)

    schedule = container.schedule_service.require(student.student_id)
    assert [s.code for s in schedule.subjects] == ["BIO110"]
    assert [t.day for t in schedule.time_slots] == [Weekday.FRIDAY]


def test_empty_extraction_is_distinct_from_missing_schedule(container, student):
    assert container.schedule_service.get_state(student.student_id) == ScheduleState.MISSING

    result = container.schedule_service.ingest(student_id=student.student_id, draft=ScheduleDraft())

    assert result.schedule.time_slots == ()
    assert container.schedule_service.get_state(student.student_id) == ScheduleState.EMPTY


def test_unknown_day_and_missing_times_are_dropped(container, student):
    draft = _draft(
        [("CS101", "Programming")],
        [("Funday", "09:00", "10:00", "CS101"), ("Monday", "", "10:00", "CS101")],
    )

    result = container.schedule_service.ingest(student_id=student.student_id, draft=draft)

    assert result.schedule.time_slots == ()
    assert len(result.dropped_slots) == 2


def test_subjects_on_returns_distinct_subjects_for_weekday(container, student):
    draft = _draft(
        [("CS101", "Programming"), ("MATH201", "Linear Algebra")],
        [
            ("Monday", "09:00", "10:00", "CS101"),
            ("Monday", "11:00", "12:00", "MATH201"),
            ("Monday", "14:00", "15:00", "CS101"),
            ("Tuesday", "09:00", "10:00", "MATH201"),
        ],
    )
    result = container.schedule_service.ingest(student_id=student.student_id, draft=draft)

    monday = container.schedule_service.subjects_on(result.schedule, date(2024, 3, 4))

    assert [s.code for s in monday] == ["CS101", "MATH201"]


def test_slot_times_are_stored_as_24_hour_clock(container, student, schedules_repo):
    draft = _draft(
        [("CS101", "Programming")],
        [("Monday", "9:00 AM", "10:00:00 AM", "CS101"), ("Tuesday", "2 pm", "15:00:00", "CS101")],
    )

    container.schedule_service.ingest(student_id=student.student_id, draft=draft)

    stored = schedules_repo.get_for_student(student.student_id)
    assert [(t.start_time, t.end_time) for t in stored.time_slots] == [("09:00", "10:00"), ("14:00", "15:00")]
    assert container.schedule_service.get_state(student.student_id) == ScheduleState.READY


def test_unreadable_slot_time_is_dropped(container, student):
    draft = _draft(
        [("CS101", "Programming")],
        [("Monday", "after lunch", "10:00", "CS101"), ("Monday", "11:00", "12:00", "CS101")],
    )

    result = container.schedule_service.ingest(student_id=student.student_id, draft=draft)

    assert [t.start_time for t in result.schedule.time_slots] == ["11:00"]
    assert [s.start_time for s in result.dropped_slots] == ["after lunch"]
