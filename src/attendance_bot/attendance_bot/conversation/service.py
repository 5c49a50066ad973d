from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, Sequence

from ..ai.attendance_parser import AttendanceParser
from ..ai.model import ParsedSchedule
from ..ai.schedule_parser import ScheduleParser
from ..attendance.service import AttendanceService
from ..common.datetime_utils import now_local
from ..common.documents import extract_pdf_text
from ..core.enums import ChatState, ScheduleState
from ..core.exceptions import ExternalServiceError, ScheduleNotFoundError, ValidationError
from ..reports.service import AttendanceSummaryService
from ..schedules.service import ScheduleService
from ..students.model import Student
from ..students.service import StudentService
from . import messages

logger = logging.getLogger(__name__)


class ConversationService:
    """Chat flow of the bot: one inbound message in, one reply text out.

    Nothing is written until the AI reply for the message has been parsed.
    """

    def __init__(
        self,
        students: StudentService,
        schedules: ScheduleService,
        attendance: AttendanceService,
        summaries: AttendanceSummaryService,
        attendance_parser: AttendanceParser,
        schedule_parser: ScheduleParser,
        *,
        clock: Callable = now_local,
    ):
        self._students = students
        self._schedules = schedules
        self._attendance = attendance
        self._summaries = summaries
        self._attendance_parser = attendance_parser
        self._schedule_parser = schedule_parser
        self._clock = clock

    def handle_text(self, phone_number: str, text: str) -> str:
        student = self._students.get_by_phone(phone_number)
        if not student:
            self._students.get_or_create(phone_number)
            return messages.WELCOME

        command = (text or "").strip().lower()
        if command == "help":
            return messages.HELP
        if command == "reset":
            self._attendance.clear(student.student_id)
            self._schedules.delete(student.student_id)
            self._students.reset(phone_number)
            return messages.RESET_DONE
        if command in ("attendance", "summary"):
            return self._summary_reply(student, detailed=False)
        if command == "subjects":
            return self._summary_reply(student, detailed=True)

        if student.chat_state == ChatState.AWAITING_SCHEDULE:
            return messages.AWAITING_SCHEDULE

        return self._report_attendance(student, text)

    def _summary_reply(self, student: Student, *, detailed: bool) -> str:
        try:
            summary = self._summaries.build_summary(student.student_id)
        except ScheduleNotFoundError:
            return messages.NO_SCHEDULE
        if detailed:
            return messages.format_subjects(summary, low=self._summaries.low_attendance(summary))
        return messages.format_summary(summary)

    def _report_attendance(self, student: Student, text: str) -> str:
        state = self._schedules.get_state(student.student_id)
        if state == ScheduleState.MISSING:
            return messages.NO_SCHEDULE
        if state == ScheduleState.EMPTY:
            return messages.EMPTY_SCHEDULE

        # A reply to a clarification question is parsed together with the original message.
        if student.chat_state == ChatState.AWAITING_ATTENDANCE and student.temp_data:
            pending = student.temp_data.get("pending_message")
            if pending:
                text = f"{pending}\n{text}"

        schedule = self._schedules.require(student.student_id)
        try:
            parsed = self._attendance_parser.parse(text, schedule, today=self._clock().date())
        except ExternalServiceError:
            logger.exception("Attendance parse failed for student %s", student.student_id)
            return messages.AI_UNAVAILABLE

        if parsed.needs_more_info:
            self._students.set_chat_state(
                student, ChatState.AWAITING_ATTENDANCE, temp_data={"pending_message": text}
            )
            return parsed.clarification_question

        try:
            result = self._attendance.record(student.student_id, parsed.to_report())
        except ValidationError:
            # The clarification round is over either way; later reports start fresh.
            if student.chat_state != ChatState.IDLE:
                self._students.set_chat_state(student, ChatState.IDLE)
            return messages.NOTHING_TO_RECORD

        if student.chat_state != ChatState.IDLE:
            self._students.set_chat_state(student, ChatState.IDLE)
        return messages.format_record_result(result)

    def handle_image(self, phone_number: str, image_paths: Sequence[str | Path]) -> str:
        """Read a schedule image and make it the student's schedule (replacing any previous one)."""
        try:
            parsed = self._schedule_parser.parse_images(image_paths)
        except ExternalServiceError:
            logger.exception("Schedule parse failed for %s", phone_number)
            return messages.IMAGE_FAILED
        return self._onboard(phone_number, parsed)

    def handle_document(self, phone_number: str, pdf_path: str | Path) -> str:
        """Same as handle_image, for a timetable sent as a PDF with a text layer."""
        try:
            text = extract_pdf_text(pdf_path)
        except ValidationError as e:
            logger.warning("Unreadable document from %s: %s", phone_number, e)
            return messages.DOCUMENT_FAILED
        try:
            parsed = self._schedule_parser.parse_text(text)
        except ExternalServiceError:
            logger.exception("Schedule parse failed for %s", phone_number)
            return messages.DOCUMENT_FAILED
        return self._onboard(phone_number, parsed)

    def _onboard(self, phone_number: str, parsed: ParsedSchedule) -> str:
        try:
            student = self._students.register(
                phone_number,
                roll_number=parsed.roll_number,
                name=parsed.student_name,
                semester=parsed.semester,
            )
        except ValidationError as e:
            return str(e)

        result = self._schedules.ingest(student_id=student.student_id, draft=parsed.draft)
        self._students.set_chat_state(student, ChatState.IDLE)

        if not result.schedule.time_slots:
            return messages.EMPTY_SCHEDULE
        return messages.format_ingest(student, result)

    def summary_for(self, phone_number: str) -> dict:
        student = self._students.require_by_phone(phone_number)
        return self._summaries.build_summary(student.student_id).to_dict()
