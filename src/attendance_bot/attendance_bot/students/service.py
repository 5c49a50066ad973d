from __future__ import annotations

import logging
from typing import Optional

from ..common.validators import normalize_phone
from ..core.constants import DEFAULT_COUNTRY_CODE, ROLL_NUMBER_PREFIX
from ..core.enums import ChatState
from ..core.exceptions import StudentNotFoundError, ValidationError
from .model import Student
from .repository import StudentRepository

logger = logging.getLogger(__name__)


class StudentService:
    """Use cases around the student profile and conversation state."""

    def __init__(self, students: StudentRepository, *, default_country_code: str = DEFAULT_COUNTRY_CODE):
        self._students = students
        self._country_code = default_country_code

    def normalize_phone(self, phone_number: str) -> str:
        return normalize_phone(phone_number, default_country_code=self._country_code)

    def get_by_phone(self, phone_number: str) -> Optional[Student]:
        return self._students.get_by_phone(self.normalize_phone(phone_number))

    def require_by_phone(self, phone_number: str) -> Student:
        student = self.get_by_phone(phone_number)
        if not student:
            raise StudentNotFoundError("No student is registered for this number")
        return student

    def get_or_create(self, phone_number: str) -> Student:
        """First contact creates a placeholder profile waiting for a schedule."""
        phone = self.normalize_phone(phone_number)
        student = self._students.get_by_phone(phone)
        if student:
            return student

        student_id = self._students.create(
            phone_number=phone,
            roll_number=f"{ROLL_NUMBER_PREFIX}{phone}",
            name="Student",
            semester=None,
            chat_state=ChatState.AWAITING_SCHEDULE,
        )
        logger.info("Created student %s for %s", student_id, phone)
        return self._students.get_by_id(student_id)

    def register(
        self,
        phone_number: str,
        *,
        roll_number: Optional[str] = None,
        name: Optional[str] = None,
        semester: Optional[int] = None,
    ) -> Student:
        """Create or update a student from registration/schedule data.

        Missing values keep whatever the profile already has.
        """

        phone = self.normalize_phone(phone_number)
        roll_number = (roll_number or "").strip() or None
        name = (name or "").strip() or None

        if roll_number:
            owner = self._students.get_by_roll_number(roll_number)
            if owner and owner.phone_number != phone:
                raise ValidationError(f"Roll number {roll_number} is already registered to another number")

        student = self._students.get_by_phone(phone)
        if student:
            self._students.update_profile(
                student_id=student.student_id,
                roll_number=roll_number or student.roll_number,
                name=name or student.name,
                semester=semester if semester is not None else student.semester,
            )
            logger.info("Updated student %s (%s)", student.student_id, phone)
            return self._students.get_by_id(student.student_id)

        student_id = self._students.create(
            phone_number=phone,
            roll_number=roll_number or f"{ROLL_NUMBER_PREFIX}{phone}",
            name=name or "Student",
            semester=semester,
            chat_state=ChatState.IDLE,
        )
        logger.info("Registered student %s (%s)", student_id, phone)
        return self._students.get_by_id(student_id)

    def set_chat_state(self, student: Student, chat_state: ChatState, *, temp_data: Optional[dict] = None) -> None:
        self._students.set_chat_state(student_id=student.student_id, chat_state=chat_state, temp_data=temp_data)

    def reset(self, phone_number: str) -> None:
        student = self.require_by_phone(phone_number)
        self._students.delete(student.student_id)
        logger.info("Reset student %s (%s)", student.student_id, student.phone_number)
