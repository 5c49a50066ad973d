from __future__ import annotations

from typing import Optional, Protocol

from ..core.enums import ChatState
from .model import Student


class StudentRepository(Protocol):
    """Repository interface for Student.

    Note (DIP): the service layer depends on this interface, not on a concrete DB.
    """

    def get_by_id(self, student_id: int) -> Optional[Student]:
        raise NotImplementedError

    def get_by_phone(self, phone_number: str) -> Optional[Student]:
        raise NotImplementedError

    def get_by_roll_number(self, roll_number: str) -> Optional[Student]:
        raise NotImplementedError

    def create(
        self,
        *,
        phone_number: str,
        roll_number: str,
        name: str,
        semester: Optional[int],
        chat_state: ChatState,
    ) -> int:
        raise NotImplementedError

    def update_profile(self, *, student_id: int, roll_number: str, name: str, semester: Optional[int]) -> bool:
        raise NotImplementedError

    def set_chat_state(self, *, student_id: int, chat_state: ChatState, temp_data: Optional[dict] = None) -> bool:
        raise NotImplementedError

    def delete(self, student_id: int) -> bool:
        """Hard delete (explicit reset only). Cascades to schedule and records."""

        raise NotImplementedError
