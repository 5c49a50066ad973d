from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import ChatState


@dataclass(frozen=True)
class Student:
    """Domain entity: a student identified by their WhatsApp number.

    Note: plain data object (no DB access code).
    """

    student_id: int
    phone_number: str
    roll_number: str
    name: str
    semester: Optional[int]
    chat_state: ChatState = ChatState.IDLE
    temp_data: Optional[dict] = None
    created_at: Optional[datetime] = None
