from __future__ import annotations

from typing import Optional

from ..core.enums import ChatState
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, dump_json, fetchone, load_json
from .model import Student
from .repository import StudentRepository

_COLUMNS = "student_id, phone_number, roll_number, name, semester, chat_state, temp_data, created_at"


def _to_student(row: dict) -> Student:
    return Student(
        student_id=int(row["student_id"]),
        phone_number=row["phone_number"],
        roll_number=row["roll_number"],
        name=row["name"],
        semester=int(row["semester"]) if row.get("semester") is not None else None,
        chat_state=ChatState(row.get("chat_state") or ChatState.IDLE.value),
        temp_data=load_json(row.get("temp_data")),
        created_at=row.get("created_at"),
    )


class MySQLStudentRepository(StudentRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def _get_where(self, where: str, value) -> Optional[Student]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM students WHERE {where}=%s", (value,))
            row = fetchone(cur)
            return _to_student(row) if row else None

    def get_by_id(self, student_id: int) -> Optional[Student]:
        return self._get_where("student_id", int(student_id))

    def get_by_phone(self, phone_number: str) -> Optional[Student]:
        return self._get_where("phone_number", phone_number)

    def get_by_roll_number(self, roll_number: str) -> Optional[Student]:
        return self._get_where("roll_number", roll_number)

    def create(
        self,
        *,
        phone_number: str,
        roll_number: str,
        name: str,
        semester: Optional[int],
        chat_state: ChatState,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO students(phone_number, roll_number, name, semester, chat_state)
                VALUES(%s,%s,%s,%s,%s)
                """,
                (phone_number, roll_number, name, semester, chat_state.value),
            )
            return int(cur.lastrowid)

    def update_profile(self, *, student_id: int, roll_number: str, name: str, semester: Optional[int]) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE students SET roll_number=%s, name=%s, semester=%s WHERE student_id=%s",
                (roll_number, name, semester, int(student_id)),
            )
            return cur.rowcount > 0

    def set_chat_state(self, *, student_id: int, chat_state: ChatState, temp_data: Optional[dict] = None) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE students SET chat_state=%s, temp_data=%s WHERE student_id=%s",
                (chat_state.value, dump_json(temp_data), int(student_id)),
            )
            return cur.rowcount > 0

    def delete(self, student_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM students WHERE student_id=%s", (int(student_id),))
            return cur.rowcount > 0
