from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..core.enums import AttendanceStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall
from .model import AttendanceRecord
from .repository import AttendanceRepository

_COLUMNS = "record_id, student_id, subject_id, record_date, status, notes"


def _to_record(row: dict) -> AttendanceRecord:
    return AttendanceRecord(
        record_id=int(row["record_id"]),
        student_id=int(row["student_id"]),
        subject_id=int(row["subject_id"]),
        record_date=row["record_date"],
        status=AttendanceStatus(row["status"]),
        notes=row.get("notes"),
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_for_student(self, student_id: int) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM attendance_records WHERE student_id=%s ORDER BY record_date ASC, record_id ASC",
                (int(student_id),),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def list_for_date(self, student_id: int, record_date: date) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM attendance_records WHERE student_id=%s AND record_date=%s ORDER BY record_id ASC",
                (int(student_id), record_date),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def replace_record(
        self,
        *,
        student_id: int,
        subject_id: int,
        record_date: date,
        status: AttendanceStatus,
        notes: Optional[str] = None,
    ) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_records
                WHERE student_id=%s AND subject_id=%s AND record_date=%s
                FOR UPDATE
                """,
                (int(student_id), int(subject_id), record_date),
            )
            previous = [_to_record(r) for r in fetchall(cur)]
            cur.execute(
                "DELETE FROM attendance_records WHERE student_id=%s AND subject_id=%s AND record_date=%s",
                (int(student_id), int(subject_id), record_date),
            )
            cur.execute(
                """
                INSERT INTO attendance_records(student_id, subject_id, record_date, status, notes)
                VALUES(%s,%s,%s,%s,%s)
                """,
                (int(student_id), int(subject_id), record_date, status.value, notes),
            )
            return previous[0] if previous else None

    def replace_day(
        self,
        *,
        student_id: int,
        record_date: date,
        subject_ids: Sequence[int],
        status: AttendanceStatus,
        notes: Optional[str] = None,
    ) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM attendance_records WHERE student_id=%s AND record_date=%s FOR UPDATE",
                (int(student_id), record_date),
            )
            purged = [_to_record(r) for r in fetchall(cur)]
            cur.execute(
                "DELETE FROM attendance_records WHERE student_id=%s AND record_date=%s",
                (int(student_id), record_date),
            )
            if subject_ids:
                cur.executemany(
                    """
                    INSERT INTO attendance_records(student_id, subject_id, record_date, status, notes)
                    VALUES(%s,%s,%s,%s,%s)
                    """,
                    [(int(student_id), int(sid), record_date, status.value, notes) for sid in subject_ids],
                )
            return purged

    def delete_for_student(self, student_id: int) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM attendance_records WHERE student_id=%s", (int(student_id),))
            return int(cur.rowcount or 0)
