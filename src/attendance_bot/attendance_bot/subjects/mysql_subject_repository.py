from __future__ import annotations

from typing import Iterable, Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, in_clause
from .model import Subject
from .repository import SubjectRepository


def _to_subject(row: dict) -> Subject:
    return Subject(
        subject_id=int(row["subject_id"]),
        code=row["code"],
        name=row["name"],
        total_classes=int(row.get("total_classes") or 0),
    )


class MySQLSubjectRepository(SubjectRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def find_by_code(self, code: str) -> Optional[Subject]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT subject_id, code, name, total_classes
                FROM subjects
                WHERE code=%s
                ORDER BY subject_id ASC
                LIMIT 1
                """,
                (code,),
            )
            row = fetchone(cur)
            return _to_subject(row) if row else None

    def get_many(self, subject_ids: Iterable[int]) -> Sequence[Subject]:
        ids = [int(i) for i in subject_ids]
        if not ids:
            return []
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT subject_id, code, name, total_classes FROM subjects WHERE subject_id IN ({in_clause(ids)})",
                tuple(ids),
            )
            return [_to_subject(r) for r in fetchall(cur)]

    def create(self, *, code: str, name: str) -> int:
        # A concurrent ingestion may have inserted the code first; hand back that row's id.
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO subjects(code, name, total_classes) VALUES(%s,%s,0)
                ON DUPLICATE KEY UPDATE subject_id=LAST_INSERT_ID(subject_id)
                """,
                (code, name),
            )
            return int(cur.lastrowid)

    def increment_total(self, subject_id: int, delta: int = 1) -> None:
        if not delta:
            return
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE subjects SET total_classes = GREATEST(total_classes + %s, 0) WHERE subject_id=%s",
                (int(delta), int(subject_id)),
            )
