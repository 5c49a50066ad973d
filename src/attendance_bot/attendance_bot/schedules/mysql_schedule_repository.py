from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import Weekday
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Schedule, ScheduleSubject, TimeSlot
from .repository import ScheduleRepository


class MySQLScheduleRepository(ScheduleRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_for_student(self, student_id: int) -> Optional[Schedule]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT schedule_id, student_id, semester, created_at FROM schedules WHERE student_id=%s",
                (int(student_id),),
            )
            head = fetchone(cur)
            if not head:
                return None
            schedule_id = int(head["schedule_id"])

            cur.execute(
                """
                SELECT subject_id, code, name, credits
                FROM schedule_subjects
                WHERE schedule_id=%s
                ORDER BY position ASC
                """,
                (schedule_id,),
            )
            subjects = tuple(
                ScheduleSubject(
                    subject_id=int(r["subject_id"]),
                    code=r["code"],
                    name=r["name"],
                    credits=int(r["credits"]) if r.get("credits") is not None else None,
                )
                for r in fetchall(cur)
            )

            cur.execute(
                """
                SELECT day, start_time, end_time, subject_id
                FROM time_slots
                WHERE schedule_id=%s
                ORDER BY position ASC
                """,
                (schedule_id,),
            )
            slots = tuple(
                TimeSlot(
                    day=Weekday(r["day"]),
                    start_time=r["start_time"],
                    end_time=r["end_time"],
                    subject_id=int(r["subject_id"]),
                )
                for r in fetchall(cur)
            )

            return Schedule(
                schedule_id=schedule_id,
                student_id=int(head["student_id"]),
                semester=int(head["semester"]) if head.get("semester") is not None else None,
                subjects=subjects,
                time_slots=slots,
                created_at=head.get("created_at"),
            )

    def replace_for_student(
        self,
        *,
        student_id: int,
        semester: Optional[int],
        subjects: Sequence[ScheduleSubject],
        time_slots: Sequence[TimeSlot],
    ) -> Schedule:
        with db_cursor(self._conn_factory) as (_, cur):
            # Child rows go with the schedule (ON DELETE CASCADE).
            cur.execute("DELETE FROM schedules WHERE student_id=%s", (int(student_id),))
            cur.execute(
                "INSERT INTO schedules(student_id, semester) VALUES(%s,%s)",
                (int(student_id), semester),
            )
            schedule_id = int(cur.lastrowid)

            if subjects:
                cur.executemany(
                    """
                    INSERT INTO schedule_subjects(schedule_id, position, subject_id, code, name, credits)
                    VALUES(%s,%s,%s,%s,%s,%s)
                    """,
                    [
                        (schedule_id, pos, s.subject_id, s.code, s.name, s.credits)
                        for pos, s in enumerate(subjects)
                    ],
                )
            if time_slots:
                cur.executemany(
                    """
                    INSERT INTO time_slots(schedule_id, position, day, start_time, end_time, subject_id)
                    VALUES(%s,%s,%s,%s,%s,%s)
                    """,
                    [
                        (schedule_id, pos, t.day.value, t.start_time, t.end_time, t.subject_id)
                        for pos, t in enumerate(time_slots)
                    ],
                )

        return Schedule(
            schedule_id=schedule_id,
            student_id=int(student_id),
            semester=semester,
            subjects=tuple(subjects),
            time_slots=tuple(time_slots),
        )

    def delete_for_student(self, student_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM schedules WHERE student_id=%s", (int(student_id),))
            return cur.rowcount > 0
