from __future__ import annotations

from dataclasses import dataclass

from .ai.attendance_parser import AttendanceParser
from .ai.client import AIGateway, OpenAIGateway
from .ai.schedule_parser import ScheduleParser
from .attendance.factory import RecordingStrategyFactory
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.service import AttendanceService
from .conversation.service import ConversationService
from .core.constants import (
    DEFAULT_AI_TIMEOUT_SECONDS,
    DEFAULT_CHAT_MODEL,
    DEFAULT_COUNTRY_CODE,
    DEFAULT_LOW_ATTENDANCE_THRESHOLD,
    DEFAULT_VISION_MODEL,
)
from .database.connection import DatabaseConnection, DBConfig
from .reports.service import AttendanceSummaryService
from .schedules.mysql_schedule_repository import MySQLScheduleRepository
from .schedules.service import ScheduleService
from .students.mysql_student_repository import MySQLStudentRepository
from .students.service import StudentService
from .subjects.mysql_subject_repository import MySQLSubjectRepository


@dataclass(frozen=True)
class Container:
    student_service: StudentService
    schedule_service: ScheduleService
    attendance_service: AttendanceService
    summary_service: AttendanceSummaryService
    conversation_service: ConversationService


def build_services(
    *,
    students_repo,
    subjects_repo,
    schedules_repo,
    attendance_repo,
    gateway: AIGateway,
    default_country_code: str = DEFAULT_COUNTRY_CODE,
    low_threshold: float = DEFAULT_LOW_ATTENDANCE_THRESHOLD,
) -> Container:
    """Wire services on top of any repository implementations."""

    student_service = StudentService(students_repo, default_country_code=default_country_code)
    schedule_service = ScheduleService(schedules_repo, subjects_repo)
    attendance_service = AttendanceService(
        attendance_repo,
        subjects_repo,
        schedule_service,
        strategy_factory=RecordingStrategyFactory(),
    )
    summary_service = AttendanceSummaryService(
        attendance_repo,
        subjects_repo,
        schedule_service,
        low_threshold=low_threshold,
    )
    conversation_service = ConversationService(
        student_service,
        schedule_service,
        attendance_service,
        summary_service,
        AttendanceParser(gateway),
        ScheduleParser(gateway),
    )

    return Container(
        student_service=student_service,
        schedule_service=schedule_service,
        attendance_service=attendance_service,
        summary_service=summary_service,
        conversation_service=conversation_service,
    )


def build_container(settings) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(getattr(settings, "DB_CONFIG")))

    gateway = OpenAIGateway(
        api_key=getattr(settings, "OPENAI_API_KEY", ""),
        chat_model=getattr(settings, "OPENAI_CHAT_MODEL", DEFAULT_CHAT_MODEL),
        vision_model=getattr(settings, "OPENAI_VISION_MODEL", DEFAULT_VISION_MODEL),
        timeout=float(getattr(settings, "AI_TIMEOUT_SECONDS", DEFAULT_AI_TIMEOUT_SECONDS)),
    )

    return build_services(
        students_repo=MySQLStudentRepository(conn),
        subjects_repo=MySQLSubjectRepository(conn),
        schedules_repo=MySQLScheduleRepository(conn),
        attendance_repo=MySQLAttendanceRepository(conn),
        gateway=gateway,
        default_country_code=str(getattr(settings, "DEFAULT_COUNTRY_CODE", DEFAULT_COUNTRY_CODE)),
        low_threshold=float(getattr(settings, "LOW_ATTENDANCE_THRESHOLD", DEFAULT_LOW_ATTENDANCE_THRESHOLD)),
    )
