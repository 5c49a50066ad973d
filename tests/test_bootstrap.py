from __future__ import annotations

from pathlib import Path

from src.attendance_bot.attendance_bot.database.bootstrap import iter_sql_statements


def test_statements_are_split_and_comments_dropped():
    sql = "-- students\nCREATE TABLE a (id INT);\n\n-- subjects\nCREATE TABLE b (id INT);\n"

    assert list(iter_sql_statements(sql)) == ["CREATE TABLE a (id INT)", "CREATE TABLE b (id INT)"]


def test_schema_file_creates_every_table():
    schema = Path(__file__).resolve().parents[1] / "database" / "schema.sql"
    statements = list(iter_sql_statements(schema.read_text(encoding="utf-8")))

    created = [s for s in statements if s.upper().startswith("CREATE TABLE")]
    for table in ("students", "subjects", "schedules", "schedule_subjects", "time_slots", "attendance_records"):
        assert any(table in s.split("(")[0] for s in created), table


def test_subject_codes_are_unique():
    schema = Path(__file__).resolve().parents[1] / "database" / "schema.sql"
    (subjects,) = [
        s for s in iter_sql_statements(schema.read_text(encoding="utf-8")) if "TABLE IF NOT EXISTS subjects" in s
    ]

    assert "UNIQUE KEY uq_subjects_code (code)" in subjects
