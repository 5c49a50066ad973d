"""Attendance bot package.

Students message the bot with their class schedule (image) and daily attendance
reports (free text). The package is organized by feature modules (students,
schedules, attendance, reports, ...) with a thin Flask controller layer and
service/repository layers underneath.
"""
