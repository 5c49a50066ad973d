from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Subject:
    """A course. total_classes counts class sessions held so far (PRESENT or ABSENT)."""

    subject_id: int
    code: str
    name: str
    total_classes: int = 0
