from __future__ import annotations

from typing import Iterable, Optional, Protocol, Sequence

from .model import Subject


class SubjectRepository(Protocol):
    def find_by_code(self, code: str) -> Optional[Subject]:
        raise NotImplementedError

    def get_many(self, subject_ids: Iterable[int]) -> Sequence[Subject]:
        raise NotImplementedError

    def create(self, *, code: str, name: str) -> int:
        """Insert the subject, or return the id of the one already holding code."""

        raise NotImplementedError

    def increment_total(self, subject_id: int, delta: int = 1) -> None:
        """Atomically add delta to total_classes (never below zero)."""

        raise NotImplementedError
