"""Subject code matching shared by schedule ingestion and attendance recording."""
from __future__ import annotations

import re
from typing import Generic, Iterable, Optional, Tuple, TypeVar

T = TypeVar("T")

_NON_ALNUM = re.compile(r"[^0-9a-zA-Z]+")


def normalize_code(code: str) -> str:
    """'CS-101 ', 'cs 101' and 'Cs.101' all become 'cs101'."""
    return _NON_ALNUM.sub("", code or "").lower()


class SubjectMatcher(Generic[T]):
    """Resolve free-text subject codes: exact match first, then normalized match."""

    def __init__(self, items: Iterable[Tuple[str, T]]):
        self._exact: dict[str, T] = {}
        self._normalized: dict[str, T] = {}
        for code, item in items:
            self._exact.setdefault(code, item)
            key = normalize_code(code)
            if key:
                self._normalized.setdefault(key, item)

    def resolve(self, code: Optional[str]) -> Optional[T]:
        if not code:
            return None
        if code in self._exact:
            return self._exact[code]
        return self._normalized.get(normalize_code(code))

    def __len__(self) -> int:
        return len(self._exact)
