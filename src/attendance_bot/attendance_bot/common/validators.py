from __future__ import annotations

import re
from typing import Optional

from ..core.exceptions import ValidationError


def require_non_empty(value: str, field_name: str) -> str:
    if not value or not value.strip():
        raise ValidationError(f"{field_name} is required")
    return value.strip()


def normalize_phone(value: str, *, default_country_code: str) -> str:
    """Normalize a WhatsApp handle ('+91 98765-43210', '919876543210@c.us') to digits."""
    raw = require_non_empty(value, "Phone number")
    raw = raw.split("@", 1)[0]
    digits = re.sub(r"\D", "", raw)
    if not digits:
        raise ValidationError("Phone number is invalid")
    if len(digits) == 10:
        digits = default_country_code + digits
    return digits


def optional_int(value) -> Optional[int]:
    if value is None or isinstance(value, bool):
        return None
    try:
        return int(str(value).strip())
    except ValueError:
        return None
