from __future__ import annotations

import re
from typing import Optional

from ..core.exceptions import ValidationError


def require_non_empty(value: Optional[str], field_name: str) -> str:
    if not value or not value.strip():
        raise ValidationError(f"{field_name} es obligatorio")
    return value.strip()


def optional_digits(value: Optional[str], field_name: str, length: int) -> Optional[str]:
    """Strip non-digits from an optional identifier and check its length.

    Blank input means "not provided" and returns None.
    """

    if value is None or not str(value).strip():
        return None
    digits = re.sub(r"\D", "", str(value))
    if len(digits) != length:
        raise ValidationError(f"El {field_name} debe tener exactamente {length} dígitos")
    return digits
