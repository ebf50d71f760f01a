from __future__ import annotations

import math
import re
from typing import Any

_WS = re.compile(r"\s+")


def cell_text(value: Any) -> str:
    """Read a spreadsheet cell as trimmed text; an absent cell reads as ""."""

    if value is None:
        return ""
    if isinstance(value, float):
        if math.isnan(value):
            return ""
        if value.is_integer():
            return str(int(value))
    return str(value).strip()


def collapse_whitespace(s: str) -> str:
    return _WS.sub(" ", s)


def name_key(given_names: str, surnames: str) -> str:
    """Case- and whitespace-insensitive key used to spot repeated students."""

    given = collapse_whitespace(given_names.strip()).lower()
    last = collapse_whitespace(surnames.strip()).lower()
    return f"{given}|{last}"
