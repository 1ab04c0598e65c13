from __future__ import annotations

import math
from typing import Any, Optional


# Largest id a 64-bit INTEGER column can hold.
MAX_ID = 2**63 - 1


def clamp(x: int, lo: int, hi: int) -> int:
    return max(lo, min(hi, x))


def parse_positive_int(value: Any) -> Optional[int]:
    """Strict positive integer from a header/query string; None when invalid."""
    if value is None or isinstance(value, bool):
        return None
    text = str(value).strip()
    digits = text[1:] if text.startswith("+") else text
    if not digits.isdecimal():
        return None
    number = int(digits)
    return number if 0 < number <= MAX_ID else None


def int_or_none(value: Optional[str]) -> Optional[int]:
    if value is None:
        return None
    try:
        number = int(value.strip())
    except ValueError:
        return None
    return number if -MAX_ID - 1 <= number <= MAX_ID else None


def is_valid_amount(x: Any) -> bool:
    if isinstance(x, bool) or not isinstance(x, (int, float)):
        return False
    return math.isfinite(x) and x >= 0
