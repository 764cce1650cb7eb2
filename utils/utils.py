import math
from typing import Any, Optional


def blank(value: Optional[float]) -> float:
    """Collapse None/NaN (and any other falsy value) to 0"""
    if not value or (isinstance(value, float) and math.isnan(value)):
        return 0
    return value


def to_number(value: Any) -> float:
    """Coerce user-typed numeric input to a number, falling back to 0.

    Accepts ints/floats and text such as "1,000,000" or "$500"; empty,
    whitespace-only or non-numeric text gives 0.
    """
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, (int, float)):
        return blank(value)
    if value is None:
        return 0

    cleaned = str(value).replace(",", "").replace("$", "").strip()
    if not cleaned:
        return 0
    try:
        number = float(cleaned)
    except ValueError:
        return 0
    if math.isnan(number) or math.isinf(number):
        return 0
    return int(number) if number.is_integer() else number
