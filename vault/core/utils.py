"""
Utility helpers shared across routers/services.
"""

from __future__ import annotations

from datetime import datetime
import math
from typing import Optional


def capitalize_first(value: str) -> str:
    """Upper-case only the first character ("cards" -> "Cards")."""
    text = value or ""
    return text[:1].upper() + text[1:]


def format_amount(value: float | int) -> str:
    """
    Render a currency amount with thousands separators, the way the pages
    always displayed balances: 4700 -> "4,700", 4700.5 -> "4,700.5".
    """
    number = float(value or 0)
    if number.is_integer():
        return f"{int(number):,}"
    return f"{number:,.2f}".rstrip("0").rstrip(".")


def parse_amount(raw: object) -> Optional[float]:
    """Parse a user-typed amount; None when it is not a finite number."""
    if isinstance(raw, bool):
        return None
    if isinstance(raw, (int, float)):
        number = float(raw)
    else:
        text = str(raw or "").strip().replace(",", "")
        if not text:
            return None
        try:
            number = float(text)
        except ValueError:
            return None
    if not math.isfinite(number):
        return None
    return number


def normalize_amount(value: float) -> float | int:
    """Keep whole amounts as ints so stored numbers look like the legacy ones."""
    return int(value) if float(value).is_integer() else value


def locale_timestamp(moment: datetime | None = None) -> str:
    """
    Human-readable timestamp in the legacy "M/D/YYYY, h:mm:ss AM" shape.
    Stored as an opaque string; never parsed back.
    """
    now = moment or datetime.now()
    hour = now.hour % 12 or 12
    meridiem = "AM" if now.hour < 12 else "PM"
    return f"{now.month}/{now.day}/{now.year}, {hour}:{now:%M:%S} {meridiem}"


def plain_amount(value: float | int) -> str:
    """Amount as typed, no separators: 1500 -> "1500", 12.5 -> "12.5"."""
    return str(normalize_amount(float(value or 0)))
