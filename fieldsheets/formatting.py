from __future__ import annotations

from datetime import date, datetime
from typing import Any, Iterable, Optional, Tuple

PLACEHOLDER = "Non renseigné"


def format_number(value: float, decimals: int = 2) -> str:
    """Fixed-point with trailing zeros removed: 7.0 -> "7", 66.5232 -> "66.52"."""
    text = f"{value:.{decimals}f}"
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    if text == "-0":
        text = "0"
    return text


def is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (list, tuple)):
        return all(is_blank(item) for item in value)
    return False


def render_field(value: Any, unit: Optional[str] = None) -> str:
    """Printable form of a survey value; every empty value prints as PLACEHOLDER."""
    if is_blank(value):
        return PLACEHOLDER
    if isinstance(value, bool):
        return "Oui" if value else "Non"
    if isinstance(value, (int, float)):
        text = format_number(float(value))
    elif isinstance(value, (list, tuple)):
        text = ", ".join(str(item).strip() for item in value if not is_blank(item))
    else:
        text = str(value).strip()
    if unit:
        return f"{text} {unit}"
    return text


def render_choice(value: Any, choices: Iterable[Tuple[str, str]]) -> str:
    if is_blank(value):
        return PLACEHOLDER
    key = str(value).strip()
    for stored, label in choices:
        if stored == key:
            return label
    return key


def _parse_datetime(value: Any) -> Optional[datetime]:
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    text = str(value).strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        return None


def render_date(value: Any) -> str:
    """dd/mm/yyyy for ISO dates; anything else is printed as entered."""
    if is_blank(value):
        return PLACEHOLDER
    parsed = _parse_datetime(value)
    if parsed is None:
        return str(value).strip()
    return parsed.strftime("%d/%m/%Y")


def render_datetime(value: Any) -> str:
    if is_blank(value):
        return PLACEHOLDER
    parsed = _parse_datetime(value)
    if parsed is None:
        return str(value).strip()
    if len(str(value).strip()) <= 10 and not isinstance(value, datetime):
        return parsed.strftime("%d/%m/%Y")
    return parsed.strftime("%d/%m/%Y %H:%M")


__all__ = [
    "PLACEHOLDER",
    "format_number",
    "is_blank",
    "render_choice",
    "render_date",
    "render_datetime",
    "render_field",
]
