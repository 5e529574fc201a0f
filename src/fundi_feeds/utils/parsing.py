"""
Lenient value coercion for backend payloads.

The backend mixes types freely (``"1"``, ``1`` and ``true`` all mean yes;
numbers arrive as strings; lists arrive as JSON strings). These helpers
normalise such values. Dates and booleans degrade to a default, while
numbers that cannot be parsed raise ``ValueError`` so the caller can treat
the whole record as malformed.
"""

import json
from datetime import datetime, timezone
from typing import Any, Sequence

_TRUE_STRINGS = {"true", "1", "yes"}


def parse_bool(value: Any, default: bool = False) -> bool:
    """
    Interpret ``value`` as a boolean.

    Accepts booleans, ``1``/``1.0``, and the strings true/1/yes in any
    case. None returns ``default``; anything else is False.
    """
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value == 1
    return str(value).strip().lower() in _TRUE_STRINGS


def parse_float(value: Any, default: float = 0.0) -> float:
    """
    Convert ``value`` to float, treating None and "" as ``default``.

    Raises:
        ValueError: If the value is present but not numeric.
    """
    if value is None or value == "":
        return default
    if isinstance(value, bool):
        raise ValueError(f"Expected a number, got {value!r}")
    return float(value)


def parse_int(value: Any, default: int = 0) -> int:
    """
    Convert ``value`` to int, treating None and "" as ``default``.

    Raises:
        ValueError: If the value is present but not numeric.
    """
    return int(parse_float(value, float(default)))


def parse_str(value: Any, default: str = "") -> str:
    """Return ``value`` as a string, or ``default`` for None."""
    if value is None:
        return default
    return str(value)


def parse_optional_str(value: Any) -> str | None:
    """Return ``value`` as a string, or None for None/empty."""
    if value is None or value == "":
        return None
    return str(value)


def parse_string_list(value: Any) -> tuple[str, ...]:
    """
    Normalise a list-like value to a tuple of strings.

    Accepts real lists, JSON array strings (``'["Plumbing","Tiling"]'``)
    and comma-separated strings.
    """
    if value is None or value == "":
        return ()
    if isinstance(value, str):
        try:
            decoded = json.loads(value)
        except ValueError:
            decoded = None
        if isinstance(decoded, list):
            value = decoded
        else:
            parts = (part.strip().strip('"') for part in value.split(","))
            return tuple(part for part in parts if part)
    if isinstance(value, Sequence):
        return tuple(str(item) for item in value if item is not None)
    raise ValueError(f"Expected a list, got {type(value).__name__}")


def parse_date(date_str: Any) -> datetime | None:
    """
    Parse an ISO-8601 timestamp or m/d/Y date into an aware datetime.

    Naive values are assumed to be UTC. Returns None for empty or
    unparseable input.
    """
    if isinstance(date_str, datetime):
        parsed = date_str
    else:
        if not isinstance(date_str, str) or not date_str.strip():
            return None
        text = date_str.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            try:
                parsed = datetime.strptime(text, "%m/%d/%Y")
            except ValueError:
                return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed
