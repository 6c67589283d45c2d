"""
Tri-state compatibility flags (good with kids/dogs/cats).

Canonical form is Optional[bool]: True, False, or None for unknown.
"""

from typing import Any, Optional

_TRUE = {"yes", "true", "1", "y", "t"}
_FALSE = {"no", "false", "0", "n", "f"}
_UNKNOWN = {"", "unknown", "null", "none"}


def coerce_tristate(value: Any) -> Optional[bool]:
    """
    Normalize any accepted tri-state representation.

    Accepts booleans, None, the integers 0/1 (how SQLite stores booleans)
    and the strings yes/no, true/false, unknown or empty, case-insensitively.

    Raises:
        ValueError: for anything else
    """
    if value is None or isinstance(value, bool):
        return value
    if isinstance(value, int):
        if value in (0, 1):
            return bool(value)
        raise ValueError(f"Invalid tri-state value: {value!r}")
    if isinstance(value, str):
        token = value.strip().lower()
        if token in _TRUE:
            return True
        if token in _FALSE:
            return False
        if token in _UNKNOWN:
            return None
    raise ValueError(f"Invalid tri-state value: {value!r}")
