"""Safe access into nested API object graphs."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

_MISSING = object()


def get_path(obj: Any, path: str | Sequence[str | int], default: Any = None) -> Any:
    """Look up a dotted path inside nested mappings and lists.

    Each hop is a mapping key, or an integer index when the current value
    is a list. Any missing key, out-of-range index, or non-container value
    along the way yields ``default`` instead of raising.

    Args:
        obj: Root object, usually a dict decoded from the API server.
        path: Dotted string (``"status.conditions.0.type"``) or a sequence
            of keys/indices.
        default: Value returned when the path cannot be resolved.

    Returns:
        The value at the path, or ``default``.
    """
    parts: Sequence[str | int] = path.split(".") if isinstance(path, str) else path

    current = obj
    for part in parts:
        if isinstance(current, Mapping):
            current = current.get(part, _MISSING)
        elif isinstance(current, list):
            try:
                current = current[int(part)]
            except (ValueError, IndexError):
                return default
        else:
            return default

        if current is _MISSING or current is None:
            return default

    return current


def get_typed(obj: Any, path: str | Sequence[str | int], expected: type | tuple[type, ...]) -> Any:
    """Like :func:`get_path`, but return None unless the value is of ``expected`` type."""
    value = get_path(obj, path)
    if isinstance(value, expected):
        return value
    return None
