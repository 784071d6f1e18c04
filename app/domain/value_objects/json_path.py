"""Dotted-path access into loosely-typed JSON payloads.

Event and contact payloads arrive as nested mappings of JSON values. Lookups
use an explicit accessor that distinguishes an absent key (MISSING) from a
present JSON null (None).
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any, Final, Union

JsonScalar = Union[str, int, float, bool, None]
JsonValue = Union[JsonScalar, Mapping[str, Any], Sequence[Any]]


class _Missing:
    """Sentinel type for a path that does not resolve."""

    _instance: "_Missing | None" = None

    def __new__(cls) -> "_Missing":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False


MISSING: Final = _Missing()

PATH_SEPARATOR = "."


def is_missing(value: object) -> bool:
    """Return whether value is the MISSING sentinel."""
    return value is MISSING


def split_path(path: str) -> list[str]:
    """Split a dotted path into segments (empty segments are kept so they never match)."""
    return path.split(PATH_SEPARATOR)


def _step(current: Any, segment: str) -> Any:
    if isinstance(current, Mapping):
        return current.get(segment, MISSING)
    if isinstance(current, Sequence) and not isinstance(current, (str, bytes)):
        if not (segment.isascii() and segment.isdigit()):
            return MISSING
        index = int(segment)
        return current[index] if index < len(current) else MISSING
    return MISSING


def resolve_path(payload: Any, path: str) -> JsonValue | _Missing:
    """Walk payload along a dotted path.

    Mapping segments are looked up by key, sequence segments by
    non-negative integer index. Any absent segment, or a segment applied to
    a scalar (including null), resolves to MISSING.

    Args:
        payload: Root JSON value (usually the event data mapping).
        path: Dotted path such as "customer.email" or "line_items.0.sku".

    Returns:
        The value found, or MISSING.
    """
    if not path:
        return MISSING
    current: Any = payload
    for segment in split_path(path):
        current = _step(current, segment)
        if current is MISSING:
            return MISSING
    return current


def iter_leaves(value: Any, prefix: str = "") -> list[tuple[str, JsonValue]]:
    """Return (dotted_path, leaf) pairs for every non-container value under value.

    Mappings and lists are traversed (list items by index); scalars and
    nulls are leaves. An empty container produces no leaves.
    """
    leaves: list[tuple[str, JsonValue]] = []
    if isinstance(value, Mapping):
        items = ((str(k), v) for k, v in value.items())
    elif isinstance(value, Sequence) and not isinstance(value, (str, bytes)):
        items = ((str(i), v) for i, v in enumerate(value))
    else:
        return [(prefix, value)]
    for key, child in items:
        child_path = f"{prefix}{PATH_SEPARATOR}{key}" if prefix else key
        leaves.extend(iter_leaves(child, child_path))
    return leaves
