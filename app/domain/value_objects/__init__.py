"""Domain value objects: JSON payload access."""

from app.domain.value_objects.json_path import (
    MISSING,
    JsonScalar,
    JsonValue,
    is_missing,
    iter_leaves,
    resolve_path,
)

__all__ = [
    "MISSING",
    "JsonScalar",
    "JsonValue",
    "is_missing",
    "iter_leaves",
    "resolve_path",
]
