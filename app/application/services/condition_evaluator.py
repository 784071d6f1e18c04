"""Condition evaluation: one predicate against a nested event payload.

Field lookup goes through resolve_path, so an absent field is MISSING and
distinct from a present null. MISSING matches only not_equals and not_in.
"""

from __future__ import annotations

import math
from collections.abc import Callable, Mapping, Sequence
from typing import Any

from app.domain.entities.trigger import Condition
from app.domain.enums import ConditionOperator
from app.domain.value_objects.json_path import MISSING, resolve_path
from app.shared.telemetry.logging import get_logger

logger = get_logger(__name__)


def _is_list(value: Any) -> bool:
    return isinstance(value, Sequence) and not isinstance(value, (str, bytes))


def strict_equals(left: Any, right: Any) -> bool:
    """JSON equality where booleans never equal numbers (1 == 1.0 still holds)."""
    if left is MISSING or right is MISSING:
        return False
    if isinstance(left, bool) or isinstance(right, bool):
        return isinstance(left, bool) and isinstance(right, bool) and left == right
    if isinstance(left, Mapping) and isinstance(right, Mapping):
        return left.keys() == right.keys() and all(
            strict_equals(left[k], right[k]) for k in left
        )
    if _is_list(left) and _is_list(right):
        return len(left) == len(right) and all(
            strict_equals(a, b) for a, b in zip(left, right)
        )
    if _is_list(left) or _is_list(right):
        return False
    return left == right


def to_number(value: Any) -> float:
    """Coerce a JSON value to float; anything non-numeric becomes NaN."""
    if isinstance(value, bool):
        return 1.0 if value else 0.0
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str) and value.strip():
        try:
            return float(value.strip())
        except ValueError:
            return math.nan
    return math.nan


def _as_list(value: Any) -> list[Any]:
    return list(value) if _is_list(value) else [value]


def _equals(field_value: Any, expected: Any) -> bool:
    return strict_equals(field_value, expected)


def _not_equals(field_value: Any, expected: Any) -> bool:
    return not strict_equals(field_value, expected)


def _contains(field_value: Any, expected: Any) -> bool:
    if isinstance(field_value, str):
        return isinstance(expected, str) and expected.lower() in field_value.lower()
    if _is_list(field_value):
        return any(strict_equals(item, expected) for item in field_value)
    return False


def _greater_than(field_value: Any, expected: Any) -> bool:
    # NaN on either side compares false.
    return to_number(field_value) > to_number(expected)


def _less_than(field_value: Any, expected: Any) -> bool:
    return to_number(field_value) < to_number(expected)


def _in(field_value: Any, expected: Any) -> bool:
    if field_value is MISSING:
        return False
    return any(strict_equals(field_value, item) for item in _as_list(expected))


def _not_in(field_value: Any, expected: Any) -> bool:
    return not _in(field_value, expected)


_OPERATORS: dict[str, Callable[[Any, Any], bool]] = {
    ConditionOperator.EQUALS.value: _equals,
    ConditionOperator.NOT_EQUALS.value: _not_equals,
    ConditionOperator.CONTAINS.value: _contains,
    ConditionOperator.GREATER_THAN.value: _greater_than,
    ConditionOperator.LESS_THAN.value: _less_than,
    ConditionOperator.IN.value: _in,
    ConditionOperator.NOT_IN.value: _not_in,
}


def evaluate_condition(condition: Condition, payload: Mapping[str, Any]) -> bool:
    """Return whether the condition holds for the payload.

    Unknown operators (only possible in unvalidated stored data) evaluate
    false and are logged.
    """
    operator = _OPERATORS.get(condition.operator)
    if operator is None:
        logger.warning(
            "Unknown condition operator %r on field %r; condition fails",
            condition.operator,
            condition.field,
        )
        return False
    return operator(resolve_path(payload, condition.field), condition.value)
