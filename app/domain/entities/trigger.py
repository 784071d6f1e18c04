"""Trigger domain types: events, conditions, and workflow triggers.

A trigger event is an immutable business fact (order placed, cart
abandoned) for one tenant. A workflow trigger pairs an event type with an
ordered list of conditions, combined with AND.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime
from types import MappingProxyType
from typing import Any

from app.domain.exceptions import ValidationException
from app.shared.utils.datetime import utc_now


@dataclass(frozen=True)
class TriggerEvent:
    """Incoming business event that may start workflows."""

    type: str
    tenant_id: str
    data: Mapping[str, Any]
    timestamp: datetime = field(default_factory=utc_now)

    def __post_init__(self) -> None:
        if not isinstance(self.data, MappingProxyType):
            object.__setattr__(self, "data", MappingProxyType(dict(self.data or {})))


@dataclass(frozen=True)
class Condition:
    """One predicate: event field (dotted path) compared to a literal value."""

    field: str
    operator: str
    value: Any

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> Condition:
        """Build from stored JSON; raises ValidationException when not an object."""
        if not isinstance(raw, Mapping):
            raise ValidationException("Condition must be an object", field="conditions")
        return cls(
            field=str(raw.get("field") or ""),
            operator=str(raw.get("operator") or ""),
            value=raw.get("value"),
        )

    def to_dict(self) -> dict[str, Any]:
        return {"field": self.field, "operator": self.operator, "value": self.value}


@dataclass(frozen=True)
class WorkflowTrigger:
    """Event type plus conditions; fires iff every condition matches."""

    type: str
    conditions: tuple[Condition, ...] = ()

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> WorkflowTrigger:
        """Build from stored trigger config ({type, conditions})."""
        if not isinstance(raw, Mapping):
            raise ValidationException("Trigger must be an object", field="trigger")
        conditions = raw.get("conditions") or []
        if not isinstance(conditions, list):
            raise ValidationException("Conditions must be an array", field="conditions")
        return cls(
            type=str(raw.get("type") or ""),
            conditions=tuple(Condition.from_dict(c) for c in conditions),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.type,
            "conditions": [c.to_dict() for c in self.conditions],
        }


@dataclass(frozen=True)
class TriggerEvaluationResult:
    """Outcome of evaluating a trigger's conditions, with per-condition diagnostics."""

    should_trigger: bool
    matched_conditions: tuple[Condition, ...] = ()
    failed_conditions: tuple[Condition, ...] = ()
