"""Automation workflow domain entity.

A workflow is a persisted definition owned by the workflow store: one
trigger and an ordered list of stored action objects. The automation core
reads it and never mutates it.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from app.domain.entities.trigger import WorkflowTrigger
from app.shared.utils.datetime import utc_now


@dataclass(frozen=True)
class AutomationWorkflowEntity:
    """Domain entity for a workflow definition (trigger + actions)."""

    id: str
    tenant_id: str
    name: str
    trigger: WorkflowTrigger
    actions: tuple[Mapping[str, Any], ...] = ()
    is_active: bool = True
    description: str | None = None
    created_at: datetime = field(default_factory=utc_now)
    updated_at: datetime = field(default_factory=utc_now)

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> AutomationWorkflowEntity:
        """Build from a stored definition (camelCase or snake_case keys).

        Actions are kept as stored; they are validated when a run starts.
        """
        def pick(camel: str, snake: str, default: Any = None) -> Any:
            return raw[camel] if camel in raw else raw.get(snake, default)

        actions = raw.get("actions") or ()
        return cls(
            id=str(raw["id"]),
            tenant_id=str(pick("tenantId", "tenant_id", "")),
            name=str(raw.get("name") or ""),
            trigger=WorkflowTrigger.from_dict(raw.get("trigger") or {}),
            actions=tuple(actions) if isinstance(actions, (list, tuple)) else (actions,),
            is_active=bool(pick("isActive", "is_active", True)),
            description=raw.get("description"),
        )

    def belongs_to_tenant(self, tenant_id: str) -> bool:
        """Return whether this workflow belongs to the given tenant."""
        return self.tenant_id == tenant_id

    def can_trigger_on(self, event_type: str) -> bool:
        """Return whether this workflow is active and listens for the event type."""
        return self.is_active and self.trigger.type == event_type
