"""In-memory workflow store (implements IWorkflowStore)."""

from __future__ import annotations

import threading
from collections.abc import Iterable

from app.domain.entities.workflow import AutomationWorkflowEntity


class InMemoryWorkflowStore:
    """Workflow definitions kept in insertion order; listings preserve that order."""

    def __init__(self, workflows: Iterable[AutomationWorkflowEntity] = ()) -> None:
        self._workflows: dict[str, AutomationWorkflowEntity] = {}
        self._lock = threading.Lock()
        for workflow in workflows:
            self.save(workflow)

    def save(self, workflow: AutomationWorkflowEntity) -> AutomationWorkflowEntity:
        """Insert or replace a workflow (a replaced one keeps its position)."""
        with self._lock:
            self._workflows[workflow.id] = workflow
        return workflow

    def delete(self, workflow_id: str) -> bool:
        with self._lock:
            return self._workflows.pop(workflow_id, None) is not None

    async def get_active_workflows(
        self, tenant_id: str
    ) -> list[AutomationWorkflowEntity]:
        return [
            w for w in await self.list_workflows(tenant_id) if w.is_active
        ]

    async def get_workflow(self, workflow_id: str) -> AutomationWorkflowEntity | None:
        with self._lock:
            return self._workflows.get(workflow_id)

    async def list_workflows(self, tenant_id: str) -> list[AutomationWorkflowEntity]:
        with self._lock:
            return [w for w in self._workflows.values() if w.belongs_to_tenant(tenant_id)]
