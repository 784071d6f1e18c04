"""Bounded in-memory execution history (implements IExecutionHistory).

One deque per workflow, capped at ``limit`` entries with FIFO eviction.
A single lock guards every deque and the id index, so concurrent appends
from in-flight executions never lose entries or exceed the cap.
"""

from __future__ import annotations

import threading
from collections import deque

from app.domain.entities.execution import WorkflowExecution


class InMemoryExecutionHistory:
    """Per-workflow execution history with an index by execution id."""

    def __init__(self, limit: int = 100) -> None:
        if limit < 1:
            raise ValueError("limit must be at least 1")
        self._limit = limit
        self._by_workflow: dict[str, deque[WorkflowExecution]] = {}
        self._by_id: dict[str, WorkflowExecution] = {}
        self._lock = threading.Lock()

    @property
    def limit(self) -> int:
        return self._limit

    def append(self, execution: WorkflowExecution) -> None:
        with self._lock:
            entries = self._by_workflow.setdefault(execution.workflow_id, deque())
            if len(entries) >= self._limit:
                evicted = entries.popleft()
                self._by_id.pop(evicted.id, None)
            entries.append(execution)
            self._by_id[execution.id] = execution

    def list_for_workflow(self, workflow_id: str) -> list[WorkflowExecution]:
        with self._lock:
            return list(self._by_workflow.get(workflow_id, ()))

    def find(self, execution_id: str) -> WorkflowExecution | None:
        with self._lock:
            return self._by_id.get(execution_id)

    def cancel(self, execution_id: str, message: str) -> bool:
        with self._lock:
            execution = self._by_id.get(execution_id)
            if execution is None:
                return False
            return execution.cancel(message)

    def clear(self) -> None:
        with self._lock:
            self._by_workflow.clear()
            self._by_id.clear()
