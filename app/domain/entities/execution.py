"""Workflow execution: one run of one workflow for one trigger event.

Status follows PENDING -> RUNNING -> COMPLETED | FAILED, or
RUNNING -> CANCELLED. Terminal states never revert. Transitions are
serialized per execution so a cancellation racing with finalization
cannot produce two terminal states.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from datetime import datetime

from app.domain.entities.action import ActionExecutionResult
from app.domain.entities.trigger import TriggerEvent
from app.domain.enums import WorkflowExecutionStatus
from app.domain.exceptions import InvalidExecutionTransitionException
from app.shared.utils.datetime import elapsed_ms, utc_now

CANCELLED_MESSAGE = "Execution cancelled by user"

_ALLOWED: dict[WorkflowExecutionStatus, frozenset[WorkflowExecutionStatus]] = {
    WorkflowExecutionStatus.PENDING: frozenset({WorkflowExecutionStatus.RUNNING}),
    WorkflowExecutionStatus.RUNNING: frozenset(
        {
            WorkflowExecutionStatus.COMPLETED,
            WorkflowExecutionStatus.FAILED,
            WorkflowExecutionStatus.CANCELLED,
        }
    ),
}


@dataclass(eq=False)
class WorkflowExecution:
    """Mutable execution record; only the engine running it changes status and results."""

    id: str
    workflow_id: str
    tenant_id: str
    trigger_event: TriggerEvent
    contact_id: str | None = None
    status: WorkflowExecutionStatus = WorkflowExecutionStatus.PENDING
    started_at: datetime = field(default_factory=utc_now)
    completed_at: datetime | None = None
    action_results: list[ActionExecutionResult] = field(default_factory=list)
    error: str | None = None
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    def _transition(self, target: WorkflowExecutionStatus) -> None:
        if target not in _ALLOWED.get(self.status, frozenset()):
            raise InvalidExecutionTransitionException(
                self.id, self.status.value, target.value
            )
        self.status = target

    def start(self) -> None:
        """PENDING -> RUNNING; stamps started_at."""
        with self._lock:
            self._transition(WorkflowExecutionStatus.RUNNING)
            self.started_at = utc_now()

    def finish(
        self,
        results: list[ActionExecutionResult],
        error: str | None = None,
    ) -> bool:
        """Record results and move RUNNING -> COMPLETED, or FAILED when error is set.

        Results are always recorded. Returns False without changing status when
        the execution already reached a terminal state (e.g. it was cancelled).
        """
        with self._lock:
            self.action_results = list(results)
            if self.status.is_terminal:
                return False
            if error is None:
                self._transition(WorkflowExecutionStatus.COMPLETED)
            else:
                self._transition(WorkflowExecutionStatus.FAILED)
                self.error = error
            self.completed_at = utc_now()
            return True

    def fail(self, error: str) -> bool:
        """Move RUNNING -> FAILED with no further results (setup failure)."""
        return self.finish(self.action_results, error=error)

    def cancel(self, message: str = CANCELLED_MESSAGE) -> bool:
        """Move RUNNING -> CANCELLED. Returns False for any other current status."""
        with self._lock:
            if not self.is_running:
                return False
            self._transition(WorkflowExecutionStatus.CANCELLED)
            self.completed_at = utc_now()
            self.error = message
            return True

    @property
    def is_running(self) -> bool:
        return self.status == WorkflowExecutionStatus.RUNNING

    @property
    def duration_ms(self) -> float | None:
        """Milliseconds from start to completion, or None while unfinished."""
        if self.completed_at is None:
            return None
        return elapsed_ms(self.started_at, self.completed_at)
