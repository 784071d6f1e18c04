"""Service interfaces (ports) for the application layer.

Protocols define contracts for delivery, subscription checks, delay
scheduling, and the shared execution history.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from app.application.dtos.automation import (
        DispatchResult,
        EmailContent,
        SmsContent,
    )
    from app.domain.entities.execution import WorkflowExecution
    from app.domain.enums import MessageChannel


# Campaign dispatcher interface
class ICampaignDispatcher(Protocol):
    """Protocol for creating and sending a single-recipient campaign."""

    async def send_single_recipient(
        self,
        channel: MessageChannel,
        content: EmailContent | SmsContent,
        recipient: str,
    ) -> DispatchResult:
        """Send content to one recipient; failed_count > 0 means delivery failed."""
        ...


# Subscription guard interface
class ISubscriptionGuard(Protocol):
    """Protocol for checking whether a tenant may run automations."""

    async def is_tenant_active(self, tenant_id: str) -> bool:
        ...


# Delay scheduler interface
class IDelayScheduler(Protocol):
    """Protocol for suspending one execution for a number of minutes."""

    async def wait(self, minutes: float) -> None:
        """Suspend the calling task only; other executions keep running."""
        ...


# Execution history interface
class IExecutionHistory(Protocol):
    """Protocol for the bounded, concurrency-safe per-workflow execution history."""

    def append(self, execution: WorkflowExecution) -> None:
        """Add an execution, evicting the workflow's oldest entry when full."""
        ...

    def list_for_workflow(self, workflow_id: str) -> list[WorkflowExecution]:
        """Return a snapshot of the workflow's executions, oldest first."""
        ...

    def find(self, execution_id: str) -> WorkflowExecution | None:
        ...

    def cancel(self, execution_id: str, message: str) -> bool:
        """Cancel a RUNNING execution; False when unknown or not running."""
        ...

    def clear(self) -> None:
        ...
