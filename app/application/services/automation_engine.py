"""Automation engine: orchestrates workflow executions for trigger events.

For each matched workflow an execution is created RUNNING, registered in
the bounded history, checked against the tenant subscription, given a
contact, and handed to the action executor. Failures for a single event
are returned as FAILED executions, never raised.
"""

from __future__ import annotations

import asyncio
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from app.application.dtos.automation import (
    ActionExecutionContext,
    WorkflowExecutionStats,
)
from app.application.services.trigger_system import create_trigger_event
from app.domain.entities.action import ActionExecutionResult, parse_workflow_actions
from app.domain.entities.execution import CANCELLED_MESSAGE, WorkflowExecution
from app.domain.enums import TriggerEventType, WorkflowExecutionStatus
from app.domain.exceptions import (
    ResourceNotFoundException,
    SubscriptionInactiveException,
    WorkflowInactiveException,
)
from app.domain.value_objects.json_path import resolve_path
from app.shared.telemetry.logging import get_logger
from app.shared.telemetry.tracing import TracedOperation
from app.shared.utils.generators import generate_execution_id

if TYPE_CHECKING:
    from app.application.interfaces.repositories import IContactStore, IWorkflowStore
    from app.application.interfaces.services import (
        IExecutionHistory,
        ISubscriptionGuard,
    )
    from app.application.services.action_executor import ActionExecutor
    from app.application.services.trigger_system import TriggerSystem
    from app.domain.entities.contact import ContactEntity
    from app.domain.entities.trigger import TriggerEvent
    from app.domain.entities.workflow import AutomationWorkflowEntity

logger = get_logger(__name__)

# Where the acting contact's email lives in each event's payload.
_ORDER_EVENTS = (
    TriggerEventType.ORDER_CREATED,
    TriggerEventType.ORDER_PAID,
    TriggerEventType.ORDER_UPDATED,
    TriggerEventType.ORDER_REFUNDED,
    TriggerEventType.ORDER_CANCELED,
    TriggerEventType.ORDER_FULFILLED,
    TriggerEventType.PLACED_ORDER,
    TriggerEventType.PAID_FOR_ORDER,
    TriggerEventType.ORDERED_PRODUCT,
)
_CUSTOMER_EVENTS = (
    TriggerEventType.CUSTOMER_CREATED,
    TriggerEventType.CUSTOMER_UPDATED,
    TriggerEventType.CUSTOMER_SUBSCRIBED,
    TriggerEventType.CART_ABANDONED,
    TriggerEventType.STARTED_CHECKOUT,
)
_CONTACT_EMAIL_PATHS: dict[str, str] = {
    **{t.value: "customer.email" for t in _ORDER_EVENTS},
    **{t.value: "email" for t in _CUSTOMER_EVENTS},
}

_TIMED_STATUSES = frozenset(
    {WorkflowExecutionStatus.COMPLETED, WorkflowExecutionStatus.FAILED}
)


def extract_contact_email(event: TriggerEvent) -> str | None:
    """Return the contact email carried by the event payload, if its type has one."""
    path = _CONTACT_EMAIL_PATHS.get(event.type)
    if path is None:
        return None
    email = resolve_path(event.data, path)
    if isinstance(email, str) and email.strip():
        return email.strip()
    return None


def summarize_failures(results: list[ActionExecutionResult]) -> str | None:
    """Join every failed action's error, or None when all succeeded."""
    failures = [r for r in results if not r.success]
    if not failures:
        return None
    return f"{len(failures)} action(s) failed: " + ", ".join(
        r.error or "unknown error" for r in failures
    )


class AutomationEngine:
    """Runs matched workflows and keeps the execution history used for analytics."""

    def __init__(
        self,
        trigger_system: TriggerSystem,
        action_executor: ActionExecutor,
        workflow_store: IWorkflowStore,
        contact_store: IContactStore,
        subscription_guard: ISubscriptionGuard,
        history: IExecutionHistory,
        *,
        recent_executions_limit: int = 10,
    ) -> None:
        self._trigger_system = trigger_system
        self._executor = action_executor
        self._workflow_store = workflow_store
        self._contact_store = contact_store
        self._subscription_guard = subscription_guard
        self._history = history
        self._recent_limit = recent_executions_limit

    @property
    def trigger_system(self) -> TriggerSystem:
        return self._trigger_system

    async def process_trigger_event(self, event: TriggerEvent) -> list[WorkflowExecution]:
        """Run every workflow the event matches; one execution per match, in match order."""
        logger.info(
            "Processing trigger event %s for tenant %s", event.type, event.tenant_id
        )
        async with TracedOperation(
            "automation.process_trigger_event",
            {"tenant_id": event.tenant_id, "event_type": event.type},
        ) as op:
            workflows = await self._trigger_system.process_trigger_event(event)
            op.set_attribute("match_count", len(workflows))
            if not workflows:
                return []
            executions = await asyncio.gather(
                *(self._execute_or_fail(workflow, event) for workflow in workflows)
            )
            return list(executions)

    async def _execute_or_fail(
        self, workflow: AutomationWorkflowEntity, event: TriggerEvent
    ) -> WorkflowExecution:
        try:
            return await self.execute_workflow(workflow, event)
        except Exception as e:
            logger.exception(
                "Workflow %s setup failed (tenant_id=%s, event_type=%s)",
                workflow.id,
                workflow.tenant_id,
                event.type,
            )
            execution = self._new_execution(workflow, event)
            execution.start()
            execution.fail(str(e))
            self._history.append(execution)
            return execution

    def _new_execution(
        self, workflow: AutomationWorkflowEntity, event: TriggerEvent
    ) -> WorkflowExecution:
        return WorkflowExecution(
            id=generate_execution_id(),
            workflow_id=workflow.id,
            tenant_id=workflow.tenant_id,
            trigger_event=event,
        )

    async def execute_workflow(
        self,
        workflow: AutomationWorkflowEntity,
        event: TriggerEvent,
        *,
        contact_id: str | None = None,
    ) -> WorkflowExecution:
        """Run one workflow for one event and return its execution record.

        Subscription, contact and action parsing failures end the execution
        FAILED before any action runs. When contact_id is given it is used
        as-is and no email lookup happens.
        """
        execution = self._new_execution(workflow, event)
        execution.start()
        self._history.append(execution)
        logger.info(
            "Execution %s started for workflow %s (tenant_id=%s)",
            execution.id,
            workflow.id,
            workflow.tenant_id,
        )

        async with TracedOperation(
            "automation.execute_workflow",
            {
                "workflow_id": workflow.id,
                "execution_id": execution.id,
                "tenant_id": workflow.tenant_id,
            },
        ) as op:
            try:
                if not await self._subscription_guard.is_tenant_active(workflow.tenant_id):
                    raise SubscriptionInactiveException(workflow.tenant_id)
                contact = None
                if contact_id is None:
                    contact = await self._resolve_contact(event, workflow.tenant_id)
                    contact_id = contact.id if contact else None
                execution.contact_id = contact_id
                actions = parse_workflow_actions(workflow.actions)
            except SubscriptionInactiveException as e:
                logger.warning(
                    "Execution %s blocked: tenant %s subscription inactive",
                    execution.id,
                    workflow.tenant_id,
                )
                execution.fail(e.message)
                op.set_attribute("status", execution.status.value)
                return execution
            except Exception as e:
                logger.exception("Execution %s failed during setup", execution.id)
                execution.fail(str(e))
                op.set_attribute("status", execution.status.value)
                return execution

            context = ActionExecutionContext(
                workflow_id=workflow.id,
                tenant_id=workflow.tenant_id,
                trigger_data=event.data,
                contact_id=contact_id,
                contact=contact,
            )
            results = await self._executor.execute_actions(actions, context)
            if not execution.finish(results, summarize_failures(results)):
                logger.info(
                    "Execution %s finished after reaching %s; status kept",
                    execution.id,
                    execution.status.value,
                )
            op.set_attribute("status", execution.status.value)

        logger.info(
            "Execution %s for workflow %s ended %s (%d action result(s))",
            execution.id,
            workflow.id,
            execution.status.value,
            len(execution.action_results),
        )
        return execution

    async def _resolve_contact(
        self, event: TriggerEvent, tenant_id: str
    ) -> ContactEntity | None:
        """Look up the event's contact by email; lookup failures are logged, not raised."""
        email = extract_contact_email(event)
        if email is None:
            return None
        try:
            contact = await self._contact_store.find_by_email(tenant_id, email)
        except Exception:
            logger.warning(
                "Contact lookup failed for tenant %s; continuing without contact",
                tenant_id,
                exc_info=True,
            )
            return None
        if contact is None:
            logger.debug("No contact for event email in tenant %s", tenant_id)
        return contact

    async def execute_workflow_by_id(
        self,
        workflow_id: str,
        trigger_data: Mapping[str, Any] | None = None,
        contact_id: str | None = None,
        *,
        tenant_id: str | None = None,
    ) -> WorkflowExecution:
        """Run a stored workflow with supplied data (manual test runs).

        Raises ResourceNotFoundException when the workflow is missing (or owned
        by another tenant when tenant_id is given) and WorkflowInactiveException
        when it is switched off.
        """
        workflow = await self._workflow_store.get_workflow(workflow_id)
        if workflow is None or (
            tenant_id is not None and not workflow.belongs_to_tenant(tenant_id)
        ):
            raise ResourceNotFoundException("Workflow", workflow_id)
        if not workflow.is_active:
            raise WorkflowInactiveException(workflow_id)
        event = create_trigger_event(
            workflow.trigger.type, workflow.tenant_id, trigger_data or {}
        )
        return await self.execute_workflow(workflow, event, contact_id=contact_id)

    def get_workflow_stats(self, workflow_id: str) -> WorkflowExecutionStats:
        """Aggregate the workflow's retained history."""
        executions = self._history.list_for_workflow(workflow_id)
        if not executions:
            return WorkflowExecutionStats()
        durations = [
            e.duration_ms
            for e in executions
            if e.status in _TIMED_STATUSES and e.duration_ms is not None
        ]
        return WorkflowExecutionStats(
            total_executions=len(executions),
            successful_executions=sum(
                1 for e in executions if e.status == WorkflowExecutionStatus.COMPLETED
            ),
            failed_executions=sum(
                1 for e in executions if e.status == WorkflowExecutionStatus.FAILED
            ),
            average_execution_time_ms=sum(durations) / len(durations) if durations else 0.0,
            last_execution_at=max(e.started_at for e in executions),
        )

    def get_recent_executions(
        self, workflow_id: str, limit: int | None = None
    ) -> list[WorkflowExecution]:
        """Return the workflow's executions, newest first."""
        limit = self._recent_limit if limit is None else limit
        if limit <= 0:
            return []
        return list(reversed(self._history.list_for_workflow(workflow_id)))[:limit]

    def get_execution(self, execution_id: str) -> WorkflowExecution | None:
        """Return a retained execution by id, or None."""
        return self._history.find(execution_id)

    def cancel_execution(self, execution_id: str) -> bool:
        """Mark a RUNNING execution CANCELLED; False when unknown or already finished.

        In-flight actions are not interrupted; only the recorded status changes.
        """
        cancelled = self._history.cancel(execution_id, CANCELLED_MESSAGE)
        if cancelled:
            logger.info("Execution %s cancelled", execution_id)
        return cancelled
