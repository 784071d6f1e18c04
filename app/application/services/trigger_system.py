"""Trigger system: match an incoming event against the tenant's active workflows.

Implements event-to-workflow matching (type filter, then AND over the
workflow's conditions) and exhaustive validation of stored trigger configs.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from app.application.dtos.automation import ValidationResult
from app.application.services.condition_evaluator import evaluate_condition
from app.domain.entities.trigger import TriggerEvaluationResult, TriggerEvent, WorkflowTrigger
from app.domain.enums import ConditionOperator, TriggerEventType
from app.shared.telemetry.logging import get_logger
from app.shared.telemetry.tracing import traced
from app.shared.utils.datetime import utc_now

if TYPE_CHECKING:
    from app.application.interfaces.repositories import IWorkflowStore
    from app.domain.entities.workflow import AutomationWorkflowEntity

logger = get_logger(__name__)

TRIGGER_EVENT_TYPES: frozenset[str] = frozenset(TriggerEventType.values())
CONDITION_OPERATORS: frozenset[str] = frozenset(ConditionOperator.values())


def create_trigger_event(
    event_type: str, tenant_id: str, data: Mapping[str, Any] | None = None
) -> TriggerEvent:
    """Build a trigger event stamped with the current UTC time."""
    return TriggerEvent(
        type=event_type, tenant_id=tenant_id, data=data or {}, timestamp=utc_now()
    )


def evaluate_trigger_conditions(
    trigger: WorkflowTrigger, event: TriggerEvent
) -> TriggerEvaluationResult:
    """Evaluate every condition (no short-circuit) so diagnostics list all failures."""
    matched = []
    failed = []
    for condition in trigger.conditions:
        if evaluate_condition(condition, event.data):
            matched.append(condition)
        else:
            failed.append(condition)
    return TriggerEvaluationResult(
        should_trigger=not failed,
        matched_conditions=tuple(matched),
        failed_conditions=tuple(failed),
    )


def validate_trigger_config(
    trigger: WorkflowTrigger | Mapping[str, Any] | None,
) -> ValidationResult:
    """Collect every problem with a trigger config; never mutates or raises."""
    if isinstance(trigger, WorkflowTrigger):
        trigger = trigger.to_dict()
    if not isinstance(trigger, Mapping):
        return ValidationResult.from_errors(["Trigger type is required"])

    errors: list[str] = []
    trigger_type = trigger.get("type")
    if not trigger_type:
        errors.append("Trigger type is required")
    elif not isinstance(trigger_type, str) or trigger_type not in TRIGGER_EVENT_TYPES:
        errors.append(f"Invalid trigger type: {trigger_type}")

    conditions = trigger.get("conditions")
    if conditions is None:
        conditions = []
    if not isinstance(conditions, list):
        errors.append("Conditions must be an array")
        conditions = []

    for index, condition in enumerate(conditions, start=1):
        if not isinstance(condition, Mapping):
            errors.append(f"Condition {index}: condition must be an object")
            continue
        if not condition.get("field"):
            errors.append(f"Condition {index}: field is required")
        operator = condition.get("operator")
        if not operator:
            errors.append(f"Condition {index}: operator is required")
        elif not isinstance(operator, str) or operator not in CONDITION_OPERATORS:
            errors.append(f"Condition {index}: invalid operator {operator}")
        if condition.get("value") is None:
            errors.append(f"Condition {index}: value is required")
    return ValidationResult.from_errors(errors)


class TriggerSystem:
    """Finds the workflows an event should start."""

    def __init__(self, workflow_store: IWorkflowStore) -> None:
        self._workflow_store = workflow_store

    @traced("automation.trigger_system.match")
    async def process_trigger_event(
        self, event: TriggerEvent
    ) -> list[AutomationWorkflowEntity]:
        """Return the tenant's active workflows whose trigger matches the event.

        Order follows the store's listing. A store failure is logged and
        yields no matches.
        """
        try:
            workflows = await self._workflow_store.get_active_workflows(event.tenant_id)
        except Exception:
            logger.exception(
                "Failed to load active workflows (tenant_id=%s, event_type=%s)",
                event.tenant_id,
                event.type,
            )
            return []

        matches: list[AutomationWorkflowEntity] = []
        for workflow in workflows:
            if not workflow.can_trigger_on(event.type):
                continue
            try:
                result = evaluate_trigger_conditions(workflow.trigger, event)
            except Exception:
                logger.warning(
                    "Skipping workflow %s: conditions could not be evaluated",
                    workflow.id,
                    exc_info=True,
                )
                continue
            if result.should_trigger:
                matches.append(workflow)
            else:
                logger.debug(
                    "Workflow %s not triggered: %d condition(s) failed",
                    workflow.id,
                    len(result.failed_conditions),
                )
        logger.info(
            "Event %s for tenant %s matched %d workflow(s)",
            event.type,
            event.tenant_id,
            len(matches),
        )
        return matches

    evaluate_trigger_conditions = staticmethod(evaluate_trigger_conditions)
    validate_trigger_config = staticmethod(validate_trigger_config)
    create_trigger_event = staticmethod(create_trigger_event)
