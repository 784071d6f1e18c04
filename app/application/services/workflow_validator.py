"""Whole-workflow validation: errors that block a workflow plus advisory warnings."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from app.application.dtos.automation import ValidationResult
from app.application.services.trigger_system import validate_trigger_config
from app.domain.entities.action import validate_action_config
from app.domain.entities.workflow import AutomationWorkflowEntity
from app.domain.enums import ActionType

_MESSAGE_ACTIONS = frozenset({ActionType.SEND_EMAIL.value, ActionType.SEND_SMS.value})


class WorkflowValidator:
    """Validates a stored workflow definition (name, tenant, trigger, actions)."""

    def __init__(
        self,
        long_delay_warning_minutes: float = 1440,
        max_actions_warning: int = 10,
    ) -> None:
        self._long_delay_minutes = long_delay_warning_minutes
        self._max_actions = max_actions_warning

    def validate(self, workflow: AutomationWorkflowEntity) -> ValidationResult:
        """Collect every error and warning; the workflow is never mutated."""
        errors: list[str] = []
        warnings: list[str] = []

        if not workflow.name or not workflow.name.strip():
            errors.append("Workflow name is required")
        if not workflow.tenant_id:
            errors.append("Tenant ID is required")
        if not workflow.trigger.type:
            errors.append("Trigger type is required")
        if not workflow.actions:
            errors.append("At least one action is required")

        trigger_result = validate_trigger_config(workflow.trigger)
        errors.extend(f"Trigger: {e}" for e in trigger_result.errors)

        for index, raw in enumerate(workflow.actions, start=1):
            action = self._with_default_id(raw, index)
            errors.extend(f"Action {index}: {e}" for e in validate_action_config(action))
            warnings.extend(
                f"Action {index}: {w}" for w in self._action_warnings(action)
            )

        if len(workflow.actions) > self._max_actions:
            warnings.append(
                "Workflow has many actions, consider breaking it into smaller workflows"
            )
        return ValidationResult.from_errors(errors, warnings)

    @staticmethod
    def _with_default_id(raw: Any, index: int) -> Any:
        if isinstance(raw, Mapping) and not raw.get("id"):
            return {**raw, "id": f"action_{index}"}
        return raw

    def _action_warnings(self, action: Any) -> list[str]:
        if not isinstance(action, Mapping):
            return []
        warnings: list[str] = []
        config = action.get("config")
        config = config if isinstance(config, Mapping) else {}
        action_type = action.get("type")
        if isinstance(action_type, str) and action_type in _MESSAGE_ACTIONS and not (
            config.get("subject") or config.get("message")
        ):
            warnings.append("No content specified")
        delay = action.get("delay")
        if (
            isinstance(delay, (int, float))
            and not isinstance(delay, bool)
            and delay > self._long_delay_minutes
        ):
            warnings.append(f"Long delay ({delay:g} minutes) may cause issues")
        return warnings
