"""Application services: condition evaluation, trigger matching, action execution, engine."""

from app.application.services.action_executor import ActionExecutor
from app.application.services.automation_engine import AutomationEngine
from app.application.services.condition_evaluator import evaluate_condition
from app.application.services.template_interpolation import interpolate
from app.application.services.trigger_system import (
    TRIGGER_EVENT_TYPES,
    TriggerSystem,
    create_trigger_event,
    evaluate_trigger_conditions,
    validate_trigger_config,
)
from app.application.services.workflow_validator import WorkflowValidator

__all__ = [
    "TRIGGER_EVENT_TYPES",
    "ActionExecutor",
    "AutomationEngine",
    "TriggerSystem",
    "WorkflowValidator",
    "create_trigger_event",
    "evaluate_condition",
    "evaluate_trigger_conditions",
    "interpolate",
    "validate_trigger_config",
]
