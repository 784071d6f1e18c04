"""Domain entities and aggregates.

Pure domain models; no persistence or framework concerns.
"""

from app.domain.entities.action import (
    ActionConfig,
    ActionExecutionResult,
    CustomerUpdateActionConfig,
    DelayActionConfig,
    EmailActionConfig,
    SmsActionConfig,
    TagActionConfig,
    WorkflowAction,
    parse_workflow_actions,
    validate_action_config,
)
from app.domain.entities.contact import ContactEntity
from app.domain.entities.execution import CANCELLED_MESSAGE, WorkflowExecution
from app.domain.entities.trigger import (
    Condition,
    TriggerEvaluationResult,
    TriggerEvent,
    WorkflowTrigger,
)
from app.domain.entities.workflow import AutomationWorkflowEntity

__all__ = [
    "ActionConfig",
    "ActionExecutionResult",
    "AutomationWorkflowEntity",
    "CANCELLED_MESSAGE",
    "Condition",
    "ContactEntity",
    "CustomerUpdateActionConfig",
    "DelayActionConfig",
    "EmailActionConfig",
    "SmsActionConfig",
    "TagActionConfig",
    "TriggerEvaluationResult",
    "TriggerEvent",
    "WorkflowAction",
    "WorkflowExecution",
    "WorkflowTrigger",
    "parse_workflow_actions",
    "validate_action_config",
]
