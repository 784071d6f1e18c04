"""Domain layer: entities, value objects, enums, and exceptions.

No dependencies on infrastructure or presentation. Used by application
and infrastructure layers.
"""

from app.domain.entities import (
    ActionExecutionResult,
    AutomationWorkflowEntity,
    Condition,
    ContactEntity,
    TriggerEvent,
    WorkflowAction,
    WorkflowExecution,
    WorkflowTrigger,
)
from app.domain.enums import (
    ActionType,
    ConditionOperator,
    MessageChannel,
    TriggerEventType,
    WorkflowExecutionStatus,
)
from app.domain.exceptions import (
    ActionExecutionError,
    AutomationException,
    InvalidExecutionTransitionException,
    ResourceNotFoundException,
    SubscriptionInactiveException,
    ValidationException,
    WorkflowInactiveException,
)

__all__ = [
    # Entities
    "ActionExecutionResult",
    "AutomationWorkflowEntity",
    "Condition",
    "ContactEntity",
    "TriggerEvent",
    "WorkflowAction",
    "WorkflowExecution",
    "WorkflowTrigger",
    # Enums
    "ActionType",
    "ConditionOperator",
    "MessageChannel",
    "TriggerEventType",
    "WorkflowExecutionStatus",
    # Exceptions
    "ActionExecutionError",
    "AutomationException",
    "InvalidExecutionTransitionException",
    "ResourceNotFoundException",
    "SubscriptionInactiveException",
    "ValidationException",
    "WorkflowInactiveException",
]
