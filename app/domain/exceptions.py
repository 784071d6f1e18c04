"""Domain exceptions for the automation core.

Business rule violations raised by the domain and application layers.
The presentation layer maps them to HTTP responses in exception handlers;
the engine converts them into failed execution records.
"""

from typing import Any


class AutomationException(Exception):
    """Base exception for all automation errors.

    Attributes:
        message: Human-readable error description.
        error_code: Machine-readable error code.
        details: Additional error context (e.g. field, resource_id).
    """

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error description.
            error_code: Optional machine-readable code; defaults to class name.
            details: Optional dict of extra context.
        """
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-serializable error body."""
        return {
            "error": self.error_code,
            "message": self.message,
            "details": self.details,
        }


class ValidationException(AutomationException):
    """Raised when a configuration or input is malformed."""

    def __init__(
        self,
        message: str,
        field: str | None = None,
        errors: list[str] | None = None,
    ) -> None:
        """Initialize with message, optional field name and collected errors.

        Args:
            message: Description of the validation failure.
            field: Optional field or attribute that failed validation.
            errors: Optional list of every individual violation found.
        """
        details: dict[str, Any] = {}
        if field:
            details["field"] = field
        if errors:
            details["errors"] = list(errors)
        super().__init__(message, "VALIDATION_ERROR", details)
        self.errors = list(errors or [])


class ResourceNotFoundException(AutomationException):
    """Raised when a requested resource is not found."""

    def __init__(self, resource_type: str, resource_id: str) -> None:
        super().__init__(
            f"{resource_type} not found: {resource_id}",
            "RESOURCE_NOT_FOUND",
            {"resource_type": resource_type, "resource_id": resource_id},
        )


class WorkflowInactiveException(AutomationException):
    """Raised when a manual run targets a workflow that is switched off."""

    def __init__(self, workflow_id: str) -> None:
        super().__init__(
            f"Workflow is not active: {workflow_id}",
            "WORKFLOW_INACTIVE",
            {"workflow_id": workflow_id},
        )


SUBSCRIPTION_INACTIVE_MESSAGE = "Subscription expired. Automation execution blocked."


class SubscriptionInactiveException(AutomationException):
    """Raised when the tenant's subscription does not allow automations to run."""

    def __init__(self, tenant_id: str) -> None:
        super().__init__(
            SUBSCRIPTION_INACTIVE_MESSAGE,
            "SUBSCRIPTION_INACTIVE",
            {"tenant_id": tenant_id},
        )


class ActionExecutionError(AutomationException):
    """Raised inside an action handler; always captured into the action result."""

    def __init__(self, message: str, action_type: str | None = None) -> None:
        details = {"action_type": action_type} if action_type else {}
        super().__init__(message, "ACTION_FAILED", details)


class InvalidExecutionTransitionException(AutomationException):
    """Raised when an execution status change would leave the state machine."""

    def __init__(self, execution_id: str, current: str, target: str) -> None:
        super().__init__(
            f"Execution {execution_id} cannot move from {current} to {target}",
            "INVALID_STATUS_TRANSITION",
            {"execution_id": execution_id, "current": current, "target": target},
        )
