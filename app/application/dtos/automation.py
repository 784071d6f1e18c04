"""DTOs for the automation core (no dependency on presentation schemas)."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from app.domain.entities.action import ActionExecutionResult
    from app.domain.entities.contact import ContactEntity
    from app.domain.entities.execution import WorkflowExecution


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of validating a trigger, an action, or a whole workflow.

    Errors are collected exhaustively; warnings never make a config invalid.
    """

    is_valid: bool
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @classmethod
    def from_errors(
        cls, errors: list[str], warnings: list[str] | None = None
    ) -> ValidationResult:
        return cls(is_valid=not errors, errors=list(errors), warnings=list(warnings or []))


@dataclass(frozen=True)
class EmailContent:
    """Email campaign content after template interpolation."""

    name: str
    subject: str
    html_content: str
    from_email: str
    from_name: str
    text_content: str | None = None
    template_id: str | None = None


@dataclass(frozen=True)
class SmsContent:
    """SMS campaign content after template interpolation."""

    name: str
    message: str
    from_number: str
    template_id: str | None = None


@dataclass(frozen=True)
class DispatchResult:
    """What the campaign dispatcher reports for one send."""

    campaign_id: str
    failed_count: int = 0
    results: list[Mapping[str, Any]] = field(default_factory=list)

    @property
    def total_count(self) -> int:
        return len(self.results)

    @property
    def delivered_count(self) -> int:
        return max(self.total_count - self.failed_count, 0)


@dataclass(frozen=True)
class ActionExecutionContext:
    """Everything an action may read: workflow, tenant, trigger data, resolved contact."""

    workflow_id: str
    tenant_id: str
    trigger_data: Mapping[str, Any]
    contact_id: str | None = None
    contact: ContactEntity | None = None


@dataclass(frozen=True)
class WorkflowExecutionStats:
    """Aggregates over one workflow's retained execution history."""

    total_executions: int = 0
    successful_executions: int = 0
    failed_executions: int = 0
    average_execution_time_ms: float = 0.0
    last_execution_at: datetime | None = None

    @property
    def success_rate(self) -> float:
        """Successful executions as a percentage of all retained executions."""
        if not self.total_executions:
            return 0.0
        return self.successful_executions / self.total_executions * 100


@dataclass(frozen=True)
class WorkflowAnalytics:
    workflow_id: str
    workflow_name: str
    is_active: bool
    stats: WorkflowExecutionStats
    success_rate: float


@dataclass(frozen=True)
class WorkflowPerformance:
    """One entry of the tenant's top-performing workflows."""

    workflow_id: str
    workflow_name: str
    executions: int
    success_rate: float


@dataclass(frozen=True)
class AutomationPerformanceMetrics:
    """Tenant-wide automation metrics."""

    total_workflows: int
    active_workflows: int
    total_executions: int
    success_rate: float
    average_execution_time_ms: float
    top_performing_workflows: list[WorkflowPerformance] = field(default_factory=list)
    recent_executions: list[WorkflowExecution] = field(default_factory=list)


@dataclass(frozen=True)
class TestWorkflowResult:
    """Result of a manual workflow run; never raised, failures are reported here."""

    __test__ = False  # not a pytest test class

    success: bool
    execution: WorkflowExecution | None = None
    action_results: list[ActionExecutionResult] = field(default_factory=list)
    error: str | None = None
