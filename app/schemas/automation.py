"""Automation API schemas."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, Field

if TYPE_CHECKING:
    from app.application.dtos.automation import (
        AutomationPerformanceMetrics,
        TestWorkflowResult,
        ValidationResult,
        WorkflowAnalytics,
    )
    from app.domain.entities.action import ActionExecutionResult
    from app.domain.entities.execution import WorkflowExecution


class TriggerConditionPayload(BaseModel):
    """One stored condition; validation reports missing parts instead of rejecting."""

    field: str | None = None
    operator: str | None = None
    value: Any = None


class TriggerConfigRequest(BaseModel):
    """Request body for POST /automations/triggers/validate."""

    type: str | None = None
    conditions: list[TriggerConditionPayload] = Field(default_factory=list)

    def to_config(self) -> dict[str, Any]:
        return {
            "type": self.type,
            "conditions": [c.model_dump() for c in self.conditions],
        }


class ActionConfigRequest(BaseModel):
    """Request body for POST /automations/actions/validate (one stored action)."""

    id: str | None = None
    type: str | None = None
    config: dict[str, Any] = Field(default_factory=dict)
    delay: Any = None

    def to_config(self) -> dict[str, Any]:
        return self.model_dump()


class WorkflowTestRequest(BaseModel):
    """Request body for POST /automations/{id}/test."""

    trigger_data: dict[str, Any] = Field(default_factory=dict)
    contact_id: str | None = Field(default=None, max_length=128)


class ValidationResultResponse(BaseModel):
    is_valid: bool
    errors: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)

    @classmethod
    def from_result(cls, result: ValidationResult) -> ValidationResultResponse:
        return cls(
            is_valid=result.is_valid,
            errors=list(result.errors),
            warnings=list(result.warnings),
        )


class ActionResultResponse(BaseModel):
    """One action's outcome inside an execution."""

    action_id: str
    action_type: str
    success: bool
    executed_at: datetime
    error: str | None = None
    metadata: dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def from_result(cls, result: ActionExecutionResult) -> ActionResultResponse:
        return cls(
            action_id=result.action_id,
            action_type=result.action_type,
            success=result.success,
            executed_at=result.executed_at,
            error=result.error,
            metadata=dict(result.metadata),
        )


class WorkflowExecutionResponse(BaseModel):
    """Workflow execution response."""

    id: str
    workflow_id: str
    tenant_id: str
    event_type: str
    contact_id: str | None
    status: str
    started_at: datetime
    completed_at: datetime | None
    duration_ms: float | None
    action_results: list[ActionResultResponse]
    error: str | None

    @classmethod
    def from_execution(cls, execution: WorkflowExecution) -> WorkflowExecutionResponse:
        return cls(
            id=execution.id,
            workflow_id=execution.workflow_id,
            tenant_id=execution.tenant_id,
            event_type=execution.trigger_event.type,
            contact_id=execution.contact_id,
            status=execution.status.value,
            started_at=execution.started_at,
            completed_at=execution.completed_at,
            duration_ms=execution.duration_ms,
            action_results=[
                ActionResultResponse.from_result(r) for r in list(execution.action_results)
            ],
            error=execution.error,
        )


class WorkflowTestResponse(BaseModel):
    success: bool
    execution: WorkflowExecutionResponse | None = None
    action_results: list[ActionResultResponse] = Field(default_factory=list)
    error: str | None = None

    @classmethod
    def from_result(cls, result: TestWorkflowResult) -> WorkflowTestResponse:
        return cls(
            success=result.success,
            execution=(
                WorkflowExecutionResponse.from_execution(result.execution)
                if result.execution
                else None
            ),
            action_results=[
                ActionResultResponse.from_result(r) for r in result.action_results
            ],
            error=result.error,
        )


class WorkflowAnalyticsResponse(BaseModel):
    """Execution statistics for one workflow (success_rate is a percentage)."""

    workflow_id: str
    workflow_name: str
    is_active: bool
    total_executions: int
    successful_executions: int
    failed_executions: int
    average_execution_time_ms: float
    last_execution_at: datetime | None
    success_rate: float

    @classmethod
    def from_analytics(cls, analytics: WorkflowAnalytics) -> WorkflowAnalyticsResponse:
        stats = analytics.stats
        return cls(
            workflow_id=analytics.workflow_id,
            workflow_name=analytics.workflow_name,
            is_active=analytics.is_active,
            total_executions=stats.total_executions,
            successful_executions=stats.successful_executions,
            failed_executions=stats.failed_executions,
            average_execution_time_ms=stats.average_execution_time_ms,
            last_execution_at=stats.last_execution_at,
            success_rate=analytics.success_rate,
        )


class WorkflowPerformanceResponse(BaseModel):
    workflow_id: str
    workflow_name: str
    executions: int
    success_rate: float


class AutomationMetricsResponse(BaseModel):
    """Tenant-wide automation metrics."""

    total_workflows: int
    active_workflows: int
    total_executions: int
    success_rate: float
    average_execution_time_ms: float
    top_performing_workflows: list[WorkflowPerformanceResponse]
    recent_executions: list[WorkflowExecutionResponse]

    @classmethod
    def from_metrics(
        cls, metrics: AutomationPerformanceMetrics
    ) -> AutomationMetricsResponse:
        return cls(
            total_workflows=metrics.total_workflows,
            active_workflows=metrics.active_workflows,
            total_executions=metrics.total_executions,
            success_rate=metrics.success_rate,
            average_execution_time_ms=metrics.average_execution_time_ms,
            top_performing_workflows=[
                WorkflowPerformanceResponse(
                    workflow_id=p.workflow_id,
                    workflow_name=p.workflow_name,
                    executions=p.executions,
                    success_rate=p.success_rate,
                )
                for p in metrics.top_performing_workflows
            ],
            recent_executions=[
                WorkflowExecutionResponse.from_execution(e)
                for e in metrics.recent_executions
            ],
        )


class CancelExecutionResponse(BaseModel):
    cancelled: bool
