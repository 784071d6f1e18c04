"""Automation management use case: manual test runs, validation, analytics."""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from app.application.dtos.automation import (
    AutomationPerformanceMetrics,
    TestWorkflowResult,
    ValidationResult,
    WorkflowAnalytics,
    WorkflowPerformance,
)
from app.domain.entities.workflow import AutomationWorkflowEntity
from app.domain.enums import WorkflowExecutionStatus
from app.domain.exceptions import ResourceNotFoundException
from app.shared.telemetry.logging import get_logger

if TYPE_CHECKING:
    from app.application.interfaces.repositories import IWorkflowStore
    from app.application.services.automation_engine import AutomationEngine
    from app.application.services.workflow_validator import WorkflowValidator
    from app.domain.entities.execution import WorkflowExecution

logger = get_logger(__name__)

TOP_PERFORMING_LIMIT = 5
RECENT_PER_WORKFLOW = 5


class AutomationManager:
    """Tenant-facing operations over stored workflows and the engine's history."""

    def __init__(
        self,
        workflow_store: "IWorkflowStore",
        engine: "AutomationEngine",
        validator: "WorkflowValidator",
        *,
        recent_executions_limit: int = 10,
    ) -> None:
        self.workflow_store = workflow_store
        self.engine = engine
        self.validator = validator
        self.recent_executions_limit = recent_executions_limit

    async def get_workflow(
        self, workflow_id: str, tenant_id: str | None = None
    ) -> AutomationWorkflowEntity:
        """Return the workflow or raise ResourceNotFoundException (also for another tenant's)."""
        workflow = await self.workflow_store.get_workflow(workflow_id)
        if workflow is None or (
            tenant_id is not None and not workflow.belongs_to_tenant(tenant_id)
        ):
            raise ResourceNotFoundException("Workflow", workflow_id)
        return workflow

    async def test_workflow(
        self,
        workflow_id: str,
        sample_data: Mapping[str, Any] | None = None,
        contact_id: str | None = None,
        tenant_id: str | None = None,
    ) -> TestWorkflowResult:
        """Run a workflow once with sample data. Rejections are reported, never raised."""
        try:
            execution = await self.engine.execute_workflow_by_id(
                workflow_id, sample_data or {}, contact_id, tenant_id=tenant_id
            )
        except Exception as e:
            logger.warning("Test run of workflow %s rejected: %s", workflow_id, e)
            return TestWorkflowResult(success=False, error=str(e))
        return TestWorkflowResult(
            success=execution.status == WorkflowExecutionStatus.COMPLETED,
            execution=execution,
            action_results=list(execution.action_results),
            error=execution.error,
        )

    async def validate_workflow(
        self,
        workflow: AutomationWorkflowEntity | str,
        tenant_id: str | None = None,
    ) -> ValidationResult:
        """Validate a workflow given directly or by id."""
        if not isinstance(workflow, AutomationWorkflowEntity):
            workflow = await self.get_workflow(workflow, tenant_id)
        return self.validator.validate(workflow)

    async def get_workflow_analytics(
        self, workflow_id: str, tenant_id: str | None = None
    ) -> WorkflowAnalytics | None:
        """Return analytics for the workflow, or None when it is unknown."""
        workflow = await self.workflow_store.get_workflow(workflow_id)
        if workflow is None or (
            tenant_id is not None and not workflow.belongs_to_tenant(tenant_id)
        ):
            return None
        return self._analytics_for(workflow)

    def _analytics_for(self, workflow: AutomationWorkflowEntity) -> WorkflowAnalytics:
        stats = self.engine.get_workflow_stats(workflow.id)
        return WorkflowAnalytics(
            workflow_id=workflow.id,
            workflow_name=workflow.name,
            is_active=workflow.is_active,
            stats=stats,
            success_rate=stats.success_rate,
        )

    def get_recent_executions(
        self, workflow_id: str, limit: int | None = None
    ) -> list["WorkflowExecution"]:
        return self.engine.get_recent_executions(workflow_id, limit)

    def cancel_execution(self, execution_id: str, tenant_id: str | None = None) -> bool:
        """Cancel a RUNNING execution; another tenant's execution counts as unknown."""
        if tenant_id is not None:
            execution = self.engine.get_execution(execution_id)
            if execution is None or execution.tenant_id != tenant_id:
                return False
        return self.engine.cancel_execution(execution_id)

    async def get_automation_metrics(self, tenant_id: str) -> AutomationPerformanceMetrics:
        """Aggregate every workflow of the tenant into one metrics snapshot."""
        workflows = await self.workflow_store.list_workflows(tenant_id)
        analytics = [self._analytics_for(w) for w in workflows]

        total_executions = sum(a.stats.total_executions for a in analytics)
        successful = sum(a.stats.successful_executions for a in analytics)
        weighted_time = sum(
            a.stats.average_execution_time_ms * a.stats.total_executions
            for a in analytics
        )

        top = sorted(
            (a for a in analytics if a.stats.total_executions > 0),
            key=lambda a: (a.success_rate, a.stats.total_executions),
            reverse=True,
        )[:TOP_PERFORMING_LIMIT]

        recent: list[WorkflowExecution] = []
        for workflow in workflows:
            recent.extend(
                self.engine.get_recent_executions(workflow.id, RECENT_PER_WORKFLOW)
            )
        recent.sort(key=lambda e: e.completed_at or e.started_at, reverse=True)

        return AutomationPerformanceMetrics(
            total_workflows=len(workflows),
            active_workflows=sum(1 for w in workflows if w.is_active),
            total_executions=total_executions,
            success_rate=successful / total_executions * 100 if total_executions else 0.0,
            average_execution_time_ms=(
                weighted_time / total_executions if total_executions else 0.0
            ),
            top_performing_workflows=[
                WorkflowPerformance(
                    workflow_id=a.workflow_id,
                    workflow_name=a.workflow_name,
                    executions=a.stats.total_executions,
                    success_rate=a.success_rate,
                )
                for a in top
            ],
            recent_executions=recent[: self.recent_executions_limit],
        )
