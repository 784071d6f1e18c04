"""Automation API: thin routes delegating to AutomationManager.

Workflows and executions of another tenant are reported as not found.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request

from app.api.v1.dependencies import get_automation_manager, get_tenant_id
from app.application.services.trigger_system import validate_trigger_config
from app.application.dtos.automation import ValidationResult
from app.application.use_cases.automations import AutomationManager
from app.core.limiter import limit_test_runs, limit_validation
from app.domain.entities.action import validate_action_config
from app.domain.exceptions import ResourceNotFoundException
from app.schemas.automation import (
    ActionConfigRequest,
    AutomationMetricsResponse,
    CancelExecutionResponse,
    TriggerConfigRequest,
    ValidationResultResponse,
    WorkflowAnalyticsResponse,
    WorkflowExecutionResponse,
    WorkflowTestRequest,
    WorkflowTestResponse,
)

router = APIRouter()


@router.post("/triggers/validate", response_model=ValidationResultResponse)
@limit_validation
async def validate_trigger(
    request: Request,
    body: TriggerConfigRequest,
    tenant_id: Annotated[str, Depends(get_tenant_id)],
):
    """Validate a trigger config; every problem is reported at once."""
    return ValidationResultResponse.from_result(validate_trigger_config(body.to_config()))


@router.post("/actions/validate", response_model=ValidationResultResponse)
@limit_validation
async def validate_action(
    request: Request,
    body: ActionConfigRequest,
    tenant_id: Annotated[str, Depends(get_tenant_id)],
):
    """Validate one stored action config."""
    result = ValidationResult.from_errors(validate_action_config(body.to_config()))
    return ValidationResultResponse.from_result(result)


@router.get("/metrics", response_model=AutomationMetricsResponse)
async def get_automation_metrics(
    tenant_id: Annotated[str, Depends(get_tenant_id)],
    manager: Annotated[AutomationManager, Depends(get_automation_manager)],
):
    """Tenant-wide automation metrics."""
    metrics = await manager.get_automation_metrics(tenant_id)
    return AutomationMetricsResponse.from_metrics(metrics)


@router.post(
    "/executions/{execution_id}/cancel",
    response_model=CancelExecutionResponse,
)
async def cancel_execution(
    execution_id: str,
    tenant_id: Annotated[str, Depends(get_tenant_id)],
    manager: Annotated[AutomationManager, Depends(get_automation_manager)],
):
    """Cancel a running execution. cancelled is false when unknown or already finished."""
    return CancelExecutionResponse(
        cancelled=manager.cancel_execution(execution_id, tenant_id=tenant_id)
    )


@router.get("/{workflow_id}/validation", response_model=ValidationResultResponse)
async def validate_workflow(
    workflow_id: str,
    tenant_id: Annotated[str, Depends(get_tenant_id)],
    manager: Annotated[AutomationManager, Depends(get_automation_manager)],
):
    """Validate a stored workflow (errors and warnings)."""
    result = await manager.validate_workflow(workflow_id, tenant_id=tenant_id)
    return ValidationResultResponse.from_result(result)


@router.post("/{workflow_id}/test", response_model=WorkflowTestResponse)
@limit_test_runs
async def test_workflow(
    request: Request,
    workflow_id: str,
    body: WorkflowTestRequest,
    tenant_id: Annotated[str, Depends(get_tenant_id)],
    manager: Annotated[AutomationManager, Depends(get_automation_manager)],
):
    """Run the workflow once with sample trigger data. Actions really execute."""
    await manager.get_workflow(workflow_id, tenant_id)
    result = await manager.test_workflow(
        workflow_id,
        body.trigger_data,
        body.contact_id,
        tenant_id=tenant_id,
    )
    return WorkflowTestResponse.from_result(result)


@router.get("/{workflow_id}/analytics", response_model=WorkflowAnalyticsResponse)
async def get_workflow_analytics(
    workflow_id: str,
    tenant_id: Annotated[str, Depends(get_tenant_id)],
    manager: Annotated[AutomationManager, Depends(get_automation_manager)],
):
    """Execution statistics for one workflow."""
    analytics = await manager.get_workflow_analytics(workflow_id, tenant_id=tenant_id)
    if analytics is None:
        raise ResourceNotFoundException("Workflow", workflow_id)
    return WorkflowAnalyticsResponse.from_analytics(analytics)


@router.get(
    "/{workflow_id}/executions",
    response_model=list[WorkflowExecutionResponse],
)
async def get_workflow_executions(
    workflow_id: str,
    tenant_id: Annotated[str, Depends(get_tenant_id)],
    manager: Annotated[AutomationManager, Depends(get_automation_manager)],
    limit: int | None = Query(None, ge=1, le=100),
):
    """Recent executions of the workflow, newest first."""
    await manager.get_workflow(workflow_id, tenant_id)
    executions = manager.get_recent_executions(workflow_id, limit)
    return [WorkflowExecutionResponse.from_execution(e) for e in executions]
