"""Pydantic request/response schemas for the API."""

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
from app.schemas.health import HealthResponse

__all__ = [
    "ActionConfigRequest",
    "AutomationMetricsResponse",
    "CancelExecutionResponse",
    "HealthResponse",
    "TriggerConfigRequest",
    "ValidationResultResponse",
    "WorkflowAnalyticsResponse",
    "WorkflowExecutionResponse",
    "WorkflowTestRequest",
    "WorkflowTestResponse",
]
