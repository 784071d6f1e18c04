"""Application DTOs: plain data passed between services, use cases and the API."""

from app.application.dtos.automation import (
    ActionExecutionContext,
    AutomationPerformanceMetrics,
    DispatchResult,
    EmailContent,
    SmsContent,
    TestWorkflowResult,
    ValidationResult,
    WorkflowAnalytics,
    WorkflowExecutionStats,
    WorkflowPerformance,
)

__all__ = [
    "ActionExecutionContext",
    "AutomationPerformanceMetrics",
    "DispatchResult",
    "EmailContent",
    "SmsContent",
    "TestWorkflowResult",
    "ValidationResult",
    "WorkflowAnalytics",
    "WorkflowExecutionStats",
    "WorkflowPerformance",
]
