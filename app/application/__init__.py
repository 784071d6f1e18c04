"""Application layer: interfaces, services, use cases.

Depends only on domain and protocol definitions (DIP).
Infrastructure implements the interfaces (stores, dispatcher, history).
"""

from app.application.interfaces import (
    ICampaignDispatcher,
    IContactStore,
    IDelayScheduler,
    IExecutionHistory,
    ISubscriptionGuard,
    IWorkflowStore,
)
from app.application.services.automation_engine import AutomationEngine
from app.application.use_cases.automations import AutomationManager

__all__ = [
    "AutomationEngine",
    "AutomationManager",
    "ICampaignDispatcher",
    "IContactStore",
    "IDelayScheduler",
    "IExecutionHistory",
    "ISubscriptionGuard",
    "IWorkflowStore",
]
