"""Application interfaces (ports): repository and service protocols.

Define contracts for infrastructure implementations (DIP).
No runtime imports from app.infrastructure.
"""

from app.application.interfaces.repositories import IContactStore, IWorkflowStore
from app.application.interfaces.services import (
    ICampaignDispatcher,
    IDelayScheduler,
    IExecutionHistory,
    ISubscriptionGuard,
)

__all__ = [
    "ICampaignDispatcher",
    "IContactStore",
    "IDelayScheduler",
    "IExecutionHistory",
    "ISubscriptionGuard",
    "IWorkflowStore",
]
