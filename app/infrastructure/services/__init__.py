"""Infrastructure implementations of application service interfaces."""

from app.infrastructure.services.campaign_dispatcher import (
    HttpCampaignDispatcher,
    LogOnlyCampaignDispatcher,
)
from app.infrastructure.services.delay_scheduler import AsyncioDelayScheduler
from app.infrastructure.services.execution_history import InMemoryExecutionHistory
from app.infrastructure.services.subscription_guard import StaticSubscriptionGuard

__all__ = [
    "AsyncioDelayScheduler",
    "HttpCampaignDispatcher",
    "InMemoryExecutionHistory",
    "LogOnlyCampaignDispatcher",
    "StaticSubscriptionGuard",
]
