"""Automation service composition: one engine and its collaborators per process.

The execution history lives in memory, so the engine and its stores must be
shared by every request. create_app puts the container on app.state; API
dependencies read it from there.
"""

from __future__ import annotations

from dataclasses import dataclass

from app.application.interfaces import (
    ICampaignDispatcher,
    IContactStore,
    IDelayScheduler,
    IExecutionHistory,
    ISubscriptionGuard,
    IWorkflowStore,
)
from app.application.services.action_executor import ActionExecutor
from app.application.services.automation_engine import AutomationEngine
from app.application.services.trigger_system import TriggerSystem
from app.application.services.workflow_validator import WorkflowValidator
from app.application.use_cases.automations import AutomationManager
from app.core.config import Settings, get_settings
from app.infrastructure.persistence.repositories import (
    InMemoryContactStore,
    InMemoryWorkflowStore,
)
from app.infrastructure.services import (
    AsyncioDelayScheduler,
    HttpCampaignDispatcher,
    InMemoryExecutionHistory,
    LogOnlyCampaignDispatcher,
    StaticSubscriptionGuard,
)


@dataclass
class AutomationContainer:
    """Wired automation core (stores, dispatcher, engine, manager)."""

    workflow_store: IWorkflowStore
    contact_store: IContactStore
    campaign_dispatcher: ICampaignDispatcher
    subscription_guard: ISubscriptionGuard
    delay_scheduler: IDelayScheduler
    history: IExecutionHistory
    engine: AutomationEngine
    manager: AutomationManager

    async def aclose(self) -> None:
        """Release resources held by collaborators (e.g. the dispatcher HTTP client)."""
        close = getattr(self.campaign_dispatcher, "aclose", None)
        if close is not None:
            await close()


def build_dispatcher(settings: Settings) -> ICampaignDispatcher:
    """Return the campaign dispatcher selected by settings.campaign_dispatcher."""
    if settings.campaign_dispatcher == "http":
        return HttpCampaignDispatcher(
            settings.campaign_dispatcher_url or "",
            timeout=settings.campaign_dispatcher_timeout_seconds,
        )
    return LogOnlyCampaignDispatcher()


def build_container(
    settings: Settings | None = None,
    *,
    workflow_store: IWorkflowStore | None = None,
    contact_store: IContactStore | None = None,
    campaign_dispatcher: ICampaignDispatcher | None = None,
    subscription_guard: ISubscriptionGuard | None = None,
    delay_scheduler: IDelayScheduler | None = None,
    history: IExecutionHistory | None = None,
) -> AutomationContainer:
    """Wire the automation core; any collaborator can be supplied (tests, demos)."""
    settings = settings or get_settings()
    if workflow_store is None:
        workflow_store = InMemoryWorkflowStore()
    if contact_store is None:
        contact_store = InMemoryContactStore()
    if campaign_dispatcher is None:
        campaign_dispatcher = build_dispatcher(settings)
    if subscription_guard is None:
        subscription_guard = StaticSubscriptionGuard()
    if delay_scheduler is None:
        delay_scheduler = AsyncioDelayScheduler(settings.automation_delay_unit_seconds)
    if history is None:
        history = InMemoryExecutionHistory(settings.automation_history_limit)

    executor = ActionExecutor(campaign_dispatcher, contact_store, delay_scheduler)
    engine = AutomationEngine(
        TriggerSystem(workflow_store),
        executor,
        workflow_store,
        contact_store,
        subscription_guard,
        history,
        recent_executions_limit=settings.automation_recent_executions_limit,
    )
    manager = AutomationManager(
        workflow_store,
        engine,
        WorkflowValidator(
            long_delay_warning_minutes=settings.automation_long_delay_warning_minutes,
            max_actions_warning=settings.automation_max_actions_warning,
        ),
        recent_executions_limit=settings.automation_recent_executions_limit,
    )
    return AutomationContainer(
        workflow_store=workflow_store,
        contact_store=contact_store,
        campaign_dispatcher=campaign_dispatcher,
        subscription_guard=subscription_guard,
        delay_scheduler=delay_scheduler,
        history=history,
        engine=engine,
        manager=manager,
    )
