"""Pytest configuration and fixtures for the automation service.

Engine tests run against in-memory stores, a recording campaign dispatcher
and an instant delay scheduler. HTTP tests use create_app(container) over
ASGITransport. All imports use app.*.
"""

from collections.abc import Callable
from typing import Any

import pytest
from httpx import ASGITransport, AsyncClient

from app.application.dtos.automation import DispatchResult, EmailContent, SmsContent
from app.core.config import get_settings
from app.core.container import AutomationContainer, build_container
from app.core.limiter import limiter
from app.domain.entities.contact import ContactEntity
from app.domain.entities.workflow import AutomationWorkflowEntity
from app.domain.enums import MessageChannel
from app.infrastructure.persistence.repositories import (
    InMemoryContactStore,
    InMemoryWorkflowStore,
)
from app.infrastructure.services import (
    InMemoryExecutionHistory,
    StaticSubscriptionGuard,
)
from app.main import create_app

TENANT_ID = "tenant-1"
OTHER_TENANT_ID = "tenant-2"


class RecordingDispatcher:
    """Campaign dispatcher double: records every send, fails when told to."""

    def __init__(self) -> None:
        self.sent: list[tuple[MessageChannel, EmailContent | SmsContent, str]] = []
        self.failed_count = 0

    async def send_single_recipient(
        self,
        channel: MessageChannel,
        content: EmailContent | SmsContent,
        recipient: str,
    ) -> DispatchResult:
        self.sent.append((channel, content, recipient))
        return DispatchResult(
            campaign_id=f"campaign-{len(self.sent)}",
            failed_count=self.failed_count,
            results=[{"recipient": recipient}],
        )


class InstantDelayScheduler:
    """Delay scheduler double: records requested waits without sleeping."""

    def __init__(self) -> None:
        self.waits: list[float] = []

    async def wait(self, minutes: float) -> None:
        self.waits.append(minutes)


@pytest.fixture(autouse=True)
def _fresh_settings():
    """Each test sees settings built from the current environment."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def make_workflow() -> Callable[..., AutomationWorkflowEntity]:
    """Factory for stored workflow definitions (raw trigger and action dicts)."""

    def _make(
        workflow_id: str = "wf-1",
        *,
        tenant_id: str = TENANT_ID,
        trigger_type: str = "order_created",
        conditions: list[dict[str, Any]] | None = None,
        actions: list[dict[str, Any]] | None = None,
        is_active: bool = True,
        name: str = "Welcome flow",
    ) -> AutomationWorkflowEntity:
        return AutomationWorkflowEntity.from_dict(
            {
                "id": workflow_id,
                "tenantId": tenant_id,
                "name": name,
                "trigger": {"type": trigger_type, "conditions": conditions or []},
                "actions": actions if actions is not None else [],
                "isActive": is_active,
            }
        )

    return _make


@pytest.fixture
def make_contact() -> Callable[..., ContactEntity]:
    def _make(contact_id: str = "contact-1", **overrides: Any) -> ContactEntity:
        fields: dict[str, Any] = {
            "id": contact_id,
            "tenant_id": TENANT_ID,
            "email": "a@b.com",
            "first_name": "Ada",
            "last_name": "Lovelace",
            "phone": "+15550001111",
            "email_consent": True,
            "sms_consent": True,
            "tags": ("existing",),
            "total_spent": 120.0,
            "order_count": 3,
        }
        fields.update(overrides)
        return ContactEntity(**fields)

    return _make


@pytest.fixture
def workflow_store() -> InMemoryWorkflowStore:
    return InMemoryWorkflowStore()


@pytest.fixture
def contact_store() -> InMemoryContactStore:
    return InMemoryContactStore()


@pytest.fixture
def dispatcher() -> RecordingDispatcher:
    return RecordingDispatcher()


@pytest.fixture
def delay_scheduler() -> InstantDelayScheduler:
    return InstantDelayScheduler()


@pytest.fixture
def subscription_guard() -> StaticSubscriptionGuard:
    return StaticSubscriptionGuard()


@pytest.fixture
def history() -> InMemoryExecutionHistory:
    return InMemoryExecutionHistory(limit=100)


@pytest.fixture
def container(
    workflow_store: InMemoryWorkflowStore,
    contact_store: InMemoryContactStore,
    dispatcher: RecordingDispatcher,
    delay_scheduler: InstantDelayScheduler,
    subscription_guard: StaticSubscriptionGuard,
    history: InMemoryExecutionHistory,
) -> AutomationContainer:
    """Automation core wired to in-memory collaborators and test doubles."""
    return build_container(
        workflow_store=workflow_store,
        contact_store=contact_store,
        campaign_dispatcher=dispatcher,
        subscription_guard=subscription_guard,
        delay_scheduler=delay_scheduler,
        history=history,
    )


@pytest.fixture
def engine(container: AutomationContainer):
    return container.engine


@pytest.fixture
def manager(container: AutomationContainer):
    return container.manager


@pytest.fixture
async def client(container: AutomationContainer) -> AsyncClient:
    """Async HTTP client against an app built around the test container (ASGI)."""
    limiter.reset()
    app = create_app(container)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
def tenant_headers() -> dict[str, str]:
    return {"X-Tenant-ID": TENANT_ID}
