"""Action executor: run a workflow's actions in order with stop-on-first-failure.

execute_action never raises for an action failure; the error is captured
in the returned ActionExecutionResult. Task cancellation is not captured.
"""

from __future__ import annotations

import asyncio
import weakref
from collections.abc import AsyncIterator, Awaitable, Callable, Sequence
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING, Any

from app.application.dtos.automation import (
    ActionExecutionContext,
    EmailContent,
    SmsContent,
)
from app.application.services.template_interpolation import interpolate
from app.domain.entities.action import (
    ActionExecutionResult,
    CustomerUpdateActionConfig,
    EmailActionConfig,
    SmsActionConfig,
    TagActionConfig,
    WorkflowAction,
)
from app.domain.entities.contact import ContactEntity
from app.domain.enums import ActionType, MessageChannel
from app.domain.exceptions import ActionExecutionError
from app.shared.telemetry.logging import get_logger
from app.shared.telemetry.tracing import traced
from app.shared.utils.datetime import utc_now

if TYPE_CHECKING:
    from app.application.interfaces.repositories import IContactStore
    from app.application.interfaces.services import (
        ICampaignDispatcher,
        IDelayScheduler,
    )

logger = get_logger(__name__)

_Handler = Callable[
    [WorkflowAction, ActionExecutionContext], Awaitable[dict[str, Any]]
]


def campaign_name(workflow_id: str, action_id: str) -> str:
    """Name of the single-recipient campaign created for one action run."""
    return f"Automation: {workflow_id} - {action_id}"


class ActionExecutor:
    """Executes workflow actions against the contact store and campaign dispatcher."""

    def __init__(
        self,
        campaign_dispatcher: ICampaignDispatcher,
        contact_store: IContactStore,
        delay_scheduler: IDelayScheduler,
    ) -> None:
        self._dispatcher = campaign_dispatcher
        self._contact_store = contact_store
        self._delay_scheduler = delay_scheduler
        self._handlers: dict[ActionType, _Handler] = {
            ActionType.SEND_EMAIL: self._send_email,
            ActionType.SEND_SMS: self._send_sms,
            ActionType.ADD_TAG: self._add_tag,
            ActionType.REMOVE_TAG: self._remove_tag,
            ActionType.UPDATE_CUSTOMER: self._update_customer,
            ActionType.DELAY: self._delay,
        }
        self._contact_locks: weakref.WeakValueDictionary[str, asyncio.Lock] = (
            weakref.WeakValueDictionary()
        )

    async def execute_actions(
        self,
        actions: Sequence[WorkflowAction],
        context: ActionExecutionContext,
    ) -> list[ActionExecutionResult]:
        """Run actions in order; stop after the first failed result.

        Actions after a failure are not attempted and have no result.
        """
        results: list[ActionExecutionResult] = []
        for action in actions:
            result = await self.execute_action(action, context)
            results.append(result)
            if not result.success:
                logger.warning(
                    "Action %s (%s) failed in workflow %s, stopping: %s",
                    action.id,
                    action.type.value,
                    context.workflow_id,
                    result.error,
                )
                break
        return results

    @traced("automation.execute_action")
    async def execute_action(
        self,
        action: WorkflowAction,
        context: ActionExecutionContext,
    ) -> ActionExecutionResult:
        """Apply the action's delay, then dispatch by type. Never raises on failure."""
        try:
            if action.delay_minutes > 0:
                await self._delay_scheduler.wait(action.delay_minutes)
            metadata = await self._handlers[action.type](action, context)
        except Exception as e:
            return ActionExecutionResult(
                action_id=action.id,
                action_type=action.type.value,
                success=False,
                executed_at=utc_now(),
                error=str(e) or e.__class__.__name__,
            )
        return ActionExecutionResult(
            action_id=action.id,
            action_type=action.type.value,
            success=True,
            executed_at=utc_now(),
            metadata=metadata,
        )

    async def _resolve_contact(
        self, context: ActionExecutionContext
    ) -> ContactEntity | None:
        if context.contact is not None:
            if context.contact.tenant_id != context.tenant_id:
                raise ActionExecutionError(f"Contact not found: {context.contact.id}")
            return context.contact
        if not context.contact_id:
            return None
        return await self._load_contact(context.contact_id, context.tenant_id)

    async def _load_contact(self, contact_id: str, tenant_id: str) -> ContactEntity:
        """Load a contact of the tenant; another tenant's contact counts as missing."""
        contact = await self._contact_store.get_contact(contact_id)
        if contact is None or contact.tenant_id != tenant_id:
            raise ActionExecutionError(f"Contact not found: {contact_id}")
        return contact

    @asynccontextmanager
    async def _contact_lock(self, contact_id: str) -> AsyncIterator[None]:
        """Serialize read-modify-write updates of one contact across executions."""
        lock = self._contact_locks.get(contact_id)
        if lock is None:
            lock = asyncio.Lock()
            self._contact_locks[contact_id] = lock
        async with lock:
            yield

    async def _send_email(
        self, action: WorkflowAction, context: ActionExecutionContext
    ) -> dict[str, Any]:
        config: EmailActionConfig = action.config  # type: ignore[assignment]
        contact = await self._resolve_contact(context)
        if contact is None:
            raise ActionExecutionError(
                "No contact available for email action", ActionType.SEND_EMAIL.value
            )
        if not contact.has_email_consent():
            raise ActionExecutionError(
                "Contact has not consented to email marketing",
                ActionType.SEND_EMAIL.value,
            )

        data = context.trigger_data
        content = EmailContent(
            name=campaign_name(context.workflow_id, action.id),
            subject=interpolate(config.subject, data, contact),
            html_content=interpolate(config.html_content, data, contact),
            text_content=(
                interpolate(config.text_content, data, contact)
                if config.text_content
                else None
            ),
            from_email=config.from_email,
            from_name=config.from_name,
            template_id=config.template_id,
        )
        result = await self._dispatcher.send_single_recipient(
            MessageChannel.EMAIL, content, contact.email
        )
        if result.failed_count > 0:
            raise ActionExecutionError(
                f"Failed to send email: {result.failed_count} failed "
                f"out of {result.total_count}",
                ActionType.SEND_EMAIL.value,
            )
        return {
            "campaignId": result.campaign_id,
            "recipientEmail": contact.email,
            "deliveredCount": result.delivered_count,
        }

    async def _send_sms(
        self, action: WorkflowAction, context: ActionExecutionContext
    ) -> dict[str, Any]:
        config: SmsActionConfig = action.config  # type: ignore[assignment]
        contact = await self._resolve_contact(context)
        if contact is None:
            raise ActionExecutionError(
                "No contact available for SMS action", ActionType.SEND_SMS.value
            )
        if not contact.has_sms_consent():
            raise ActionExecutionError(
                "Contact has not consented to SMS marketing", ActionType.SEND_SMS.value
            )
        if not contact.phone:
            raise ActionExecutionError(
                "Contact has no phone number", ActionType.SEND_SMS.value
            )

        content = SmsContent(
            name=campaign_name(context.workflow_id, action.id),
            message=interpolate(config.message, context.trigger_data, contact),
            from_number=config.from_number,
            template_id=config.template_id,
        )
        result = await self._dispatcher.send_single_recipient(
            MessageChannel.SMS, content, contact.phone
        )
        if result.failed_count > 0:
            raise ActionExecutionError(
                f"Failed to send SMS: {result.failed_count} failed "
                f"out of {result.total_count}",
                ActionType.SEND_SMS.value,
            )
        return {
            "campaignId": result.campaign_id,
            "recipientPhone": contact.phone,
            "deliveredCount": result.delivered_count,
        }

    async def _add_tag(
        self, action: WorkflowAction, context: ActionExecutionContext
    ) -> dict[str, Any]:
        config: TagActionConfig = action.config  # type: ignore[assignment]
        if not context.contact_id:
            raise ActionExecutionError(
                "No contact ID available for tag action", action.type.value
            )
        async with self._contact_lock(context.contact_id):
            contact = await self._load_contact(context.contact_id, context.tenant_id)
            tags = tuple(dict.fromkeys((*contact.tags, *config.tags)))
            updated = await self._contact_store.update_contact(
                context.contact_id, {"tags": tags}
            )
        return {
            "contactId": context.contact_id,
            "addedTags": list(config.tags),
            "finalTags": list(updated.tags),
        }

    async def _remove_tag(
        self, action: WorkflowAction, context: ActionExecutionContext
    ) -> dict[str, Any]:
        config: TagActionConfig = action.config  # type: ignore[assignment]
        if not context.contact_id:
            raise ActionExecutionError(
                "No contact ID available for tag action", action.type.value
            )
        removed = set(config.tags)
        async with self._contact_lock(context.contact_id):
            contact = await self._load_contact(context.contact_id, context.tenant_id)
            tags = tuple(
                tag for tag in dict.fromkeys(contact.tags) if tag not in removed
            )
            updated = await self._contact_store.update_contact(
                context.contact_id, {"tags": tags}
            )
        return {
            "contactId": context.contact_id,
            "removedTags": list(config.tags),
            "finalTags": list(updated.tags),
        }

    async def _update_customer(
        self, action: WorkflowAction, context: ActionExecutionContext
    ) -> dict[str, Any]:
        config: CustomerUpdateActionConfig = action.config  # type: ignore[assignment]
        if not context.contact_id:
            raise ActionExecutionError(
                "No contact ID available for customer update action",
                ActionType.UPDATE_CUSTOMER.value,
            )
        async with self._contact_lock(context.contact_id):
            await self._load_contact(context.contact_id, context.tenant_id)
            await self._contact_store.update_contact(
                context.contact_id, config.contact_fields()
            )
        return {"contactId": context.contact_id, "updates": dict(config.updates)}

    async def _delay(
        self, action: WorkflowAction, context: ActionExecutionContext
    ) -> dict[str, Any]:
        # The wait itself already happened before dispatch.
        return {"delayMinutes": action.delay_minutes}
