"""Tests for ActionExecutor: per-action dispatch, failure capture, stop-on-failure."""

import asyncio
from unittest.mock import AsyncMock

import pytest

from app.application.dtos.automation import ActionExecutionContext, EmailContent, SmsContent
from app.application.services.action_executor import ActionExecutor
from app.domain.entities.action import WorkflowAction, parse_workflow_actions
from app.domain.enums import MessageChannel
from app.infrastructure.persistence.repositories import InMemoryContactStore

TENANT = "tenant-1"

EMAIL = {
    "id": "email-1",
    "type": "send_email",
    "config": {
        "subject": "Thanks {{contact.firstName}}",
        "htmlContent": "<p>Order {{trigger.order.number}}</p>",
        "fromEmail": "shop@example.com",
        "fromName": "Shop",
    },
}
SMS = {
    "id": "sms-1",
    "type": "send_sms",
    "config": {"message": "Hi {{contact.firstName}}", "fromNumber": "+15550000000"},
}


@pytest.fixture
def executor(dispatcher, contact_store, delay_scheduler) -> ActionExecutor:
    return ActionExecutor(dispatcher, contact_store, delay_scheduler)


def _context(contact=None, contact_id=None, data=None) -> ActionExecutionContext:
    return ActionExecutionContext(
        workflow_id="wf-1",
        tenant_id=TENANT,
        trigger_data=data or {"order": {"number": 1001}},
        contact_id=contact_id or (contact.id if contact else None),
        contact=contact,
    )


async def test_send_email_interpolates_and_records_metadata(
    executor, dispatcher, make_contact
) -> None:
    contact = make_contact()
    result = await executor.execute_action(WorkflowAction.from_dict(EMAIL), _context(contact))

    assert result.success is True
    channel, content, recipient = dispatcher.sent[0]
    assert channel is MessageChannel.EMAIL
    assert isinstance(content, EmailContent)
    assert content.name == "Automation: wf-1 - email-1"
    assert content.subject == "Thanks Ada"
    assert content.html_content == "<p>Order 1001</p>"
    assert recipient == "a@b.com"
    assert result.metadata == {
        "campaignId": "campaign-1",
        "recipientEmail": "a@b.com",
        "deliveredCount": 1,
    }


async def test_send_email_without_contact_fails(executor, dispatcher) -> None:
    result = await executor.execute_action(WorkflowAction.from_dict(EMAIL), _context())
    assert result.success is False
    assert result.error == "No contact available for email action"
    assert dispatcher.sent == []


async def test_send_email_without_consent_fails(executor, make_contact) -> None:
    contact = make_contact(email_consent=False)
    result = await executor.execute_action(WorkflowAction.from_dict(EMAIL), _context(contact))
    assert result.error == "Contact has not consented to email marketing"


async def test_send_email_delivery_failure(executor, dispatcher, make_contact) -> None:
    dispatcher.failed_count = 1
    result = await executor.execute_action(
        WorkflowAction.from_dict(EMAIL), _context(make_contact())
    )
    assert result.success is False
    assert result.error == "Failed to send email: 1 failed out of 1"


async def test_send_email_loads_contact_by_id(executor, contact_store, make_contact) -> None:
    contact_store.save(make_contact("c-9"))
    result = await executor.execute_action(
        WorkflowAction.from_dict(EMAIL), _context(contact_id="c-9")
    )
    assert result.success is True


async def test_send_sms_requires_consent_and_phone(executor, dispatcher, make_contact) -> None:
    action = WorkflowAction.from_dict(SMS)

    no_consent = await executor.execute_action(action, _context(make_contact(sms_consent=False)))
    no_phone = await executor.execute_action(action, _context(make_contact(phone=None)))
    sent = await executor.execute_action(action, _context(make_contact()))

    assert no_consent.error == "Contact has not consented to SMS marketing"
    assert no_phone.error == "Contact has no phone number"
    assert sent.success is True
    channel, content, recipient = dispatcher.sent[-1]
    assert channel is MessageChannel.SMS
    assert isinstance(content, SmsContent)
    assert content.message == "Hi Ada"
    assert sent.metadata["recipientPhone"] == recipient == "+15550001111"


async def test_add_tag_unions_tags(executor, contact_store, make_contact) -> None:
    contact_store.save(make_contact(tags=("existing", "vip")))
    action = WorkflowAction.from_dict(
        {"id": "t", "type": "add_tag", "config": {"tags": ["vip", "new"]}}
    )
    result = await executor.execute_action(action, _context(contact_id="contact-1"))

    assert result.success is True
    assert result.metadata["finalTags"] == ["existing", "vip", "new"]
    assert (await contact_store.get_contact("contact-1")).tags == ("existing", "vip", "new")


async def test_remove_tag(executor, contact_store, make_contact) -> None:
    contact_store.save(make_contact(tags=("a", "b", "c")))
    action = WorkflowAction.from_dict(
        {"id": "t", "type": "remove_tag", "config": {"tags": ["b", "zzz"]}}
    )
    result = await executor.execute_action(action, _context(contact_id="contact-1"))
    assert result.metadata["removedTags"] == ["b", "zzz"]
    assert result.metadata["finalTags"] == ["a", "c"]


async def test_tag_action_without_contact_id(executor) -> None:
    action = WorkflowAction.from_dict({"id": "t", "type": "add_tag", "config": {"tags": ["x"]}})
    result = await executor.execute_action(action, _context())
    assert result.error == "No contact ID available for tag action"


async def test_update_customer_applies_only_present_fields(
    executor, contact_store, make_contact
) -> None:
    contact_store.save(make_contact(first_name="Ada", last_name="Lovelace"))
    action = WorkflowAction.from_dict(
        {"id": "u", "type": "update_customer", "config": {"updates": {"firstName": "Grace"}}}
    )
    result = await executor.execute_action(action, _context(contact_id="contact-1"))

    updated = await contact_store.get_contact("contact-1")
    assert result.success is True
    assert result.metadata == {"contactId": "contact-1", "updates": {"firstName": "Grace"}}
    assert updated.first_name == "Grace"
    assert updated.last_name == "Lovelace"


async def test_update_customer_unknown_contact_fails(executor) -> None:
    action = WorkflowAction.from_dict(
        {"id": "u", "type": "update_customer", "config": {"updates": {"phone": "1"}}}
    )
    result = await executor.execute_action(action, _context(contact_id="ghost"))
    assert result.success is False
    assert result.error == "Contact not found: ghost"


async def test_delay_waits_once_before_running(executor, delay_scheduler) -> None:
    action = WorkflowAction.from_dict({"id": "d", "type": "delay", "delay": 15})
    result = await executor.execute_action(action, _context())
    assert delay_scheduler.waits == [15]
    assert result.metadata == {"delayMinutes": 15}


async def test_delay_applies_to_any_action_type(executor, delay_scheduler, make_contact) -> None:
    action = WorkflowAction.from_dict({**EMAIL, "delay": 2})
    result = await executor.execute_action(action, _context(make_contact()))
    assert result.success is True
    assert delay_scheduler.waits == [2]


async def test_dispatcher_exception_is_captured(contact_store, delay_scheduler, make_contact) -> None:
    dispatcher = AsyncMock()
    dispatcher.send_single_recipient.side_effect = RuntimeError("smtp down")
    executor = ActionExecutor(dispatcher, contact_store, delay_scheduler)
    result = await executor.execute_action(
        WorkflowAction.from_dict(EMAIL), _context(make_contact())
    )
    assert result.success is False
    assert result.error == "smtp down"


async def test_cancellation_is_not_swallowed(dispatcher, contact_store) -> None:
    scheduler = AsyncMock()
    scheduler.wait.side_effect = asyncio.CancelledError()
    executor = ActionExecutor(dispatcher, contact_store, scheduler)
    action = WorkflowAction.from_dict({"id": "d", "type": "delay", "delay": 1})
    with pytest.raises(asyncio.CancelledError):
        await executor.execute_action(action, _context())


async def test_execute_actions_stops_after_first_failure(
    executor, dispatcher, contact_store, make_contact
) -> None:
    contact_store.save(make_contact())
    dispatcher.failed_count = 1
    actions = parse_workflow_actions(
        [
            {"type": "add_tag", "config": {"tags": ["first"]}},
            {"type": "send_sms", "config": {"message": "x", "fromNumber": "1"}},
            {"type": "add_tag", "config": {"tags": ["never"]}},
        ]
    )
    results = await executor.execute_actions(actions, _context(contact_id="contact-1"))

    assert [r.action_id for r in results] == ["action_1", "action_2"]
    assert [r.success for r in results] == [True, False]
    tags = (await contact_store.get_contact("contact-1")).tags
    assert "first" in tags
    assert "never" not in tags


async def test_execute_actions_all_succeed(executor, contact_store, make_contact) -> None:
    contact_store.save(make_contact())
    actions = parse_workflow_actions(
        [
            {"type": "add_tag", "config": {"tags": ["a"]}},
            {"type": "delay", "delay": 1},
            {"type": "remove_tag", "config": {"tags": ["a"]}},
        ]
    )
    results = await executor.execute_actions(actions, _context(contact_id="contact-1"))
    assert len(results) == 3
    assert all(r.success for r in results)


async def test_contact_of_another_tenant_is_not_found(
    executor, dispatcher, contact_store, make_contact
) -> None:
    contact_store.save(make_contact("foreign", tenant_id="tenant-2", tags=()))
    tag = WorkflowAction.from_dict({"id": "t", "type": "add_tag", "config": {"tags": ["x"]}})
    update = WorkflowAction.from_dict(
        {"id": "u", "type": "update_customer", "config": {"updates": {"firstName": "Eve"}}}
    )

    tagged = await executor.execute_action(tag, _context(contact_id="foreign"))
    updated = await executor.execute_action(update, _context(contact_id="foreign"))
    emailed = await executor.execute_action(
        WorkflowAction.from_dict(EMAIL), _context(contact_id="foreign")
    )
    direct = await executor.execute_action(
        WorkflowAction.from_dict(EMAIL), _context(make_contact("foreign", tenant_id="tenant-2"))
    )

    for result in (tagged, updated, emailed, direct):
        assert result.success is False
        assert result.error == "Contact not found: foreign"
    contact = await contact_store.get_contact("foreign")
    assert contact.tags == ()
    assert contact.first_name == "Ada"
    assert dispatcher.sent == []


class YieldingContactStore(InMemoryContactStore):
    """Contact store that suspends on every read, like a networked store."""

    async def get_contact(self, contact_id):
        await asyncio.sleep(0)
        return await super().get_contact(contact_id)


async def test_concurrent_tag_updates_on_one_contact_are_not_lost(
    dispatcher, delay_scheduler, make_contact
) -> None:
    store = YieldingContactStore([make_contact(tags=())])
    executor = ActionExecutor(dispatcher, store, delay_scheduler)
    context = _context(contact_id="contact-1")

    def tag(name: str) -> WorkflowAction:
        return WorkflowAction.from_dict(
            {"id": name, "type": "add_tag", "config": {"tags": [name]}}
        )

    results = await asyncio.gather(
        executor.execute_action(tag("a"), context),
        executor.execute_action(tag("b"), context),
        executor.execute_action(
            WorkflowAction.from_dict(
                {"id": "r", "type": "remove_tag", "config": {"tags": ["zzz"]}}
            ),
            context,
        ),
    )

    assert all(r.success for r in results)
    assert set((await store.get_contact("contact-1")).tags) == {"a", "b"}
