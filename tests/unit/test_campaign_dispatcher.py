"""Tests for the log-only and HTTP campaign dispatchers."""

import json

import httpx
import pytest

from app.application.dtos.automation import EmailContent, SmsContent
from app.domain.enums import MessageChannel
from app.infrastructure.exceptions import (
    CampaignDispatchError,
    CampaignDispatchResponseError,
)
from app.infrastructure.services import HttpCampaignDispatcher, LogOnlyCampaignDispatcher

URL = "https://delivery.example.com/campaigns"

EMAIL = EmailContent(
    name="Automation: wf-1 - a1",
    subject="Hello",
    html_content="<p>Hi</p>",
    from_email="shop@example.com",
    from_name="Shop",
)
SMS = SmsContent(name="Automation: wf-1 - a2", message="Hi", from_number="+15550000000")


def _dispatcher(handler) -> HttpCampaignDispatcher:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return HttpCampaignDispatcher(URL, client=client)


async def test_log_only_reports_delivery() -> None:
    result = await LogOnlyCampaignDispatcher().send_single_recipient(
        MessageChannel.SMS, SMS, "+15550001111"
    )
    assert result.campaign_id.startswith("campaign_")
    assert result.failed_count == 0
    assert result.delivered_count == 1


async def test_http_posts_campaign_and_parses_reply() -> None:
    seen: list[dict] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(json.loads(request.content))
        return httpx.Response(
            200,
            json={"campaignId": "cmp-9", "failedCount": 0, "results": [{"ok": True}]},
        )

    result = await _dispatcher(handler).send_single_recipient(
        MessageChannel.EMAIL, EMAIL, "a@b.com"
    )

    assert result.campaign_id == "cmp-9"
    assert result.total_count == 1
    assert seen[0]["channel"] == "email"
    assert seen[0]["recipient"] == "a@b.com"
    assert seen[0]["campaign"]["subject"] == "Hello"
    assert seen[0]["campaign"]["html_content"] == "<p>Hi</p>"


async def test_http_reports_failed_recipients() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(
            200, json={"campaignId": "cmp-1", "failedCount": 1, "results": [{}]}
        )

    result = await _dispatcher(handler).send_single_recipient(
        MessageChannel.SMS, SMS, "+1555"
    )
    assert result.failed_count == 1
    assert result.delivered_count == 0


async def test_http_error_status_raises() -> None:
    dispatcher = _dispatcher(lambda request: httpx.Response(503))
    with pytest.raises(CampaignDispatchError) as exc_info:
        await dispatcher.send_single_recipient(MessageChannel.EMAIL, EMAIL, "a@b.com")
    assert exc_info.value.message == "Failed to dispatch email campaign: HTTP 503"


async def test_transport_error_raises() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(CampaignDispatchError):
        await _dispatcher(handler).send_single_recipient(
            MessageChannel.EMAIL, EMAIL, "a@b.com"
        )


@pytest.mark.parametrize(
    "reply",
    [
        httpx.Response(200, text="not json"),
        httpx.Response(200, json={"failedCount": 0}),
        httpx.Response(200, json={"campaignId": "c", "failedCount": -1}),
        httpx.Response(200, json={"campaignId": "c", "results": "nope"}),
    ],
)
async def test_malformed_reply_raises(reply: httpx.Response) -> None:
    dispatcher = _dispatcher(lambda request: reply)
    with pytest.raises(CampaignDispatchResponseError):
        await dispatcher.send_single_recipient(MessageChannel.EMAIL, EMAIL, "a@b.com")


async def test_aclose_leaves_injected_client_open() -> None:
    client = httpx.AsyncClient(transport=httpx.MockTransport(lambda r: httpx.Response(204)))
    await HttpCampaignDispatcher(URL, client=client).aclose()
    assert client.is_closed is False
    await client.aclose()
