"""Campaign dispatchers: log-only and HTTP delivery service (implement ICampaignDispatcher)."""

from __future__ import annotations

import dataclasses
import logging
from collections.abc import Mapping
from typing import Any

import httpx

from app.application.dtos.automation import DispatchResult, EmailContent, SmsContent
from app.domain.enums import MessageChannel
from app.infrastructure.exceptions import (
    CampaignDispatchError,
    CampaignDispatchResponseError,
)
from app.shared.telemetry.logging import get_logger
from app.shared.utils.generators import generate_cuid

logger = get_logger(__name__)


def _channel_value(channel: MessageChannel | str) -> str:
    return channel.value if isinstance(channel, MessageChannel) else str(channel)


def _mask(recipient: str) -> str:
    """Keep logs free of full addresses and phone numbers."""
    if "@" in recipient:
        local, _, domain = recipient.partition("@")
        return f"{local[:1]}***@{domain}"
    return f"***{recipient[-4:]}" if len(recipient) > 4 else "***"


class LogOnlyCampaignDispatcher:
    """ICampaignDispatcher implementation that logs instead of sending.

    Use when no delivery service is configured. Every send is reported as
    delivered.
    """

    async def send_single_recipient(
        self,
        channel: MessageChannel,
        content: EmailContent | SmsContent,
        recipient: str,
    ) -> DispatchResult:
        """Log the campaign; nothing is actually sent."""
        campaign_id = f"campaign_{generate_cuid()}"
        channel_name = _channel_value(channel)
        logger.info(
            "Campaign %s (%s): would send %r to %s",
            campaign_id,
            channel_name,
            content.name,
            _mask(recipient),
        )
        if logger.isEnabledFor(logging.DEBUG):
            preview = (
                content.subject if isinstance(content, EmailContent) else content.message
            )
            logger.debug("Campaign %s preview (first 200 chars): %s", campaign_id, preview[:200])
        return DispatchResult(
            campaign_id=campaign_id,
            failed_count=0,
            results=[{"recipient": recipient, "status": "delivered"}],
        )


class HttpCampaignDispatcher:
    """Posts single-recipient campaigns to an HTTP delivery service.

    Request body: ``{"channel", "campaign", "recipient"}``. Expected reply:
    ``{"campaignId", "failedCount", "results"}``. Non-2xx replies and
    transport errors raise CampaignDispatchError.
    """

    def __init__(
        self,
        url: str,
        *,
        timeout: float = 10.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._url = url
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=timeout)

    async def aclose(self) -> None:
        """Close the HTTP client when this dispatcher created it."""
        if self._owns_client:
            await self._client.aclose()

    async def send_single_recipient(
        self,
        channel: MessageChannel,
        content: EmailContent | SmsContent,
        recipient: str,
    ) -> DispatchResult:
        channel_name = _channel_value(channel)
        body = {
            "channel": channel_name,
            "campaign": dataclasses.asdict(content),
            "recipient": recipient,
        }
        try:
            resp = await self._client.post(self._url, json=body)
            resp.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise CampaignDispatchError(
                channel_name, f"HTTP {e.response.status_code}"
            ) from e
        except httpx.HTTPError as e:
            raise CampaignDispatchError(channel_name, str(e) or type(e).__name__) from e

        try:
            payload = resp.json()
        except ValueError as e:
            raise CampaignDispatchResponseError(channel_name, "body is not JSON") from e
        result = self._parse(channel_name, payload)
        logger.info(
            "Campaign %s (%s) sent to %s: %d failed",
            result.campaign_id,
            channel_name,
            _mask(recipient),
            result.failed_count,
        )
        return result

    @staticmethod
    def _parse(channel_name: str, payload: Any) -> DispatchResult:
        if not isinstance(payload, Mapping) or not payload.get("campaignId"):
            raise CampaignDispatchResponseError(channel_name, "campaignId is missing")
        failed = payload.get("failedCount", 0)
        if not isinstance(failed, int) or isinstance(failed, bool) or failed < 0:
            raise CampaignDispatchResponseError(
                channel_name, "failedCount must be a non-negative integer"
            )
        results = payload.get("results") or []
        if not isinstance(results, list):
            raise CampaignDispatchResponseError(channel_name, "results must be an array")
        return DispatchResult(
            campaign_id=str(payload["campaignId"]),
            failed_count=failed,
            results=[r for r in results if isinstance(r, Mapping)],
        )
