"""Infrastructure exceptions for external delivery operations.

Dispatch errors extend AutomationException so the action executor records
them like any other action failure.
"""

from app.domain.exceptions import AutomationException


class CampaignDispatchException(AutomationException):
    """Base exception for campaign delivery operations."""


class CampaignDispatchError(CampaignDispatchException):
    """The delivery service rejected the request or could not be reached."""

    def __init__(self, channel: str, reason: str) -> None:
        super().__init__(
            f"Failed to dispatch {channel} campaign: {reason}",
            "CAMPAIGN_DISPATCH_FAILED",
            {"channel": channel, "reason": reason},
        )


class CampaignDispatchResponseError(CampaignDispatchException):
    """The delivery service answered with a body that cannot be interpreted."""

    def __init__(self, channel: str, reason: str) -> None:
        super().__init__(
            f"Invalid {channel} dispatch response: {reason}",
            "CAMPAIGN_DISPATCH_INVALID_RESPONSE",
            {"channel": channel, "reason": reason},
        )
