"""Contact domain entity.

A contact is a tenant's customer record as seen by automations: identity,
consent flags, tags and segments, plus purchase totals used in templates.
"""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class ContactEntity:
    """Read-model of a contact; updates go through the contact store."""

    id: str
    tenant_id: str
    email: str
    first_name: str | None = None
    last_name: str | None = None
    phone: str | None = None
    email_consent: bool = False
    sms_consent: bool = False
    tags: tuple[str, ...] = ()
    segments: tuple[str, ...] = ()
    total_spent: float = 0.0
    order_count: int = 0
    metadata: dict[str, object] = field(default_factory=dict, compare=False)

    def has_email_consent(self) -> bool:
        """Return whether the contact accepts marketing email."""
        return self.email_consent and bool(self.email)

    def has_sms_consent(self) -> bool:
        """Return whether the contact accepts marketing SMS (phone checked separately)."""
        return self.sms_consent
