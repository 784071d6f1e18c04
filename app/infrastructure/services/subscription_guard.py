"""Static subscription guard (implements ISubscriptionGuard)."""

from __future__ import annotations

from collections.abc import Iterable


class StaticSubscriptionGuard:
    """Every tenant is active except those explicitly marked inactive."""

    def __init__(self, inactive_tenants: Iterable[str] = ()) -> None:
        self._inactive = set(inactive_tenants)

    def deactivate(self, tenant_id: str) -> None:
        self._inactive.add(tenant_id)

    def activate(self, tenant_id: str) -> None:
        self._inactive.discard(tenant_id)

    async def is_tenant_active(self, tenant_id: str) -> bool:
        return tenant_id not in self._inactive
