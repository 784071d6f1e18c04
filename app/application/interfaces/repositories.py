"""Repository interfaces (ports) for the application layer.

Protocols define contracts for workflow and contact persistence. The
automation core reads workflows and never writes them; contacts are
updated only through update_contact.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from app.domain.entities.contact import ContactEntity
    from app.domain.entities.workflow import AutomationWorkflowEntity


class IWorkflowStore(Protocol):
    """Protocol for reading workflow definitions."""

    async def get_active_workflows(
        self, tenant_id: str
    ) -> list[AutomationWorkflowEntity]:
        """Return the tenant's active workflows in the store's listing order."""
        ...

    async def get_workflow(self, workflow_id: str) -> AutomationWorkflowEntity | None:
        """Return the workflow by id, or None."""
        ...

    async def list_workflows(self, tenant_id: str) -> list[AutomationWorkflowEntity]:
        """Return every workflow of the tenant, active or not."""
        ...


class IContactStore(Protocol):
    """Protocol for contact lookup and partial update."""

    async def get_contact(self, contact_id: str) -> ContactEntity | None:
        ...

    async def find_by_email(self, tenant_id: str, email: str) -> ContactEntity | None:
        """Find a tenant's contact by email (case-insensitive)."""
        ...

    async def update_contact(
        self, contact_id: str, fields: Mapping[str, Any]
    ) -> ContactEntity:
        """Apply only the given fields and return the updated contact.

        Raises ResourceNotFoundException when the contact does not exist.
        """
        ...
