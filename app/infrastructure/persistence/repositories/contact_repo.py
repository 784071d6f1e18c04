"""In-memory contact store (implements IContactStore)."""

from __future__ import annotations

import dataclasses
import threading
from collections.abc import Iterable, Mapping
from typing import Any

from app.domain.entities.contact import ContactEntity
from app.domain.exceptions import ResourceNotFoundException, ValidationException

_UPDATABLE_FIELDS = frozenset(
    f.name for f in dataclasses.fields(ContactEntity) if f.name not in ("id", "tenant_id")
)


class InMemoryContactStore:
    """Contacts by id, with case-insensitive email lookup per tenant."""

    def __init__(self, contacts: Iterable[ContactEntity] = ()) -> None:
        self._contacts: dict[str, ContactEntity] = {}
        self._lock = threading.Lock()
        for contact in contacts:
            self.save(contact)

    def save(self, contact: ContactEntity) -> ContactEntity:
        with self._lock:
            self._contacts[contact.id] = contact
        return contact

    async def get_contact(self, contact_id: str) -> ContactEntity | None:
        with self._lock:
            return self._contacts.get(contact_id)

    async def find_by_email(self, tenant_id: str, email: str) -> ContactEntity | None:
        needle = email.strip().lower()
        if not needle:
            return None
        with self._lock:
            for contact in self._contacts.values():
                if contact.tenant_id == tenant_id and contact.email.lower() == needle:
                    return contact
        return None

    async def update_contact(
        self, contact_id: str, fields: Mapping[str, Any]
    ) -> ContactEntity:
        """Apply the given fields only; everything else keeps its value."""
        unknown = sorted(set(fields) - _UPDATABLE_FIELDS)
        if unknown:
            raise ValidationException(
                f"Unknown contact field(s): {', '.join(unknown)}", field="contact"
            )
        with self._lock:
            current = self._contacts.get(contact_id)
            if current is None:
                raise ResourceNotFoundException("Contact", contact_id)
            updated = dataclasses.replace(current, **dict(fields))
            self._contacts[contact_id] = updated
            return updated
