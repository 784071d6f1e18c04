"""Textual placeholder substitution for message content.

Two passes: contact placeholders ({{contact.firstName}} etc.), then
{{trigger.<path>}} for every leaf of the trigger data. Tokens with no value
are left as literal text.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any

from app.domain.entities.contact import ContactEntity
from app.domain.value_objects.json_path import iter_leaves

_CONTACT_TOKEN = re.compile(r"\{\{contact\.(\w+)\}\}")
_TRIGGER_TOKEN = re.compile(r"\{\{trigger\.([^{}]+)\}\}")

_CONTACT_FIELDS: dict[str, str] = {
    "firstName": "first_name",
    "lastName": "last_name",
    "email": "email",
    "phone": "phone",
    "totalSpent": "total_spent",
    "orderCount": "order_count",
}


def stringify(value: Any) -> str:
    """Render a JSON scalar the way it reads in a message (null becomes empty)."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _contact_values(contact: ContactEntity) -> dict[str, str]:
    return {
        token: stringify(getattr(contact, attr))
        for token, attr in _CONTACT_FIELDS.items()
    }


def interpolate(
    template: str,
    trigger_data: Mapping[str, Any] | None,
    contact: ContactEntity | None = None,
) -> str:
    """Replace contact and trigger placeholders in template.

    Contact placeholders are replaced only when a contact is present. Trigger
    placeholders are replaced for leaf values only; objects and lists are
    walked (list items by index), never stringified as a whole.
    """
    if "{{" not in template:
        return template

    result = template
    if contact is not None:
        values = _contact_values(contact)
        result = _CONTACT_TOKEN.sub(
            lambda m: values.get(m.group(1), m.group(0)), result
        )

    if trigger_data:
        leaves = {path: stringify(value) for path, value in iter_leaves(trigger_data)}
        result = _TRIGGER_TOKEN.sub(
            lambda m: leaves.get(m.group(1), m.group(0)), result
        )
    return result
