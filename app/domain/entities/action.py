"""Workflow action domain types.

Actions are a closed variant: ActionType selects exactly one config
dataclass. Stored action JSON is validated exhaustively and converted into
these types before any action runs, so a malformed config never reaches
dispatch.
"""

from __future__ import annotations

import math
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Union

from app.domain.enums import ActionType
from app.domain.exceptions import ValidationException

# Stored keys for update_customer, mapped to contact fields.
CUSTOMER_UPDATE_FIELDS: dict[str, str] = {
    "firstName": "first_name",
    "lastName": "last_name",
    "phone": "phone",
    "segments": "segments",
}


def _pick(config: Mapping[str, Any], camel: str, snake: str) -> Any:
    """Read a config key stored in camelCase, accepting snake_case as well."""
    if camel in config:
        return config[camel]
    return config.get(snake)


@dataclass(frozen=True)
class EmailActionConfig:
    subject: str
    html_content: str
    from_email: str
    from_name: str
    text_content: str | None = None
    template_id: str | None = None

    @classmethod
    def from_dict(cls, config: Mapping[str, Any]) -> EmailActionConfig:
        return cls(
            subject=str(config["subject"]),
            html_content=str(_pick(config, "htmlContent", "html_content")),
            from_email=str(_pick(config, "fromEmail", "from_email")),
            from_name=str(_pick(config, "fromName", "from_name")),
            text_content=_pick(config, "textContent", "text_content") or None,
            template_id=_pick(config, "templateId", "template_id"),
        )


@dataclass(frozen=True)
class SmsActionConfig:
    message: str
    from_number: str
    template_id: str | None = None

    @classmethod
    def from_dict(cls, config: Mapping[str, Any]) -> SmsActionConfig:
        return cls(
            message=str(config["message"]),
            from_number=str(_pick(config, "fromNumber", "from_number")),
            template_id=_pick(config, "templateId", "template_id"),
        )


@dataclass(frozen=True)
class TagActionConfig:
    tags: tuple[str, ...]

    @classmethod
    def from_dict(cls, config: Mapping[str, Any]) -> TagActionConfig:
        return cls(tags=tuple(str(t) for t in config["tags"]))


@dataclass(frozen=True)
class CustomerUpdateActionConfig:
    """Only the keys present in the stored updates object; absent keys are left untouched."""

    updates: Mapping[str, Any]

    @classmethod
    def from_dict(cls, config: Mapping[str, Any]) -> CustomerUpdateActionConfig:
        raw = config["updates"]
        return cls(updates={k: raw[k] for k in CUSTOMER_UPDATE_FIELDS if k in raw})

    def contact_fields(self) -> dict[str, Any]:
        """Return the updates keyed by contact field name (segments as a tuple)."""
        fields: dict[str, Any] = {}
        for key, value in self.updates.items():
            if key == "segments" and value is not None:
                value = tuple(value)
            fields[CUSTOMER_UPDATE_FIELDS[key]] = value
        return fields


@dataclass(frozen=True)
class DelayActionConfig:
    """The delay action carries no config; its wait comes from WorkflowAction.delay."""


ActionConfig = Union[
    EmailActionConfig,
    SmsActionConfig,
    TagActionConfig,
    CustomerUpdateActionConfig,
    DelayActionConfig,
]

_CONFIG_TYPES: dict[ActionType, type] = {
    ActionType.SEND_EMAIL: EmailActionConfig,
    ActionType.SEND_SMS: SmsActionConfig,
    ActionType.ADD_TAG: TagActionConfig,
    ActionType.REMOVE_TAG: TagActionConfig,
    ActionType.UPDATE_CUSTOMER: CustomerUpdateActionConfig,
    ActionType.DELAY: DelayActionConfig,
}


def _is_number(value: Any) -> bool:
    return (
        isinstance(value, (int, float))
        and not isinstance(value, bool)
        and not math.isnan(value)
    )


def validate_action_config(action: Mapping[str, Any]) -> list[str]:
    """Return every problem with a stored action (empty list when valid)."""
    errors: list[str] = []
    if not isinstance(action, Mapping):
        return ["Action must be an object"]

    if not action.get("id"):
        errors.append("Action ID is required")
    action_type = action.get("type")
    if not action_type:
        errors.append("Action type is required")
    elif not isinstance(action_type, str) or action_type not in ActionType.values():
        errors.append(f"Invalid action type: {action_type}")

    config = action.get("config") or {}
    if not isinstance(config, Mapping):
        errors.append("Action config must be an object")
        config = {}

    if action_type == ActionType.SEND_EMAIL:
        if not config.get("subject"):
            errors.append("Email action: subject is required")
        if not _pick(config, "htmlContent", "html_content"):
            errors.append("Email action: htmlContent is required")
        if not _pick(config, "fromEmail", "from_email"):
            errors.append("Email action: fromEmail is required")
        if not _pick(config, "fromName", "from_name"):
            errors.append("Email action: fromName is required")
    elif action_type == ActionType.SEND_SMS:
        if not config.get("message"):
            errors.append("SMS action: message is required")
        if not _pick(config, "fromNumber", "from_number"):
            errors.append("SMS action: fromNumber is required")
    elif action_type in (ActionType.ADD_TAG, ActionType.REMOVE_TAG):
        tags = config.get("tags")
        if not isinstance(tags, list) or not tags:
            errors.append(f"{action_type} action: tags array is required")
    elif action_type == ActionType.UPDATE_CUSTOMER:
        updates = config.get("updates")
        if not isinstance(updates, Mapping) or not updates:
            errors.append("Update customer action: updates object is required")
        elif "segments" in updates and not isinstance(
            updates["segments"], (list, type(None))
        ):
            errors.append("Update customer action: segments must be an array")

    delay = action.get("delay")
    if delay is not None and (not _is_number(delay) or delay < 0):
        errors.append("Action delay must be a non-negative number")
    return errors


@dataclass(frozen=True)
class WorkflowAction:
    """One validated, typed step of a workflow."""

    id: str
    type: ActionType
    config: ActionConfig
    delay: float | None = None

    @property
    def delay_minutes(self) -> float:
        return self.delay or 0

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> WorkflowAction:
        """Validate and convert a stored action. Raises ValidationException with all errors."""
        errors = validate_action_config(raw)
        if errors:
            raise ValidationException(
                f"Invalid action {raw.get('id') if isinstance(raw, Mapping) else ''}: "
                + "; ".join(errors),
                field="actions",
                errors=errors,
            )
        action_type = ActionType(raw["type"])
        config_cls = _CONFIG_TYPES[action_type]
        config_raw = raw.get("config") or {}
        config = (
            config_cls() if config_cls is DelayActionConfig else config_cls.from_dict(config_raw)
        )
        return cls(
            id=str(raw["id"]),
            type=action_type,
            config=config,
            delay=raw.get("delay"),
        )


def parse_workflow_actions(actions_data: Any) -> list[WorkflowAction]:
    """Convert a stored actions list into typed actions.

    Missing ids become ``action_<n>`` (1-based) on a copy; the stored list is
    never mutated. Raises ValidationException when the list is not an array
    of objects or any action is invalid (all errors reported together).
    """
    if not isinstance(actions_data, Sequence) or isinstance(actions_data, (str, bytes)):
        raise ValidationException("Actions must be an array", field="actions")

    parsed: list[WorkflowAction] = []
    errors: list[str] = []
    for index, raw in enumerate(actions_data, start=1):
        if not isinstance(raw, Mapping):
            errors.append(f"Action {index}: Action must be an object")
            continue
        normalized = dict(raw)
        if not normalized.get("id"):
            normalized["id"] = f"action_{index}"
        problems = validate_action_config(normalized)
        if problems:
            errors.extend(f"Action {index}: {p}" for p in problems)
            continue
        parsed.append(WorkflowAction.from_dict(normalized))
    if errors:
        raise ValidationException(
            "Invalid workflow actions: " + "; ".join(errors),
            field="actions",
            errors=errors,
        )
    return parsed


@dataclass(frozen=True)
class ActionExecutionResult:
    """Outcome of one action; produced once and never changed."""

    action_id: str
    action_type: str
    success: bool
    executed_at: datetime
    error: str | None = None
    metadata: Mapping[str, Any] = field(default_factory=dict)
