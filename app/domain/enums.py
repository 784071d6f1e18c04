"""Domain enumerations for the automation core.

Fixed vocabularies: trigger event types, condition operators, action
types, execution status, and delivery channels.
"""

from enum import Enum


class _ValuesMixin:
    """Mixin that adds a values() classmethod to str Enums."""

    @classmethod
    def values(cls) -> list[str]:
        """Return all valid values as strings."""
        return [member.value for member in cls]


class TriggerEventType(_ValuesMixin, str, Enum):
    """Business events a workflow trigger can listen for."""

    ORDER_CREATED = "order_created"
    ORDER_PAID = "order_paid"
    ORDER_UPDATED = "order_updated"
    CUSTOMER_CREATED = "customer_created"
    CUSTOMER_UPDATED = "customer_updated"
    CART_ABANDONED = "cart_abandoned"
    ORDER_REFUNDED = "order_refunded"
    ORDERED_PRODUCT = "ordered_product"
    PAID_FOR_ORDER = "paid_for_order"
    PLACED_ORDER = "placed_order"
    PRODUCT_BACK_IN_STOCK = "product_back_in_stock"
    SPECIAL_OCCASION_BIRTHDAY = "special_occasion_birthday"
    STARTED_CHECKOUT = "started_checkout"
    CUSTOMER_SUBSCRIBED = "customer_subscribed"
    VIEWED_PAGE = "viewed_page"
    VIEWED_PRODUCT = "viewed_product"
    CLICKED_MESSAGE = "clicked_message"
    ENTERED_SEGMENT = "entered_segment"
    EXITED_SEGMENT = "exited_segment"
    MARKED_MESSAGE_AS_SPAM = "marked_message_as_spam"
    MESSAGE_DELIVERY_FAILED = "message_delivery_failed"
    MESSAGE_SENT = "message_sent"
    OPENED_MESSAGE = "opened_message"
    ORDER_CANCELED = "order_canceled"
    ORDER_FULFILLED = "order_fulfilled"


class ConditionOperator(_ValuesMixin, str, Enum):
    """Comparison applied between an event field and a condition value."""

    EQUALS = "equals"
    NOT_EQUALS = "not_equals"
    CONTAINS = "contains"
    GREATER_THAN = "greater_than"
    LESS_THAN = "less_than"
    IN = "in"
    NOT_IN = "not_in"


class ActionType(_ValuesMixin, str, Enum):
    """Kinds of workflow action the executor can dispatch."""

    SEND_EMAIL = "send_email"
    SEND_SMS = "send_sms"
    ADD_TAG = "add_tag"
    REMOVE_TAG = "remove_tag"
    UPDATE_CUSTOMER = "update_customer"
    DELAY = "delay"


class WorkflowExecutionStatus(_ValuesMixin, str, Enum):
    """Workflow execution lifecycle status."""

    PENDING = "pending"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"
    CANCELLED = "cancelled"

    @property
    def is_terminal(self) -> bool:
        """Return whether no further transition is allowed from this status."""
        return self in _TERMINAL_STATUSES


_TERMINAL_STATUSES = frozenset(
    {
        WorkflowExecutionStatus.COMPLETED,
        WorkflowExecutionStatus.FAILED,
        WorkflowExecutionStatus.CANCELLED,
    }
)


class MessageChannel(_ValuesMixin, str, Enum):
    """Outbound channel used by the campaign dispatcher."""

    EMAIL = "email"
    SMS = "sms"
