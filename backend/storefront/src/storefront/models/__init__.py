"""Pydantic models and error types for order confirmation."""

from .checkout import CHECKOUT_SESSION_COMPLETED, Address, CheckoutCompletedEvent
from .errors import (
    AuthenticationError,
    DependencyError,
    ErrorCode,
    ValidationError,
    WebhookError,
)
from .order import AddressKind, Order, OrderAddress

__all__ = [
    "CHECKOUT_SESSION_COMPLETED",
    "Address",
    "AddressKind",
    "AuthenticationError",
    "CheckoutCompletedEvent",
    "DependencyError",
    "ErrorCode",
    "Order",
    "OrderAddress",
    "ValidationError",
    "WebhookError",
]
