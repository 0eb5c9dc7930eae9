"""Standard error codes for the order webhook receiver.

Every failure raised while processing a webhook is a WebhookError subclass
carrying an ErrorCode. The HTTP layer maps the subclass to a status code and
never exposes the message or details to the caller.
"""

from enum import Enum
from typing import Optional


class ErrorCode(str, Enum):
    """Error codes grouped by failure category."""

    # Authentication error codes (ERR_AUTH_001-ERR_AUTH_002)
    MISSING_SIGNATURE = "ERR_AUTH_001"
    INVALID_WEBHOOK_SIGNATURE = "ERR_AUTH_002"

    # Validation error codes (ERR_VAL_001-ERR_VAL_003)
    MISSING_CUSTOMER_EMAIL = "ERR_VAL_001"
    INVALID_METADATA = "ERR_VAL_002"
    MISSING_ADDRESS = "ERR_VAL_003"

    # Dependency error codes (ERR_DEP_001-ERR_DEP_004)
    ORDER_NOT_FOUND = "ERR_DEP_001"
    ORDER_UPDATE_FAILED = "ERR_DEP_002"
    EMAIL_DELIVERY_FAILED = "ERR_DEP_003"
    CONFIGURATION_ERROR = "ERR_DEP_004"


# Server-side messages, logged but never returned to the caller
ERROR_MESSAGES: dict[ErrorCode, str] = {
    ErrorCode.MISSING_SIGNATURE: "Missing Stripe-Signature header",
    ErrorCode.INVALID_WEBHOOK_SIGNATURE: "Invalid webhook signature",
    ErrorCode.MISSING_CUSTOMER_EMAIL: "Missing user email",
    ErrorCode.INVALID_METADATA: "Invalid request metadata",
    ErrorCode.MISSING_ADDRESS: "Missing billing or shipping address",
    ErrorCode.ORDER_NOT_FOUND: "Order not found",
    ErrorCode.ORDER_UPDATE_FAILED: "Failed to update order",
    ErrorCode.EMAIL_DELIVERY_FAILED: "Failed to send confirmation email",
    ErrorCode.CONFIGURATION_ERROR: "Service configuration unavailable",
}


class WebhookError(Exception):
    """Base exception for webhook processing failures."""

    def __init__(
        self,
        code: ErrorCode,
        details: Optional[dict[str, str]] = None,
    ):
        self.code = code
        self.message = ERROR_MESSAGES[code]
        self.details = details
        super().__init__(self.message)

    def __str__(self) -> str:
        if self.details:
            context = ", ".join(f"{k}={v}" for k, v in self.details.items())
            return f"{self.message} ({context})"
        return self.message


class AuthenticationError(WebhookError):
    """The request could not be proven to come from Stripe."""


class ValidationError(WebhookError):
    """A verified event lacks order, customer or address data."""


class DependencyError(WebhookError):
    """DynamoDB, SES or secret retrieval failed."""
