"""Backend services for order confirmation."""

from .dynamodb import (
    DynamoDBService,
    TransactionCancelledError,
    get_dynamodb_service,
    reset_dynamodb_service,
)
from .email_service import EmailService, get_email_service
from .order_service import OrderService
from .ssm_service import SSMService, SSMServiceError, get_ssm_service
from .stripe_service import StripeService, StripeServiceError, get_stripe_service
from .webhook_handler import WebhookHandler

__all__ = [
    "DynamoDBService",
    "TransactionCancelledError",
    "get_dynamodb_service",
    "reset_dynamodb_service",
    "EmailService",
    "get_email_service",
    "OrderService",
    "SSMService",
    "SSMServiceError",
    "get_ssm_service",
    "StripeService",
    "StripeServiceError",
    "get_stripe_service",
    "WebhookHandler",
]
