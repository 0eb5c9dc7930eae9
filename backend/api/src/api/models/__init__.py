"""API-specific request/response models.

Domain models (Order, CheckoutCompletedEvent, ...) live in storefront.models.
This package holds HTTP layer concerns only.
"""

from api.models.webhooks import WebhookErrorResponse, WebhookResponse

__all__ = ["WebhookErrorResponse", "WebhookResponse"]
