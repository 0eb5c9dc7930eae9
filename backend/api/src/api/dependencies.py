"""FastAPI dependency injection providers for shared services.

Service instances are cached with @lru_cache so warm Lambda invocations
reuse boto3 clients. The WebhookHandler itself is assembled per request from
the cached collaborators, so tests can replace any one of them through
app.dependency_overrides.

Service Dependency Graph:
    WebhookHandler
        ├── StripeService ── SSMService
        ├── OrderService ── DynamoDBService (singleton via get_dynamodb_service)
        └── EmailService

Testing:
    Use reset_services() to clear cached instances between tests.
"""

from functools import lru_cache

from fastapi import Depends

from storefront.services import (
    EmailService,
    OrderService,
    StripeService,
    WebhookHandler,
    get_dynamodb_service,
    get_email_service,
    get_stripe_service,
)


@lru_cache
def get_order_service() -> OrderService:
    """Get cached OrderService instance.

    Returns:
        OrderService configured with DynamoDB singleton.
    """
    return OrderService(db=get_dynamodb_service())


def get_webhook_handler(
    stripe_service: StripeService = Depends(get_stripe_service),
    order_service: OrderService = Depends(get_order_service),
    email_service: EmailService = Depends(get_email_service),
) -> WebhookHandler:
    """Assemble the WebhookHandler from its collaborators."""
    return WebhookHandler(
        stripe_service=stripe_service,
        order_service=order_service,
        email_service=email_service,
    )


def reset_services() -> None:
    """Clear all cached service instances (for testing)."""
    get_order_service.cache_clear()
    get_stripe_service.cache_clear()
    get_email_service.cache_clear()
