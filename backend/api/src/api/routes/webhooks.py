"""Webhook endpoint for Stripe checkout events.

The endpoint does NOT require JWT authentication: it receives payloads
signed with the Stripe webhook secret, and the signature is the only
authentication.
"""

from fastapi import APIRouter, Depends, Request

from api.dependencies import get_webhook_handler
from api.models.webhooks import WebhookErrorResponse, WebhookResponse
from storefront.services import WebhookHandler

router = APIRouter(tags=["webhooks"])


@router.post(
    "/webhooks",
    summary="Receive Stripe webhook events",
    description="""
Endpoint for Stripe webhook events. Handles:
- checkout.session.completed: marks the order paid, stores its shipping and
  billing addresses and emails an order confirmation

Other event types are acknowledged without side effects.

**No authentication required** - signature is verified using the Stripe webhook secret.

**Not idempotent**: a redelivered event is processed again.
""",
    response_model=WebhookResponse,
    responses={
        200: {
            "description": "Event received and processed (or acknowledged)",
            "model": WebhookResponse,
        },
        400: {
            "description": "Invalid signature or missing header",
            "model": WebhookErrorResponse,
        },
        500: {
            "description": "Processing failed; Stripe will retry",
            "model": WebhookErrorResponse,
        },
    },
)
async def handle_stripe_webhook(
    request: Request,
    handler: WebhookHandler = Depends(get_webhook_handler),
) -> WebhookResponse:
    """Handle incoming Stripe webhook events."""
    # Raw body: signature verification needs the exact bytes Stripe signed
    payload = await request.body()
    signature = request.headers.get("Stripe-Signature")

    event = handler.handle(payload, signature)
    return WebhookResponse(result=event)
