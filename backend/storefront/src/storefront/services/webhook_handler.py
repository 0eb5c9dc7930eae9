"""Webhook handler for Stripe checkout events.

Provides the business logic for confirming orders separate from HTTP
routing concerns. This enables:
- Unit testing without HTTP overhead
- Substituting fakes for Stripe, DynamoDB and SES through the constructor

Deliveries are not deduplicated. Stripe delivers at least once, so a
redelivered checkout.session.completed event marks the order paid again,
creates a second pair of address records and sends a second email.
"""

from typing import TYPE_CHECKING, Any

from storefront.models import (
    CHECKOUT_SESSION_COMPLETED,
    Address,
    AuthenticationError,
    CheckoutCompletedEvent,
    ErrorCode,
    Order,
    WebhookError,
)
from storefront.utils.logging import get_logger, log_webhook_event

from .stripe_service import StripeService, StripeServiceError

if TYPE_CHECKING:
    from .email_service import EmailService
    from .order_service import OrderService

logger = get_logger(__name__)


def format_order_date(order: Order) -> str:
    """Format an order's creation date as M/D/YYYY."""
    created = order.created_at
    return f"{created.month}/{created.day}/{created.year}"


def order_email_subject(order_id: str) -> str:
    """Subject line of the order confirmation email."""
    return f"Thanks for your order! (#{order_id})"


class WebhookHandler:
    """Verifies Stripe webhook deliveries and confirms paid orders."""

    def __init__(
        self,
        stripe_service: StripeService,
        order_service: "OrderService",
        email_service: "EmailService",
    ) -> None:
        self._stripe = stripe_service
        self._orders = order_service
        self._email = email_service

    def handle(self, payload: bytes, signature: str | None) -> dict[str, Any]:
        """Verify and process one webhook delivery.

        Args:
            payload: Raw request body, unmodified
            signature: Stripe-Signature header value, None if absent

        Returns:
            The verified event.

        Raises:
            AuthenticationError: If the signature is missing or invalid.
            ValidationError: If a checkout event lacks required data.
            DependencyError: If Stripe credentials, the order update or the
                email send fail.
        """
        if not signature:
            logger.warning("Webhook request missing Stripe-Signature header")
            raise AuthenticationError(ErrorCode.MISSING_SIGNATURE)

        try:
            event = self._stripe.verify_webhook_signature(payload, signature)
        except StripeServiceError as e:
            logger.warning("Webhook signature verification failed: %s", e)
            raise AuthenticationError(ErrorCode.INVALID_WEBHOOK_SIGNATURE) from e

        event_id = event.get("id")
        event_type = event.get("type")

        log_webhook_event(
            logger,
            event_type,
            event_id,
            result="received",
            payload_hash=StripeService.compute_payload_hash(payload),
        )

        if event_type == CHECKOUT_SESSION_COMPLETED:
            try:
                self.process_checkout_completed(event)
            except WebhookError as e:
                log_webhook_event(
                    logger,
                    event_type,
                    event_id,
                    result="error",
                    error=str(e),
                    error_code=e.code.value,
                )
                raise
        else:
            log_webhook_event(logger, event_type, event_id, result="skipped")

        return event

    def process_checkout_completed(self, event: dict[str, Any]) -> Order:
        """Mark the order paid and email the customer.

        The order update and the email are not transactional: if the email
        fails the order stays paid.

        Args:
            event: Verified checkout.session.completed event

        Returns:
            The updated Order.

        Raises:
            ValidationError: If order, customer or address data is missing.
            DependencyError: If DynamoDB or SES fails.
        """
        checkout = CheckoutCompletedEvent.from_stripe_event(event)

        order = self._orders.mark_paid(
            checkout.order_id,
            customer_name=checkout.customer_name,
            shipping_address=checkout.shipping_address,
            billing_address=checkout.billing_address,
        )
        log_webhook_event(
            logger,
            CHECKOUT_SESSION_COMPLETED,
            checkout.event_id,
            order_id=checkout.order_id,
            result="order_paid",
            user_id=checkout.user_id,
        )

        self._email.send(
            to=checkout.customer_email,
            subject=order_email_subject(checkout.order_id),
            template_data={
                "orderId": checkout.order_id,
                "orderDate": format_order_date(order),
                "shippingAddress": self._template_address(
                    checkout.customer_name, checkout.shipping_address
                ),
            },
        )
        log_webhook_event(
            logger,
            CHECKOUT_SESSION_COMPLETED,
            checkout.event_id,
            order_id=checkout.order_id,
            result="email_sent",
        )

        return order

    @staticmethod
    def _template_address(name: str, address: Address) -> dict[str, Any]:
        return {
            "name": name,
            "street": address.street,
            "city": address.city,
            "state": address.state,
            "postalCode": address.postal_code,
            "country": address.country,
        }
