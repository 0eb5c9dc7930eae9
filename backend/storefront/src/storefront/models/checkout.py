"""Typed view of a verified checkout.session.completed event.

Stripe delivers the session as loosely typed JSON where almost every field
may be null. CheckoutCompletedEvent.from_stripe_event checks each field the
order update needs and raises ValidationError for the first one missing.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from .errors import ErrorCode, ValidationError

CHECKOUT_SESSION_COMPLETED = "checkout.session.completed"


class Address(BaseModel):
    """Postal address extracted from a checkout session."""

    model_config = ConfigDict(strict=True)

    street: str = Field(..., min_length=1, description="First address line")
    city: str = Field(..., min_length=1)
    state: str | None = Field(default=None, description="State or province")
    postal_code: str = Field(..., min_length=1)
    country: str = Field(..., min_length=1, description="ISO 3166-1 alpha-2 code")

    @classmethod
    def from_stripe(cls, address: dict[str, Any] | None, kind: str) -> "Address":
        """Build an Address from a Stripe address object.

        Args:
            address: Stripe address dict (line1, city, state, postal_code, country)
            kind: "billing" or "shipping", reported in the error details

        Returns:
            The populated Address.

        Raises:
            ValidationError: If the address or a required field is missing.
        """
        if not address:
            raise ValidationError(
                ErrorCode.MISSING_ADDRESS, details={"address": kind}
            )

        fields = {
            "street": address.get("line1"),
            "city": address.get("city"),
            "postal_code": address.get("postal_code"),
            "country": address.get("country"),
        }
        missing = sorted(name for name, value in fields.items() if not value)
        if missing:
            raise ValidationError(
                ErrorCode.MISSING_ADDRESS,
                details={"address": kind, "missing": ",".join(missing)},
            )

        return cls(state=address.get("state") or None, **fields)


class CheckoutCompletedEvent(BaseModel):
    """The fields of a completed checkout that drive order confirmation."""

    model_config = ConfigDict(strict=True)

    event_id: str
    order_id: str = Field(..., min_length=1)
    user_id: str = Field(..., min_length=1)
    customer_email: str = Field(..., min_length=1)
    customer_name: str = Field(..., min_length=1)
    billing_address: Address
    shipping_address: Address

    @classmethod
    def from_stripe_event(cls, event: dict[str, Any]) -> "CheckoutCompletedEvent":
        """Extract and validate order data from a checkout.session.completed event.

        Checks run in a fixed order: customer email, metadata, customer
        name, billing address, shipping address.

        Args:
            event: Verified Stripe event dict

        Returns:
            CheckoutCompletedEvent with every required field present.

        Raises:
            ValidationError: On the first missing field.
        """
        session = (event.get("data") or {}).get("object") or {}
        customer = session.get("customer_details") or {}

        email = customer.get("email")
        if not email:
            raise ValidationError(ErrorCode.MISSING_CUSTOMER_EMAIL)

        metadata = session.get("metadata") or {}
        order_id = metadata.get("orderId")
        user_id = metadata.get("userId")
        if not order_id or not user_id:
            raise ValidationError(
                ErrorCode.INVALID_METADATA,
                details={
                    "orderId": "present" if order_id else "missing",
                    "userId": "present" if user_id else "missing",
                },
            )

        name = customer.get("name")
        if not name:
            raise ValidationError(
                ErrorCode.MISSING_ADDRESS, details={"missing": "name"}
            )

        billing = Address.from_stripe(customer.get("address"), "billing")
        shipping = Address.from_stripe(_shipping_address(session), "shipping")

        return cls(
            event_id=event.get("id") or "",
            order_id=order_id,
            user_id=user_id,
            customer_email=email,
            customer_name=name,
            billing_address=billing,
            shipping_address=shipping,
        )


def _shipping_address(session: dict[str, Any]) -> dict[str, Any] | None:
    # Newer API versions use shipping_details; older ones use shipping
    for key in ("shipping_details", "shipping"):
        details = session.get(key)
        if details and details.get("address"):
            return details["address"]
    return None
