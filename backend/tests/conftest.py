"""Pytest configuration and fixtures for the order webhook backend tests.

This module provides reusable fixtures for testing:
- AWS mocking with moto (DynamoDB tables, SSM Stripe credentials)
- Stripe event builders and real HMAC signatures
- A fake EmailService for asserting sends without SES
"""

import hashlib
import hmac
import json
import os
import time
from typing import Any, Generator
from unittest.mock import MagicMock

import boto3
import pytest
from moto import mock_aws

# === Environment Setup ===

# Set environment variables for testing before imports
os.environ.setdefault("AWS_DEFAULT_REGION", "eu-west-1")
os.environ.setdefault("DYNAMODB_TABLE_PREFIX", "test-storefront")
os.environ.setdefault("ENVIRONMENT", "dev")
os.environ.setdefault("SES_FROM_EMAIL", "orders@example.com")

# Only set fake credentials for moto if no real credentials are present
if not os.environ.get("AWS_PROFILE") and not os.environ.get("AWS_ACCESS_KEY_ID"):
    os.environ.setdefault("AWS_ACCESS_KEY_ID", "testing")
    os.environ.setdefault("AWS_SECRET_ACCESS_KEY", "testing")


# === Test Configuration ===

TEST_REGION = "eu-west-1"
TEST_WEBHOOK_SECRET = "whsec_test_secret_for_testing"
TEST_STRIPE_KEY = "sk_test_abc123"
TEST_ORDER_ID = "order_1"
TEST_USER_ID = "user_1"
TEST_EMAIL = "buyer@example.com"
TEST_NAME = "Jane Doe"
TEST_ORDER_CREATED_AT = "2024-07-18T21:41:15.123000+00:00"


# === Singleton Resets ===


@pytest.fixture(autouse=True)
def reset_singletons() -> Generator[None, None, None]:
    """Reset cached services before and after each test.

    This ensures tests using mock_aws get fresh boto3 clients created
    inside the mock context rather than reusing ones from a previous test.
    """
    from api.dependencies import reset_services
    from storefront.services import SSMService, get_ssm_service, reset_dynamodb_service

    def _reset() -> None:
        reset_dynamodb_service()
        reset_services()
        get_ssm_service.cache_clear()
        SSMService.clear_cache()

    _reset()
    yield
    _reset()


# === AWS Fixtures ===


@pytest.fixture
def aws() -> Generator[None, None, None]:
    """Mock AWS with the order tables and Stripe credentials in place."""
    with mock_aws():
        dynamodb = boto3.client("dynamodb", region_name=TEST_REGION)
        for table, key in (
            ("test-storefront-orders", "order_id"),
            ("test-storefront-order-addresses", "address_id"),
        ):
            dynamodb.create_table(
                TableName=table,
                KeySchema=[{"AttributeName": key, "KeyType": "HASH"}],
                AttributeDefinitions=[{"AttributeName": key, "AttributeType": "S"}],
                BillingMode="PAY_PER_REQUEST",
            )

        ssm = boto3.client("ssm", region_name=TEST_REGION)
        ssm.put_parameter(
            Name="/storefront/dev/stripe/secret_key",
            Value=TEST_STRIPE_KEY,
            Type="SecureString",
        )
        ssm.put_parameter(
            Name="/storefront/dev/stripe/webhook_secret",
            Value=TEST_WEBHOOK_SECRET,
            Type="SecureString",
        )
        yield


@pytest.fixture
def orders_table(aws: None) -> Any:
    """The mocked orders table resource."""
    return boto3.resource("dynamodb", region_name=TEST_REGION).Table(
        "test-storefront-orders"
    )


@pytest.fixture
def addresses_table(aws: None) -> Any:
    """The mocked order-addresses table resource."""
    return boto3.resource("dynamodb", region_name=TEST_REGION).Table(
        "test-storefront-order-addresses"
    )


@pytest.fixture
def existing_order(orders_table: Any) -> dict[str, Any]:
    """An unpaid order as created by the checkout flow."""
    item = {
        "order_id": TEST_ORDER_ID,
        "user_id": TEST_USER_ID,
        "is_paid": False,
        "created_at": TEST_ORDER_CREATED_AT,
    }
    orders_table.put_item(Item=item)
    return item


# === Stripe Event Helpers ===


def build_address(**overrides: Any) -> dict[str, Any]:
    """A Stripe address object."""
    address = {
        "city": "Thousand Oaks",
        "country": "US",
        "line1": "100 Main St",
        "line2": "Apt 2",
        "postal_code": "91360",
        "state": "CA",
    }
    address.update(overrides)
    return address


def build_checkout_completed_event(
    event_id: str = "evt_1ABC123DEF456",
    order_id: str | None = TEST_ORDER_ID,
    user_id: str | None = TEST_USER_ID,
    email: str | None = TEST_EMAIL,
    name: str | None = TEST_NAME,
    billing_address: dict[str, Any] | None = None,
    shipping_address: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """Create a checkout.session.completed webhook event."""
    metadata = {}
    if order_id is not None:
        metadata["orderId"] = order_id
    if user_id is not None:
        metadata["userId"] = user_id

    return {
        "id": event_id,
        "object": "event",
        "type": "checkout.session.completed",
        "created": int(time.time()),
        "data": {
            "object": {
                "id": "cs_test_a17mmM8HOuPL8iOOkgrKBD965",
                "object": "checkout.session",
                "amount_total": 2299,
                "currency": "usd",
                "payment_status": "paid",
                "status": "complete",
                "customer_details": {
                    "address": billing_address if billing_address is not None else build_address(),
                    "email": email,
                    "name": name,
                    "phone": None,
                },
                "metadata": metadata,
                "shipping_details": {
                    "address": (
                        shipping_address
                        if shipping_address is not None
                        else build_address(line1="742 Evergreen Terrace", state=None)
                    ),
                    "name": name,
                },
            },
        },
    }


def sign_payload(payload: bytes, secret: str = TEST_WEBHOOK_SECRET, timestamp: int | None = None) -> str:
    """Create a Stripe-Signature header value.

    Stripe signatures use HMAC-SHA256 with format: t={timestamp},v1={signature}
    """
    ts = str(timestamp if timestamp is not None else int(time.time()))
    signed_payload = f"{ts}.{payload.decode('utf-8')}"
    signature = hmac.new(
        secret.encode("utf-8"),
        signed_payload.encode("utf-8"),
        hashlib.sha256,
    ).hexdigest()
    return f"t={ts},v1={signature}"


def encode_event(event: dict[str, Any]) -> bytes:
    """Serialize an event the way Stripe delivers it."""
    return json.dumps(event).encode("utf-8")


@pytest.fixture
def checkout_event() -> dict[str, Any]:
    """A fully populated checkout.session.completed event."""
    return build_checkout_completed_event()


# === Collaborator Fakes ===


@pytest.fixture
def fake_email_service() -> MagicMock:
    """EmailService stand-in recording sends."""
    from storefront.services import EmailService

    email = MagicMock(spec=EmailService)
    email.send.return_value = "ses-message-id-1"
    return email


@pytest.fixture
def make_checkout_event() -> Any:
    """Factory for checkout.session.completed events with overridable fields."""
    return build_checkout_completed_event


@pytest.fixture
def make_address() -> Any:
    """Factory for Stripe address objects."""
    return build_address


@pytest.fixture
def signed_request() -> Any:
    """Factory returning (body, headers) for a signed webhook delivery."""

    def _signed(event: dict[str, Any], secret: str = TEST_WEBHOOK_SECRET) -> tuple[bytes, dict[str, str]]:
        body = encode_event(event)
        return body, {
            "Stripe-Signature": sign_payload(body, secret),
            "Content-Type": "application/json",
        }

    return _signed


@pytest.fixture
def sign() -> Any:
    """Stripe-Signature factory: sign(payload, secret=..., timestamp=...)."""
    return sign_payload
