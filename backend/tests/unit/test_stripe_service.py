"""Unit tests for Stripe webhook signature verification.

Signatures are computed with the real Stripe HMAC scheme so the SDK's
verification runs unmodified; only SSM is mocked.
"""

import json
import time
from unittest.mock import MagicMock

import pytest
import stripe

from storefront.models import DependencyError, ErrorCode
from storefront.services import SSMServiceError, StripeService, StripeServiceError

# === Test Configuration ===

TEST_WEBHOOK_SECRET = "whsec_test_secret123"


# === Test Fixtures ===


@pytest.fixture
def mock_ssm():
    """SSM service returning test credentials."""
    ssm = MagicMock()
    ssm.get_parameter.side_effect = lambda param: {
        "/storefront/dev/stripe/secret_key": "sk_test_abc123",
        "/storefront/dev/stripe/webhook_secret": TEST_WEBHOOK_SECRET,
    }[param]
    return ssm


@pytest.fixture
def stripe_service(mock_ssm) -> StripeService:
    return StripeService(environment="dev", ssm=mock_ssm)


@pytest.fixture
def payload(checkout_event) -> bytes:
    return json.dumps(checkout_event).encode("utf-8")


# === Signature Validation Tests ===


class TestVerifyWebhookSignature:
    """Tests for StripeService.verify_webhook_signature."""

    def test_valid_signature_returns_parsed_event(
        self, stripe_service, signed_request, checkout_event
    ):
        """Valid signature returns the event as a plain dict."""
        body, headers = signed_request(checkout_event, TEST_WEBHOOK_SECRET)

        event = stripe_service.verify_webhook_signature(body, headers["Stripe-Signature"])

        assert event == checkout_event
        assert type(event) is dict

    def test_wrong_secret_raises(self, stripe_service, checkout_event, signed_request):
        body, headers = signed_request(checkout_event, "whsec_someone_else")

        with pytest.raises(StripeServiceError) as exc_info:
            stripe_service.verify_webhook_signature(body, headers["Stripe-Signature"])

        assert "Invalid webhook signature" in str(exc_info.value)
        assert isinstance(exc_info.value.__cause__, stripe.SignatureVerificationError)

    def test_tampered_payload_raises(self, stripe_service, checkout_event, signed_request):
        """Body changed after signing fails verification."""
        body, headers = signed_request(checkout_event, TEST_WEBHOOK_SECRET)
        tampered = body.replace(b"order_1", b"order_2")

        with pytest.raises(StripeServiceError):
            stripe_service.verify_webhook_signature(tampered, headers["Stripe-Signature"])

    def test_stale_timestamp_raises(self, stripe_service, payload, sign):
        """Signatures older than the SDK tolerance are rejected."""
        signature = sign(
            payload, TEST_WEBHOOK_SECRET, timestamp=int(time.time()) - 3600
        )

        with pytest.raises(StripeServiceError) as exc_info:
            stripe_service.verify_webhook_signature(payload, signature)

        assert "Invalid webhook signature" in str(exc_info.value)

    def test_garbage_header_raises(self, stripe_service, payload):
        with pytest.raises(StripeServiceError):
            stripe_service.verify_webhook_signature(payload, "not-a-signature")

    def test_secret_fetched_once(self, stripe_service, mock_ssm, checkout_event, signed_request):
        """Credentials are cached on the instance after the first call."""
        for _ in range(2):
            body, headers = signed_request(checkout_event, TEST_WEBHOOK_SECRET)
            stripe_service.verify_webhook_signature(body, headers["Stripe-Signature"])

        assert mock_ssm.get_parameter.call_count == 2  # secret_key + webhook_secret

    def test_ssm_failure_raises_configuration_error(self, payload):
        """A missing credential is a dependency failure, not a bad signature."""
        ssm = MagicMock()
        ssm.get_parameter.side_effect = SSMServiceError("SSM parameter not found")
        service = StripeService(environment="dev", ssm=ssm)

        with pytest.raises(DependencyError) as exc_info:
            service.verify_webhook_signature(payload, "t=1,v1=abc")

        assert exc_info.value.code == ErrorCode.CONFIGURATION_ERROR
        assert exc_info.value.details == {"parameter": "/storefront/dev/stripe/secret_key"}

    def test_missing_webhook_secret_raises_configuration_error(self, payload):
        def get_parameter(param):
            if param.endswith("/webhook_secret"):
                raise SSMServiceError("SSM parameter not found")
            return "sk_test_abc123"

        ssm = MagicMock()
        ssm.get_parameter.side_effect = get_parameter
        service = StripeService(environment="dev", ssm=ssm)

        with pytest.raises(DependencyError) as exc_info:
            service.verify_webhook_signature(payload, "t=1,v1=abc")

        assert exc_info.value.details == {"parameter": "/storefront/dev/stripe/webhook_secret"}


class TestComputePayloadHash:
    def test_is_sha256_hex(self):
        digest = StripeService.compute_payload_hash(b"{}")

        assert digest == "44136fa355b3678a1146ad16f7e8649e94fb4fc21fe77e8310c060f61caaff8a"
