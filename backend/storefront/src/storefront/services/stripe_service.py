"""Stripe integration for webhook signature verification.

Uses the v8+ StripeClient pattern. The API key and webhook signing secret
are retrieved from SSM Parameter Store.
"""

import hashlib
import json
import logging
import os
from functools import lru_cache
from typing import Any

import stripe
from stripe import StripeClient

from storefront.models import DependencyError, ErrorCode

from .ssm_service import SSMService, SSMServiceError, get_ssm_service

logger = logging.getLogger(__name__)


class StripeServiceError(Exception):
    """Raised when a webhook signature or payload is rejected by Stripe."""

    pass


class StripeService:
    """Service for Stripe webhook operations.

    Usage:
        stripe_svc = get_stripe_service()
        event = stripe_svc.verify_webhook_signature(payload, signature)
    """

    def __init__(
        self,
        environment: str | None = None,
        ssm: SSMService | None = None,
    ) -> None:
        """Initialize Stripe service with credentials from SSM.

        Args:
            environment: Environment name (dev, prod). Defaults to ENVIRONMENT env var.
            ssm: SSM service to read credentials from. Defaults to the shared instance.
        """
        self._environment = environment or os.environ.get("ENVIRONMENT", "dev")
        self._ssm = ssm or get_ssm_service()
        self._client: StripeClient | None = None
        self._webhook_secret: str | None = None

    def _get_credential(self, name: str) -> str:
        """Read a Stripe credential from SSM.

        Raises:
            DependencyError: If the parameter cannot be retrieved.
        """
        parameter = f"/storefront/{self._environment}/stripe/{name}"
        try:
            return self._ssm.get_parameter(parameter)
        except SSMServiceError as e:
            logger.error("Stripe credential unavailable: %s", e)
            raise DependencyError(
                ErrorCode.CONFIGURATION_ERROR, details={"parameter": parameter}
            ) from e

    def _get_client(self) -> StripeClient:
        """Get or create the Stripe client (lazy initialization)."""
        if self._client is None:
            self._client = StripeClient(self._get_credential("secret_key"))
            logger.info("Stripe client initialized for environment: %s", self._environment)
        return self._client

    def _get_webhook_secret(self) -> str:
        """Get the webhook signing secret."""
        if self._webhook_secret is None:
            self._webhook_secret = self._get_credential("webhook_secret")
        return self._webhook_secret

    def verify_webhook_signature(self, payload: bytes, signature: str) -> dict[str, Any]:
        """Verify a webhook signature and parse the event.

        Args:
            payload: Raw request body bytes, exactly as received.
            signature: Stripe-Signature header value.

        Returns:
            The event as a plain dict decoded from the verified payload.

        Raises:
            StripeServiceError: If the signature or payload is invalid.
            DependencyError: If the Stripe credentials cannot be read from SSM.
        """
        client = self._get_client()
        webhook_secret = self._get_webhook_secret()

        try:
            client.construct_event(payload, signature, webhook_secret)
        except stripe.SignatureVerificationError as e:
            logger.warning("Invalid webhook signature: %s", str(e))
            raise StripeServiceError("Invalid webhook signature") from e
        except ValueError as e:
            logger.warning("Malformed webhook payload: %s", str(e))
            raise StripeServiceError("Malformed webhook payload") from e

        # The signed bytes are the source of truth, not the SDK object
        parsed: dict[str, Any] = json.loads(payload)
        logger.info("Webhook signature verified for event: %s", parsed.get("id"))
        return parsed

    @staticmethod
    def compute_payload_hash(payload: bytes) -> str:
        """Compute SHA-256 hash of a webhook payload for log correlation.

        Args:
            payload: Raw webhook payload bytes.

        Returns:
            Hex-encoded SHA-256 hash.
        """
        return hashlib.sha256(payload).hexdigest()


@lru_cache(maxsize=1)
def get_stripe_service() -> StripeService:
    """Get the shared StripeService instance."""
    return StripeService()
