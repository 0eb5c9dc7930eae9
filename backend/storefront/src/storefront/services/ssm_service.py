"""SSM Parameter Store access for the Stripe credentials.

Values are SecureString parameters cached in-process for the lifetime of
the Lambda container.
"""

import logging
from functools import lru_cache
from typing import Any, ClassVar

import boto3
from botocore.exceptions import ClientError

logger = logging.getLogger(__name__)


class SSMServiceError(Exception):
    """Raised when SSM parameter retrieval fails."""

    pass


class SSMService:
    """Retrieves decrypted parameters from AWS SSM Parameter Store.

    Usage:
        ssm = get_ssm_service()
        webhook_secret = ssm.get_parameter("/storefront/dev/stripe/webhook_secret")
    """

    _cache: ClassVar[dict[str, str]] = {}

    def __init__(self, client: Any | None = None) -> None:
        """Initialize the SSM client.

        Args:
            client: Optional boto3 SSM client. Created from the default chain if None.
        """
        self._client = client or boto3.client("ssm")

    def get_parameter(self, name: str, *, use_cache: bool = True) -> str:
        """Retrieve a parameter value from SSM Parameter Store.

        Args:
            name: Full parameter path (e.g., "/storefront/dev/stripe/secret_key")
            use_cache: Whether to use cached value if available (default: True)

        Returns:
            The decrypted parameter value.

        Raises:
            SSMServiceError: If parameter cannot be retrieved.
        """
        if use_cache and name in self._cache:
            logger.debug("SSM cache hit for %s", name)
            return self._cache[name]

        try:
            logger.info("Fetching SSM parameter: %s", name)
            response = self._client.get_parameter(Name=name, WithDecryption=True)
            value: str = response["Parameter"]["Value"]
        except ClientError as e:
            error_code = e.response.get("Error", {}).get("Code", "Unknown")
            if error_code == "ParameterNotFound":
                raise SSMServiceError(f"SSM parameter not found: {name}") from e
            if error_code == "AccessDeniedException":
                raise SSMServiceError(
                    f"Access denied to SSM parameter: {name}. "
                    "Check IAM permissions for ssm:GetParameter."
                ) from e
            raise SSMServiceError(
                f"Failed to retrieve SSM parameter {name}: {e}"
            ) from e

        self._cache[name] = value
        return value

    @classmethod
    def clear_cache(cls) -> None:
        """Clear all cached parameters."""
        cls._cache.clear()
        logger.info("SSM parameter cache cleared")


@lru_cache(maxsize=1)
def get_ssm_service() -> SSMService:
    """Get the shared SSMService instance."""
    return SSMService()
