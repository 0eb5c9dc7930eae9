"""Transactional email delivery via Amazon SES templates.

Rendering happens in SES: this service only supplies the template name and
the template data. The stored template is expected to use ``{{subject}}``
as its SubjectPart so the subject can vary per message.
"""

import json
import logging
import os
from functools import lru_cache
from typing import Any

import boto3
from botocore.exceptions import ClientError

from storefront.models import DependencyError, ErrorCode

logger = logging.getLogger(__name__)

DEFAULT_TEMPLATE = "OrderReceived"


class EmailService:
    """Sends templated emails through SES.

    Configuration:
        SES_FROM_EMAIL: Verified sender identity (required)
        SES_REGION: SES region, defaults to the boto3 default region
        ORDER_EMAIL_TEMPLATE: SES template name, defaults to "OrderReceived"
    """

    def __init__(
        self,
        client: Any | None = None,
        from_email: str | None = None,
        template: str | None = None,
    ) -> None:
        self._client = client or boto3.client(
            "ses", region_name=os.environ.get("SES_REGION") or None
        )
        self._from_email = from_email or os.environ.get("SES_FROM_EMAIL")
        self._template = template or os.environ.get("ORDER_EMAIL_TEMPLATE", DEFAULT_TEMPLATE)

    def send(
        self,
        *,
        to: str,
        subject: str,
        template_data: dict[str, Any],
    ) -> str:
        """Send one templated email.

        Args:
            to: Recipient address
            subject: Subject line, passed to the template as ``subject``
            template_data: Values for the template placeholders

        Returns:
            SES message ID

        Raises:
            DependencyError: If the sender is not configured or SES rejects the send.
        """
        if not self._from_email:
            logger.error("SES_FROM_EMAIL environment variable not set")
            raise DependencyError(
                ErrorCode.CONFIGURATION_ERROR, details={"setting": "SES_FROM_EMAIL"}
            )

        data = {"subject": subject, **template_data}

        try:
            response = self._client.send_templated_email(
                Source=self._from_email,
                Destination={"ToAddresses": [to]},
                Template=self._template,
                TemplateData=json.dumps(data),
            )
        except ClientError as e:
            error_code = e.response.get("Error", {}).get("Code", "Unknown")
            logger.error("SES send failed (%s): %s", error_code, e)
            raise DependencyError(
                ErrorCode.EMAIL_DELIVERY_FAILED, details={"ses_error": error_code}
            ) from e

        message_id: str = response["MessageId"]
        logger.info("Sent %s email to %s... (%s)", self._template, to[:20], message_id)
        return message_id


@lru_cache(maxsize=1)
def get_email_service() -> EmailService:
    """Get the shared EmailService instance."""
    return EmailService()
