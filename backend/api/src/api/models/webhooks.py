"""Response models for the webhook endpoint."""

from typing import Any

from pydantic import BaseModel, Field


class WebhookResponse(BaseModel):
    """Acknowledgment returned once an event has been processed."""

    ok: bool = True
    result: dict[str, Any] = Field(..., description="The verified Stripe event")


class WebhookErrorResponse(BaseModel):
    """Failure response. The message is fixed and carries no internal detail."""

    ok: bool = False
    message: str = Field(..., examples=["Invalid signature", "Something went wrong"])
