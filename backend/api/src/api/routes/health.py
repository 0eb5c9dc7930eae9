"""Liveness endpoint."""

from datetime import UTC, datetime
from typing import Any

from fastapi import APIRouter

router = APIRouter(tags=["health"])


@router.get("/ping")
async def ping() -> dict[str, Any]:
    """Health check at /api/ping.

    Matches CloudFront path pattern /api/* → API Gateway.
    """
    return {
        "status": "ok",
        "timestamp": datetime.now(UTC).isoformat(),
        "service": "order-webhooks",
    }
