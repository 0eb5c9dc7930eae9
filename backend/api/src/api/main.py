"""FastAPI application for the order webhook receiver.

Endpoints:
- GET /api/ping: Liveness check
- POST /api/webhooks: Stripe webhook events

Deployed on AWS Lambda behind API Gateway via Mangum; run_server() starts
uvicorn for local development (use the Stripe CLI to forward events).
"""

import logging

from fastapi import FastAPI
from mangum import Mangum

from api.exceptions import register_exception_handlers
from api.middleware.correlation import CorrelationIdMiddleware
from api.routes.health import router as health_router
from api.routes.webhooks import router as webhooks_router
from storefront.utils.logging import configure_logging

configure_logging(logging.INFO)

app = FastAPI(
    title="Order Webhooks API",
    description="Receives Stripe checkout events and confirms paid orders",
    version="0.1.0",
)

app.add_middleware(CorrelationIdMiddleware)

# Register exception handlers for the fixed {ok, message} error bodies
register_exception_handlers(app)

# This matches CloudFront routing: /api/* → API Gateway
app.include_router(health_router, prefix="/api")
app.include_router(webhooks_router, prefix="/api")


# Lambda handler - Mangum wraps FastAPI for AWS Lambda + API Gateway
handler = Mangum(app, lifespan="off")


def run_server(host: str = "0.0.0.0", port: int = 8080, reload: bool = True) -> None:
    """Run the FastAPI server.

    Args:
        host: Host to bind to (default: 0.0.0.0)
        port: Port to listen on (default: 8080)
        reload: Enable hot reload for development (default: True)
    """
    import uvicorn

    if reload:
        # Use string reference for reload mode (uvicorn requirement)
        uvicorn.run(
            "api.main:app",
            host=host,
            port=port,
            reload=True,
            reload_dirs=["api/src", "storefront/src"],
        )
    else:
        uvicorn.run(app, host=host, port=port)


if __name__ == "__main__":
    run_server()
