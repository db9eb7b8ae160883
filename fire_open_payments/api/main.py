"""
FastAPI application - demo webhook receiver

Run with: uvicorn fire_open_payments.api.main:app --port 3000
"""

from dotenv import load_dotenv

load_dotenv()

import logging
import os
from typing import Optional

from fastapi import FastAPI

from fire_open_payments.api.endpoints.webhooks import build_webhook_router
from fire_open_payments.integrations.contracts.interfaces import FireWebhookEvent
from fire_open_payments.integrations.webhooks.decoder import WebhookHandler

# Setup logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def _log_success(event: FireWebhookEvent) -> None:
    # Host applications mark the order paid here.
    logger.info("Payment succeeded: %s", event.claims)


def _log_failure(event: FireWebhookEvent) -> None:
    logger.info("Payment not authorised: %s", event.claims)


def _log_pending(event: FireWebhookEvent) -> None:
    logger.info("Payment %s: %s", event.raw_status or "without status", event.claims)


def create_app(webhook_secret: Optional[str] = None) -> FastAPI:
    secret = webhook_secret if webhook_secret is not None else os.getenv("FIRE_WEBHOOK_SECRET") or None
    if not secret:
        logger.warning("FIRE_WEBHOOK_SECRET is not set; webhook signatures will not be verified")

    app = FastAPI(
        title="fire.com Webhook Receiver",
        description="Receives fire.com payment webhooks and dispatches them by status",
        version="1.0.0",
    )
    handler = WebhookHandler(
        on_success=_log_success,
        on_failure=_log_failure,
        on_pending=_log_pending,
        secret=secret,
    )
    app.include_router(build_webhook_router(handler))

    @app.get("/health", tags=["Health"])
    async def health():
        return {"status": "ok", "signature_verification": bool(secret)}

    return app


app = create_app()
