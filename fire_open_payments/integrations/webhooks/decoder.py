"""
Decoding of webhook tokens posted by fire.com.

fire.com posts a signed JWT as the raw request body. With a webhook secret the
HS256 signature is verified before any claim is trusted; without one the claims
are read unverified, which is only acceptable against the sandbox.
"""

from __future__ import annotations

import inspect
import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, Optional, Union

import jwt

from fire_open_payments.error_handler import DecodeError
from fire_open_payments.integrations.contracts.interfaces import FireWebhookEvent, WebhookOutcome, WebhookStatus
from fire_open_payments.integrations.contracts.payments import classify_status

logger = logging.getLogger(__name__)

WEBHOOK_ALGORITHMS = ["HS256"]

WebhookCallback = Callable[[FireWebhookEvent], Union[None, Awaitable[None]]]


def decode_webhook_token(body: Union[bytes, bytearray, str], secret: Optional[str] = None) -> FireWebhookEvent:
    if isinstance(body, (bytes, bytearray)):
        try:
            body = bytes(body).decode("utf-8")
        except UnicodeDecodeError as e:
            raise DecodeError("Webhook body is not UTF-8 text") from e
    if not isinstance(body, str):
        raise DecodeError(f"Webhook body must be bytes or str; got {type(body).__name__}")

    token = body.strip()
    if not token:
        raise DecodeError("Webhook body is empty")

    try:
        if secret:
            claims = jwt.decode(token, secret, algorithms=WEBHOOK_ALGORITHMS, options={"verify_aud": False})
        else:
            logger.warning("Decoding fire.com webhook without signature verification")
            claims = jwt.decode(token, options={"verify_signature": False})
    except jwt.PyJWTError as e:
        raise DecodeError(f"Invalid webhook token: {e}") from e

    if not isinstance(claims, dict):
        raise DecodeError("Webhook token payload is not an object")

    raw_status = claims.get("status")
    return FireWebhookEvent(
        status=WebhookStatus.from_raw(raw_status),
        raw_status=None if raw_status is None else str(raw_status),
        verified=bool(secret),
        claims=claims,
    )


@dataclass
class WebhookResult:
    status_code: int
    outcome: Optional[WebhookOutcome] = None
    event: Optional[FireWebhookEvent] = None
    error: Optional[str] = None


class WebhookHandler:
    """
    Decode a webhook body and run the callback for its outcome.

    fire.com only needs to know the token was received, so any decodable token is
    acknowledged with 200 whatever the payment status. Undecodable tokens get 401, and
    so does a callback that raises, which lets fire.com deliver the webhook again.
    """

    def __init__(
        self,
        on_success: Optional[WebhookCallback] = None,
        on_failure: Optional[WebhookCallback] = None,
        on_pending: Optional[WebhookCallback] = None,
        secret: Optional[str] = None,
    ) -> None:
        self.secret = secret
        self._callbacks = {
            WebhookOutcome.SUCCESS: on_success,
            WebhookOutcome.FAILURE: on_failure,
            WebhookOutcome.PENDING: on_pending,
        }

    async def handle(self, body: Union[bytes, str]) -> WebhookResult:
        try:
            event = decode_webhook_token(body, secret=self.secret)
        except DecodeError as e:
            logger.error(f"Rejected fire.com webhook: {e}")
            return WebhookResult(status_code=401, error=str(e))

        outcome = classify_status(event.status)
        logger.info(f"fire.com webhook status={event.raw_status} -> {outcome.value}")

        callback = self._callbacks[outcome]
        if callback is not None:
            try:
                result = callback(event)
                if inspect.isawaitable(result):
                    await result
            except Exception as e:
                logger.exception(f"fire.com webhook {outcome.value.lower()} callback failed")
                return WebhookResult(status_code=401, outcome=outcome, event=event, error=str(e))

        return WebhookResult(status_code=200, outcome=outcome, event=event)
