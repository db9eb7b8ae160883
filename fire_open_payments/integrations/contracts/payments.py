"""
Payment request contract.

Builds the body fire.com expects for ``POST /business/v1/paymentrequests`` and
validates caller input before anything is sent.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import Any, Dict, List, Optional, Union

from fire_open_payments.integrations.contracts.interfaces import PaymentRequest, WebhookOutcome, WebhookStatus
from fire_open_payments.utils.params import check_required_params

PAYMENT_REQUEST_TYPE = "OTHER"
MAX_NUMBER_PAYMENTS = 1
DEFAULT_EXPIRY = timedelta(hours=24)

_REQUIRED_FIELDS = ("title", "amount", "currency", "account_no", "reference")


# ---------------------------------------------------------------------------
# Validation helpers
# ---------------------------------------------------------------------------

def validate_payment_request(request: PaymentRequest) -> List[str]:
    """
    Return a list of validation errors.
    Empty list means the request is valid.
    """
    _, missing = check_required_params(_REQUIRED_FIELDS, vars(request))
    errors = [f"{name} is required" for name in missing]

    if "amount" not in missing:
        try:
            amount = Decimal(str(request.amount))
        except ArithmeticError:
            errors.append(f"amount {request.amount!r} is not a number")
        else:
            if not amount.is_finite() or amount <= 0:
                errors.append("amount must be greater than zero")

    if request.expiry is not None and not isinstance(request.expiry, (str, datetime)):
        errors.append("expiry must be an ISO-8601 string or a datetime")

    return errors


# ---------------------------------------------------------------------------
# Body building
# ---------------------------------------------------------------------------

def format_expiry(expiry: Optional[Union[str, datetime]] = None, now: Optional[datetime] = None) -> str:
    """Render an expiry the way fire.com accepts it: ``2024-05-01T10:00:00.000Z``."""
    if isinstance(expiry, str) and expiry.strip():
        return expiry.strip()
    if expiry is None or isinstance(expiry, str):
        expiry = (now or datetime.now(timezone.utc)) + DEFAULT_EXPIRY
    if expiry.tzinfo is None:
        expiry = expiry.replace(tzinfo=timezone.utc)
    expiry = expiry.astimezone(timezone.utc)
    return expiry.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _json_amount(amount: Union[int, float, str, Decimal]) -> Union[int, float]:
    if isinstance(amount, str):
        amount = Decimal(amount.strip())
    if isinstance(amount, Decimal):
        return int(amount) if amount == amount.to_integral_value() else float(amount)
    return amount


def build_payment_request_body(request: PaymentRequest, now: Optional[datetime] = None) -> Dict[str, Any]:
    body: Dict[str, Any] = {
        "currency": request.currency,
        "type": PAYMENT_REQUEST_TYPE,
        "icanTo": request.account_no,
        "amount": _json_amount(request.amount),
        "myRef": request.reference,
        "description": request.title,
        "maxNumberPayments": MAX_NUMBER_PAYMENTS,
        "expiry": format_expiry(request.expiry, now=now),
        "orderDetails": request.details,
    }
    if request.return_url:
        body["returnUrl"] = request.return_url
    return body


def classify_status(status: Any) -> WebhookOutcome:
    """PAID and SETTLED are successes, NOT_AUTHORISED a failure, anything else pending."""
    status = status if isinstance(status, WebhookStatus) else WebhookStatus.from_raw(status)
    if status in {WebhookStatus.PAID, WebhookStatus.SETTLED}:
        return WebhookOutcome.SUCCESS
    if status == WebhookStatus.NOT_AUTHORISED:
        return WebhookOutcome.FAILURE
    return WebhookOutcome.PENDING
