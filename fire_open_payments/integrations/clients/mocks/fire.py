"""
fire.com Open Payments: MOCK client.

⚠️  This is a mock implementation for development and testing.
    It makes no network calls. Payment requests live in memory and are
    returned with deterministic codes so demos and tests are repeatable.
"""

import logging
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Union

from fire_open_payments.error_handler import ConfigurationError, ErrorHandler, TransportError
from fire_open_payments.integrations.contracts.interfaces import PaymentRequest, WebhookStatus
from fire_open_payments.integrations.contracts.payments import build_payment_request_body, validate_payment_request
from fire_open_payments.integrations.contracts.results import Ok, Result
from fire_open_payments.utils.config_loader import SANDBOX_ENDPOINTS

logger = logging.getLogger(__name__)


class MockFireAPI:
    """
    Mock fire.com client with the same async methods as FireAPI.

    Parameters
    ----------
    redirect_base_url : str
        Prefix for payment URLs. Defaults to the sandbox payments host.
    access_token : str
        Token handed out by get_access_token(). Default "mock-access-token".
    """

    def __init__(
        self,
        redirect_base_url: str = SANDBOX_ENDPOINTS.redirect_base_url,
        access_token: str = "mock-access-token",
    ):
        self.redirect_base_url = redirect_base_url
        self._issued_token = access_token
        self.access_token: Optional[str] = None
        self.error_handler = ErrorHandler()

        # In-memory stores (reset on restart)
        self._payment_requests: Dict[str, Dict[str, Any]] = {}
        self._payments: Dict[str, Dict[str, Any]] = {}
        self._transactions: Dict[str, List[Dict[str, Any]]] = {}
        self._counter = 0

        logger.info("[FIRE MOCK] Client initialised")

    async def get_access_token(self) -> Result:
        self.access_token = self._issued_token
        return Ok(self.access_token)

    async def create_payment_request(
        self,
        request_title: str,
        amount: Any,
        details: str,
        currency: str,
        return_url: Optional[str] = "",
        account_no: str = "",
        reference: str = "",
        expiry: Optional[Union[str, datetime]] = None,
    ) -> Result:
        if not self.access_token:
            await self.get_access_token()

        request = PaymentRequest(
            title=request_title,
            amount=amount,
            details=details,
            currency=currency,
            account_no=account_no,
            reference=reference,
            return_url=return_url or None,
            expiry=expiry,
        )
        errors = validate_payment_request(request)
        if errors:
            return self.error_handler.handle_exception(ConfigurationError("; ".join(errors)))

        self._counter += 1
        code = f"MOCK{self._counter:04d}"
        body = build_payment_request_body(request)
        self._payment_requests[code] = {
            **body,
            "code": code,
            "status": "ACTIVE",
            "createdAt": datetime.now(timezone.utc).isoformat(),
        }
        logger.info(f"[FIRE MOCK] Payment request {code} created for {currency} {amount} ({reference})")
        return Ok(f"{self.redirect_base_url}{code}")

    async def get_payment_request(self, payment_id: str) -> Result:
        if payment_id not in self._payment_requests:
            return self._not_found("paymentrequests", payment_id)
        return Ok(dict(self._payment_requests[payment_id]))

    async def get_payment_request_status(self, payment_uuid: str) -> Result:
        if payment_uuid not in self._payments:
            return self._not_found("payments", payment_uuid)
        return Ok(dict(self._payments[payment_uuid]))

    async def get_transactions(self, account_id: str) -> Result:
        transactions = self._transactions.get(account_id, [])
        return Ok({"total": len(transactions), "transactions": [dict(t) for t in transactions]})

    # ------------------------------------------------------------------
    # Test helpers
    # ------------------------------------------------------------------

    def simulate_payment(self, code: str, status: Union[str, WebhookStatus] = WebhookStatus.SETTLED) -> str:
        """Record a payer paying a request; returns the payment UUID."""
        request = self._payment_requests[code]
        status = status.value if isinstance(status, WebhookStatus) else str(status)
        payment_uuid = str(uuid.uuid4())
        self._payments[payment_uuid] = {
            "paymentUuid": payment_uuid,
            "code": code,
            "status": status,
            "amount": request["amount"],
            "currency": request["currency"],
            "myRef": request["myRef"],
        }
        if status in {WebhookStatus.PAID.value, WebhookStatus.SETTLED.value}:
            self._transactions.setdefault(request["icanTo"], []).append(
                {
                    "txnId": len(self._transactions.get(request["icanTo"], [])) + 1,
                    "type": "PAYMENT_REQUEST_PAYMENT",
                    "amountAfterCharges": request["amount"],
                    "currency": request["currency"],
                    "ref": request["myRef"],
                    "paymentUuid": payment_uuid,
                }
            )
        logger.info(f"[FIRE MOCK] Payment {payment_uuid} for {code} marked {status}")
        return payment_uuid

    def _not_found(self, resource: str, identifier: str) -> Result:
        error = TransportError(
            f"{resource}/{identifier} not found",
            status_code=404,
            payload={"errors": [{"code": 404, "message": "Not found"}]},
        )
        return self.error_handler.handle_exception(error, context={"resource": resource})
