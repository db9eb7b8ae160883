"""
Real fire.com Open Payments HTTP Client.

Usage:
    fire = FireAPI({"client_id": ..., "client_key": ..., "refresh_token": ..., "mode": "sandbox"})
    result = await fire.create_payment_request("Invoice 12", 100.0, "Consulting", "EUR",
                                               account_no="12345", reference="INV-12")
    if result.is_ok:
        redirect_to(result.value)

Every operation returns Ok(...) or Err(...). The bearer token is fetched lazily on
the first call, reused afterwards and refreshed once when fire.com answers 401.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Callable, Dict, Mapping, Optional, Union
from urllib.parse import quote

import httpx

from fire_open_payments.error_handler import ConfigurationError, ErrorHandler, FireError, TransportError
from fire_open_payments.integrations.contracts.interfaces import PaymentRequest
from fire_open_payments.integrations.contracts.payments import build_payment_request_body, validate_payment_request
from fire_open_payments.integrations.contracts.results import Ok, Result
from fire_open_payments.integrations.clients.real_http.accesstokens import TokenManager
from fire_open_payments.integrations.clients.real_http.http import bearer_headers, send_json
from fire_open_payments.integrations.policy.response_wrappers import (
    IntegrationResponseError,
    normalize_payment_request_created,
)
from fire_open_payments.utils.config_loader import FireConfig, check_required_fields

logger = logging.getLogger(__name__)

PAYMENT_REQUESTS_PATH = "business/v1/paymentrequests"
PAYMENTS_PATH = "business/v1/payments"
ACCOUNTS_PATH = "business/v1/accounts"


def _path_segment(value: Any) -> str:
    """Percent-encode an identifier so it stays a single path segment."""
    segment = quote(str(value), safe="")
    if segment in {".", ".."}:
        segment = segment.replace(".", "%2E")
    return segment


class FireAPI:
    def __init__(
        self,
        config: Union[Mapping[str, Any], FireConfig],
        http_client: Optional[httpx.AsyncClient] = None,
        strict_mode: bool = True,
    ) -> None:
        self.config = check_required_fields(config, strict_mode=strict_mode)
        self.http_client = http_client
        self.error_handler = ErrorHandler()
        self.tokens = TokenManager(self.config, http_client=http_client, error_handler=self.error_handler)
        self._owns_client = False

    async def __aenter__(self) -> "FireAPI":
        if self.http_client is None:
            self.http_client = httpx.AsyncClient(timeout=self.config.timeout_seconds)
            self.tokens.http_client = self.http_client
            self._owns_client = True
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client and self.http_client is not None:
            await self.http_client.aclose()
            self.http_client = None
            self.tokens.http_client = None
            self._owns_client = False

    @property
    def access_token(self) -> Optional[str]:
        return self.tokens.access_token

    async def get_access_token(self) -> Result:
        return await self.tokens.get_access_token()

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
        """
        Create a single-use payment request and return the URL to send the payer to.

        Args:
            request_title: Title shown to the payer
            amount: Amount to be paid, greater than zero
            details: Order details of the payment request
            currency: Currency code, e.g. EUR or GBP
            return_url: Where fire.com redirects after payment; omitted when empty
            account_no: fire.com account (ICAN) receiving the payment in that currency
            reference: Your reference for the payment
            expiry: ISO-8601 string or datetime; defaults to 24 hours from now

        Returns:
            Ok(redirect base URL + payment request code) or Err
        """
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
            return self.error_handler.handle_exception(
                ConfigurationError("; ".join(errors)), context={"operation": "create_payment_request"}
            )

        body = build_payment_request_body(request)
        url = f"{self.config.api_base_url}{PAYMENT_REQUESTS_PATH}"

        def parse(data: Any) -> str:
            created = normalize_payment_request_created(data)
            return f"{self.config.redirect_base_url}{created.code}"

        return await self._authorized_call("create_payment_request", "POST", url, json=body, parse=parse)

    async def get_payment_request(self, payment_id: str) -> Result:
        """Return the payment request details exactly as fire.com sends them."""
        url = f"{self.config.api_base_url}{PAYMENT_REQUESTS_PATH}/{_path_segment(payment_id)}"
        return await self._authorized_call("get_payment_request", "GET", url)

    async def get_payment_request_status(self, payment_uuid: str) -> Result:
        """Return the payment (and its status) for a payment UUID."""
        url = f"{self.config.api_base_url}{PAYMENTS_PATH}/{_path_segment(payment_uuid)}"
        return await self._authorized_call("get_payment_request_status", "GET", url)

    # List transactions for an account (v1)
    async def get_transactions(self, account_id: str) -> Result:
        url = f"{self.config.api_base_url}{ACCOUNTS_PATH}/{_path_segment(account_id)}/transactions"
        return await self._authorized_call("get_transactions", "GET", url)

    async def _authorized_call(
        self,
        operation: str,
        method: str,
        url: str,
        json: Optional[Dict[str, Any]] = None,
        parse: Optional[Callable[[Any], Any]] = None,
    ) -> Result:
        token = await self.tokens.get_access_token()
        if token.is_err:
            return token

        try:
            try:
                data = await self._send(method, url, token.value, json)
            except TransportError as e:
                if e.status_code != 401:
                    raise
                logger.info("fire.com rejected the access token during %s, re-authenticating", operation)
                self.tokens.invalidate(token.value)
                token = await self.tokens.get_access_token()
                if token.is_err:
                    return token
                data = await self._send(method, url, token.value, json)

            return Ok(parse(data) if parse else data)
        except (FireError, IntegrationResponseError) as e:
            return self.error_handler.handle_exception(e, context={"operation": operation, "url": url})

    async def _send(self, method: str, url: str, access_token: str, json: Optional[Dict[str, Any]]) -> Any:
        return await send_json(
            method,
            url,
            headers=bearer_headers(access_token),
            json=json,
            http_client=self.http_client,
            timeout_seconds=self.config.timeout_seconds,
        )
