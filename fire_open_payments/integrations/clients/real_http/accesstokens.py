"""
fire.com access tokens.

The client key never leaves the process: each token request sends a fresh nonce
together with SHA-256(nonce + client_key) as ``clientSecret``. The returned bearer
token is cached per client until shortly before it expires.
"""

from __future__ import annotations

import asyncio
import hashlib
import logging
import secrets
from typing import Optional

import httpx

from fire_open_payments.error_handler import ErrorHandler, FireError
from fire_open_payments.integrations.contracts.interfaces import AccessToken
from fire_open_payments.integrations.contracts.results import Ok, Result
from fire_open_payments.integrations.clients.real_http.http import JSON_HEADERS, send_json
from fire_open_payments.integrations.policy.response_wrappers import (
    IntegrationResponseError,
    normalize_access_token_response,
)
from fire_open_payments.utils.config_loader import FireConfig

logger = logging.getLogger(__name__)

ACCESS_TOKEN_PATH = "business/v1/apps/accesstokens"
GRANT_TYPE = "AccessToken"
NONCE_UPPER_BOUND = 1_000_000_000


def generate_nonce() -> str:
    return str(secrets.randbelow(NONCE_UPPER_BOUND))


def hash_client_key(nonce: str, client_key: str) -> str:
    return hashlib.sha256(f"{nonce}{client_key}".encode("utf-8")).hexdigest()


class TokenManager:
    def __init__(
        self,
        config: FireConfig,
        http_client: Optional[httpx.AsyncClient] = None,
        error_handler: Optional[ErrorHandler] = None,
    ) -> None:
        self.config = config
        self.http_client = http_client
        self.error_handler = error_handler or ErrorHandler()
        self._token: Optional[AccessToken] = None
        self._lock = asyncio.Lock()

    @property
    def access_token(self) -> Optional[str]:
        return self._token.value if self._token else None

    def has_valid_token(self) -> bool:
        return self._token is not None and not self._token.is_expired()

    def invalidate(self, rejected_token: Optional[str] = None) -> None:
        """Drop the cached token, or only ``rejected_token`` if it is still the cached one."""
        if rejected_token is None or self.access_token == rejected_token:
            self._token = None

    async def get_access_token(self, force: bool = False) -> Result:
        if force:
            self.invalidate()
        async with self._lock:
            # Another caller may have refreshed while we waited on the lock.
            if self._token is not None and not self._token.is_expired():
                return Ok(self._token.value)
            try:
                self._token = await self._request_token()
            except (FireError, IntegrationResponseError) as e:
                return self.error_handler.handle_exception(e, context={"operation": "get_access_token"})
            return Ok(self._token.value)

    async def _request_token(self) -> AccessToken:
        nonce = generate_nonce()
        payload = {
            "clientId": self.config.client_id,
            "refreshToken": self.config.refresh_token,
            "nonce": nonce,
            "grantType": GRANT_TYPE,
            "clientSecret": hash_client_key(nonce, self.config.client_key),
        }
        data = await send_json(
            "POST",
            f"{self.config.api_base_url}{ACCESS_TOKEN_PATH}",
            headers=JSON_HEADERS,
            json=payload,
            http_client=self.http_client,
            timeout_seconds=self.config.timeout_seconds,
        )
        token = normalize_access_token_response(data, fallback_ttl_seconds=self.config.token_ttl_seconds)
        logger.info("Obtained fire.com %s access token, expires %s", self.config.mode.value, token.expires_at.isoformat())
        return token
