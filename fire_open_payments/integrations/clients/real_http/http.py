"""
Shared JSON-over-HTTPS call used by the token manager and the payment operations.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import httpx

from fire_open_payments.error_handler import TransportError

logger = logging.getLogger(__name__)

JSON_HEADERS: Dict[str, str] = {
    "Accept": "application/json",
    "Content-Type": "application/json",
}


def bearer_headers(access_token: str) -> Dict[str, str]:
    return {**JSON_HEADERS, "Authorization": f"Bearer {access_token}"}


async def send_json(
    method: str,
    url: str,
    *,
    headers: Dict[str, str],
    json: Optional[Dict[str, Any]] = None,
    http_client: Optional[httpx.AsyncClient] = None,
    timeout_seconds: float = 20.0,
) -> Any:
    """Send one request and return the decoded JSON body, raising TransportError on failure."""
    try:
        if http_client is not None:
            response = await http_client.request(method, url, json=json, headers=headers)
        else:
            async with httpx.AsyncClient(timeout=timeout_seconds) as client:
                response = await client.request(method, url, json=json, headers=headers)
    except httpx.HTTPError as e:
        raise TransportError(f"{method} {url} failed: {e}") from e

    if response.is_error:
        raise TransportError.from_response(response)

    logger.debug("%s %s -> %s", method, url, response.status_code)
    try:
        return response.json() if response.content else {}
    except ValueError as e:
        raise TransportError(
            f"{method} {url} returned a non-JSON body",
            status_code=response.status_code,
            payload={"body": response.text},
        ) from e
