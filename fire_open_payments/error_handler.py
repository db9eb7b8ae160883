"""Error taxonomy for the fire.com client and helpers to turn exceptions into results."""
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import httpx

from fire_open_payments.integrations.contracts.results import Err, ErrorKind
from fire_open_payments.integrations.policy.response_wrappers import IntegrationResponseError

logger = logging.getLogger(__name__)


class FireError(Exception):
    """Base class for every error raised by this package."""


class ConfigurationError(FireError, ValueError):
    """Configuration or caller-supplied arguments are unusable."""


class MissingFieldError(ConfigurationError):
    def __init__(self, field: str) -> None:
        super().__init__(f"{field} is required")
        self.field = field


class TransportError(FireError):
    """Network failure or a non-2xx answer from the gateway."""

    def __init__(
        self,
        message: str,
        *,
        status_code: Optional[int] = None,
        payload: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.payload = payload or {}

    @property
    def errors(self) -> List[Any]:
        errors = self.payload.get("errors")
        return errors if isinstance(errors, list) else []

    @classmethod
    def from_response(cls, response: httpx.Response) -> "TransportError":
        try:
            payload = response.json() if response.content else {}
        except ValueError:
            payload = {"body": response.text}
        if not isinstance(payload, dict):
            payload = {"body": payload}
        return cls(
            f"fire.com responded {response.status_code} for {response.request.method} {response.request.url}",
            status_code=response.status_code,
            payload=payload,
        )


class DecodeError(FireError):
    """A webhook token could not be decoded or verified."""


class ErrorHandler:
    def handle_exception(self, exc: Exception, context: Dict[str, Any] = None) -> Err:
        if isinstance(exc, TransportError):
            kind = ErrorKind.TRANSPORT
            logger.error(
                "fire.com request failed: %s",
                {"status": exc.status_code, "errors": exc.errors, "context": context or {}},
            )
        elif isinstance(exc, ConfigurationError):
            kind = ErrorKind.CONFIGURATION
            logger.error("Invalid fire.com request: %s", exc)
        elif isinstance(exc, DecodeError):
            kind = ErrorKind.DECODE
            logger.error("Could not decode fire.com token: %s", exc)
        elif isinstance(exc, IntegrationResponseError):
            kind = ErrorKind.RESPONSE
            logger.error("Unexpected fire.com response: %s (payload=%s)", exc, exc.payload)
        else:
            raise exc

        return Err(kind=kind, detail=str(exc), error=exc)
