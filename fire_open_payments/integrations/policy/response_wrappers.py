from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, ValidationError

from fire_open_payments.integrations.contracts.interfaces import AccessToken


class IntegrationResponseError(ValueError):
    def __init__(self, message: str, *, payload: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message)
        self.payload = payload or {}


class AccessTokenResponseModel(BaseModel):
    access_token: str
    expiry: Optional[datetime] = None
    scope: List[str] = Field(default_factory=list)
    raw: Dict[str, Any] = Field(default_factory=dict)


class PaymentRequestCreatedModel(BaseModel):
    code: str
    raw: Dict[str, Any] = Field(default_factory=dict)


def normalize_access_token_response(
    raw: Dict[str, Any],
    *,
    fallback_ttl_seconds: int,
    now: Optional[datetime] = None,
) -> AccessToken:
    raw = _require_object(raw)
    access_token = _first_non_empty(raw, "accessToken", "access_token")
    scope = raw.get("scope") if isinstance(raw.get("scope"), list) else []

    model = _build_model(
        AccessTokenResponseModel,
        {
            "access_token": str(access_token),
            "expiry": raw.get("expiry") or raw.get("expiresAt"),
            "scope": scope,
            "raw": raw,
        },
        raw,
    )

    expires_at = model.expiry
    if expires_at is None:
        expires_at = (now or datetime.now(timezone.utc)) + timedelta(seconds=fallback_ttl_seconds)
    elif expires_at.tzinfo is None:
        expires_at = expires_at.replace(tzinfo=timezone.utc)

    return AccessToken(value=model.access_token, expires_at=expires_at)


def normalize_payment_request_created(raw: Dict[str, Any]) -> PaymentRequestCreatedModel:
    raw = _require_object(raw)
    code = _first_non_empty(raw, "code", "paymentRequestCode")
    return _build_model(PaymentRequestCreatedModel, {"code": str(code), "raw": raw}, raw)


def _require_object(raw: Any) -> Dict[str, Any]:
    if not isinstance(raw, dict):
        raise IntegrationResponseError(f"Expected a JSON object from fire.com; got {type(raw).__name__}.")
    return raw


def _first_non_empty(data: Dict[str, Any], *keys: str, default: Any = None) -> Any:
    for key in keys:
        value = data.get(key)
        if value is None:
            continue
        if isinstance(value, str) and not value.strip():
            continue
        return value
    if default is not None:
        return default
    raise IntegrationResponseError(f"Missing required field. Checked keys: {', '.join(keys)}", payload=data)


def _build_model(model_type, payload: Dict[str, Any], raw: Dict[str, Any]):
    try:
        return model_type(**payload)
    except ValidationError as exc:
        raise IntegrationResponseError(f"Response validation failed: {exc}", payload=raw) from exc
