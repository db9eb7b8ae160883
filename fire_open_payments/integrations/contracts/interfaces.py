from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, Optional, Union


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------

class FireMode(str, Enum):
    SANDBOX = "sandbox"
    LIVE = "live"


class WebhookStatus(str, Enum):
    PAID = "PAID"
    SETTLED = "SETTLED"
    NOT_AUTHORISED = "NOT_AUTHORISED"
    OTHER = "OTHER"

    @classmethod
    def from_raw(cls, raw_status: Any) -> "WebhookStatus":
        value = str(raw_status or "").strip().upper()
        try:
            return cls(value)
        except ValueError:
            return cls.OTHER


class WebhookOutcome(str, Enum):
    SUCCESS = "SUCCESS"
    FAILURE = "FAILURE"
    PENDING = "PENDING"


# ---------------------------------------------------------------------------
# Shared data models
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class FireEndpoints:
    api_base_url: str
    redirect_base_url: str


@dataclass
class AccessToken:
    value: str
    expires_at: datetime

    def is_expired(self, now: Optional[datetime] = None, skew: timedelta = timedelta(seconds=30)) -> bool:
        now = now or datetime.now(timezone.utc)
        return now + skew >= self.expires_at


@dataclass
class PaymentRequest:
    title: str
    amount: Union[int, float, str, Decimal]
    details: str
    currency: str
    account_no: str
    reference: str
    return_url: Optional[str] = None
    expiry: Optional[Union[str, datetime]] = None           # ISO-8601, defaults to now + 24h


@dataclass
class FireWebhookEvent:
    """Claims carried by a webhook token posted by fire.com."""
    status: WebhookStatus
    raw_status: Optional[str]
    verified: bool
    claims: Dict[str, Any] = field(default_factory=dict)
    received_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
