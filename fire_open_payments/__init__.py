"""
Python client for the fire.com Open Payments API.

    from fire_open_payments import FireAPI

    fire = FireAPI({"client_id": ..., "client_key": ..., "refresh_token": ..., "mode": "sandbox"})
    result = await fire.create_payment_request("Order 42", 10.0, "2 x coffee", "EUR",
                                               account_no="1234", reference="order-42")
"""

from .error_handler import (
    ConfigurationError,
    DecodeError,
    ErrorHandler,
    FireError,
    MissingFieldError,
    TransportError,
)
from .integrations.clients.mocks.fire import MockFireAPI
from .integrations.clients.real_http.accesstokens import TokenManager, generate_nonce, hash_client_key
from .integrations.clients.real_http.fire import FireAPI
from .integrations.contracts.interfaces import (
    FireEndpoints,
    FireMode,
    FireWebhookEvent,
    PaymentRequest,
    WebhookOutcome,
    WebhookStatus,
)
from .integrations.contracts.payments import classify_status
from .integrations.contracts.results import Err, ErrorKind, Ok, Result
from .integrations.policy.response_wrappers import IntegrationResponseError
from .integrations.webhooks.decoder import WebhookHandler, WebhookResult, decode_webhook_token
from .utils.config_loader import FireConfig, check_required_fields, load_fire_config, resolve_endpoints

__all__ = [
    # client
    "FireAPI", "MockFireAPI", "TokenManager", "generate_nonce", "hash_client_key",
    # config
    "FireConfig", "FireEndpoints", "FireMode", "check_required_fields",
    "load_fire_config", "resolve_endpoints",
    # contracts
    "PaymentRequest", "FireWebhookEvent", "WebhookOutcome", "WebhookStatus",
    "classify_status", "Ok", "Err", "ErrorKind", "Result",
    # webhooks
    "WebhookHandler", "WebhookResult", "decode_webhook_token",
    # errors
    "FireError", "ConfigurationError", "MissingFieldError", "TransportError",
    "DecodeError", "IntegrationResponseError", "ErrorHandler",
]
