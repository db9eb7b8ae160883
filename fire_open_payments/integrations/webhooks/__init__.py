"""
Webhook token decoding and dispatch.
"""
from .decoder import WebhookHandler, WebhookResult, decode_webhook_token

__all__ = ["WebhookHandler", "WebhookResult", "decode_webhook_token"]
