import jwt
import pytest

from fire_open_payments.error_handler import DecodeError
from fire_open_payments.integrations.contracts.interfaces import WebhookOutcome, WebhookStatus
from fire_open_payments.integrations.webhooks.decoder import WebhookHandler, decode_webhook_token

SECRET = "fire-webhook-secret-0123456789abcdef"


def _token(claims, secret=SECRET):
    return jwt.encode(claims, secret, algorithm="HS256")


class Recorder:
    def __init__(self):
        self.calls = []

    def callbacks(self):
        return dict(
            on_success=lambda event: self.calls.append(("success", event.raw_status)),
            on_failure=lambda event: self.calls.append(("failure", event.raw_status)),
            on_pending=lambda event: self.calls.append(("pending", event.raw_status)),
        )


def test_decode_without_secret_reads_claims_unverified():
    event = decode_webhook_token(_token({"status": "SETTLED", "paymentUuid": "u1"}))

    assert event.status is WebhookStatus.SETTLED
    assert event.raw_status == "SETTLED"
    assert event.verified is False
    assert event.claims["paymentUuid"] == "u1"


def test_decode_accepts_bytes_with_whitespace():
    event = decode_webhook_token((_token({"status": "PAID"}) + "\n").encode("utf-8"))
    assert event.status is WebhookStatus.PAID


def test_decode_with_secret_verifies_signature():
    event = decode_webhook_token(_token({"status": "PAID"}), secret=SECRET)

    assert event.verified is True
    assert event.status is WebhookStatus.PAID


def test_wrong_secret_is_rejected():
    token = _token({"status": "PAID"}, secret="someone-else-entirely-0123456789abc")

    with pytest.raises(DecodeError):
        decode_webhook_token(token, secret=SECRET)


@pytest.mark.parametrize("body", ["not-a-token", "", b"\xff\xfe", "a.b.c"])
def test_malformed_tokens_raise_decode_error(body):
    with pytest.raises(DecodeError):
        decode_webhook_token(body)


def test_unknown_status_maps_to_other():
    event = decode_webhook_token(_token({"status": "AWAITING_AUTHORISATION"}))

    assert event.status is WebhookStatus.OTHER
    assert event.raw_status == "AWAITING_AUTHORISATION"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "status, outcome, branch",
    [
        ("PAID", WebhookOutcome.SUCCESS, "success"),
        ("SETTLED", WebhookOutcome.SUCCESS, "success"),
        ("NOT_AUTHORISED", WebhookOutcome.FAILURE, "failure"),
        ("PENDING", WebhookOutcome.PENDING, "pending"),
    ],
)
async def test_handler_dispatches_by_status_and_acknowledges(status, outcome, branch):
    recorder = Recorder()
    handler = WebhookHandler(**recorder.callbacks())

    result = await handler.handle(_token({"status": status}))

    assert result.status_code == 200
    assert result.outcome is outcome
    assert recorder.calls == [(branch, status)]


@pytest.mark.asyncio
async def test_handler_without_status_takes_pending_branch():
    recorder = Recorder()
    handler = WebhookHandler(**recorder.callbacks())

    result = await handler.handle(_token({"amount": 10}))

    assert result.status_code == 200
    assert recorder.calls == [("pending", None)]


@pytest.mark.asyncio
async def test_handler_rejects_malformed_token_with_401():
    recorder = Recorder()
    handler = WebhookHandler(**recorder.callbacks())

    result = await handler.handle(b"garbage")

    assert result.status_code == 401
    assert result.outcome is None
    assert result.error
    assert recorder.calls == []


@pytest.mark.asyncio
async def test_handler_with_secret_rejects_forged_token():
    handler = WebhookHandler(secret=SECRET)

    forged = _token({"status": "PAID"}, secret="forged-secret-0123456789abcdefghijkl")
    assert (await handler.handle(forged)).status_code == 401
    assert (await handler.handle(_token({"status": "PAID"}))).status_code == 200


@pytest.mark.asyncio
async def test_handler_awaits_async_callbacks():
    seen = []

    async def on_success(event):
        seen.append(event.claims["paymentUuid"])

    handler = WebhookHandler(on_success=on_success)

    await handler.handle(_token({"status": "SETTLED", "paymentUuid": "u9"}))

    assert seen == ["u9"]


@pytest.mark.asyncio
async def test_handler_reports_failing_async_callback():
    async def on_failure(event):
        raise ValueError("order not found")

    handler = WebhookHandler(on_failure=on_failure)

    result = await handler.handle(_token({"status": "NOT_AUTHORISED"}))

    assert result.status_code == 401
    assert result.outcome is WebhookOutcome.FAILURE
    assert result.error == "order not found"
