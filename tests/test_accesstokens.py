import asyncio
import hashlib
from datetime import datetime, timedelta, timezone

import httpx
import pytest

from fire_open_payments.error_handler import TransportError
from fire_open_payments.integrations.clients.real_http.accesstokens import (
    NONCE_UPPER_BOUND,
    TokenManager,
    generate_nonce,
    hash_client_key,
)
from fire_open_payments.integrations.contracts.results import ErrorKind
from fire_open_payments.utils.config_loader import check_required_fields

TOKEN_PATH = "/business/v1/apps/accesstokens"


def test_hash_is_sha256_of_nonce_then_key():
    expected = hashlib.sha256(b"123456test_client_key").hexdigest()
    assert hash_client_key("123456", "test_client_key") == expected


def test_hash_is_deterministic_and_nonce_sensitive():
    assert hash_client_key("42", "key") == hash_client_key("42", "key")
    assert hash_client_key("42", "key") != hash_client_key("43", "key")
    assert len(hash_client_key("42", "key")) == 64


def test_nonce_is_decimal_string_in_range():
    for _ in range(50):
        nonce = generate_nonce()
        assert nonce.isdigit()
        assert 0 <= int(nonce) < NONCE_UPPER_BOUND


@pytest.mark.asyncio
async def test_get_access_token_posts_hashed_credentials_and_caches(fire, server):
    server.add("POST", TOKEN_PATH, json={"accessToken": "test_access_token"})

    result = await fire.get_access_token()

    assert result.is_ok
    assert result.value == "test_access_token"
    assert fire.access_token == "test_access_token"

    (request,) = server.calls("POST", TOKEN_PATH)
    assert str(request.url) == "https://api-preprod.fire.com/business/v1/apps/accesstokens"
    body = server.body(request)
    assert body["clientId"] == "test_client_id"
    assert body["refreshToken"] == "test_refresh_token"
    assert body["grantType"] == "AccessToken"
    assert body["nonce"].isdigit()
    assert body["clientSecret"] == hash_client_key(body["nonce"], "test_client_key")
    assert "test_client_key" not in request.content.decode()
    assert "authorization" not in request.headers


@pytest.mark.asyncio
async def test_cached_token_is_reused(fire, server):
    server.add("POST", TOKEN_PATH, json={"accessToken": "T"})

    first = await fire.get_access_token()
    second = await fire.get_access_token()

    assert first.value == second.value == "T"
    assert len(server.calls("POST", TOKEN_PATH)) == 1


@pytest.mark.asyncio
async def test_expired_token_is_refreshed(fire, server):
    server.add("POST", TOKEN_PATH, json={"accessToken": "old", "expiry": "2000-01-01T00:00:00.000Z"})
    server.add("POST", TOKEN_PATH, json={"accessToken": "new"})

    assert (await fire.get_access_token()).value == "old"
    assert (await fire.get_access_token()).value == "new"
    assert len(server.calls("POST", TOKEN_PATH)) == 2


@pytest.mark.asyncio
async def test_gateway_expiry_is_used_when_present(fire_config, server):
    expiry = datetime.now(timezone.utc) + timedelta(hours=2)
    server.add("POST", TOKEN_PATH, json={"accessToken": "T", "expiry": expiry.isoformat()})
    manager = TokenManager(check_required_fields(fire_config), http_client=server.client())

    await manager.get_access_token()

    assert manager.has_valid_token()
    assert abs((manager._token.expires_at - expiry).total_seconds()) < 1


@pytest.mark.asyncio
async def test_concurrent_first_calls_issue_one_token_request(fire, server):
    server.add("POST", TOKEN_PATH, json={"accessToken": "T"})

    results = await asyncio.gather(*(fire.get_access_token() for _ in range(5)))

    assert [r.value for r in results] == ["T"] * 5
    assert len(server.calls("POST", TOKEN_PATH)) == 1


@pytest.mark.asyncio
async def test_rejected_credentials_return_err_not_token(fire, server):
    server.add(
        "POST",
        TOKEN_PATH,
        status=401,
        json={"errors": [{"code": 50020, "message": "Invalid refresh token"}]},
    )

    result = await fire.get_access_token()

    assert result.is_err
    assert result.kind is ErrorKind.TRANSPORT
    assert result.error.status_code == 401
    assert result.error.errors == [{"code": 50020, "message": "Invalid refresh token"}]
    assert fire.access_token is None
    with pytest.raises(TransportError):
        result.unwrap()


@pytest.mark.asyncio
async def test_network_failure_returns_transport_err(fire, server):
    request = httpx.Request("POST", "https://api-preprod.fire.com" + TOKEN_PATH)
    server.raise_on[("POST", TOKEN_PATH)] = httpx.ConnectError("connection refused", request=request)

    result = await fire.get_access_token()

    assert result.is_err
    assert result.kind is ErrorKind.TRANSPORT
    assert result.error.status_code is None


@pytest.mark.asyncio
async def test_body_without_access_token_is_a_response_error(fire, server):
    server.add("POST", TOKEN_PATH, json={"scope": ["PERM_BUSINESSES_GET_ACCOUNTS"]})

    result = await fire.get_access_token()

    assert result.is_err
    assert result.kind is ErrorKind.RESPONSE
    assert fire.access_token is None


@pytest.mark.asyncio
async def test_invalidate_forces_new_token(fire_config, server):
    server.add("POST", TOKEN_PATH, json={"accessToken": "one"})
    server.add("POST", TOKEN_PATH, json={"accessToken": "two"})
    manager = TokenManager(check_required_fields(fire_config), http_client=server.client())

    await manager.get_access_token()
    manager.invalidate()
    result = await manager.get_access_token()

    assert result.value == "two"
    assert manager.access_token == "two"


@pytest.mark.asyncio
async def test_invalidate_ignores_token_that_was_already_replaced(fire_config, server):
    server.add("POST", TOKEN_PATH, json={"accessToken": "one"})
    manager = TokenManager(check_required_fields(fire_config), http_client=server.client())
    await manager.get_access_token()

    manager.invalidate("some-older-token")
    assert manager.access_token == "one"

    manager.invalidate("one")
    assert manager.access_token is None


@pytest.mark.asyncio
async def test_forced_refresh_replaces_valid_token(fire_config, server):
    server.add("POST", TOKEN_PATH, json={"accessToken": "one"})
    server.add("POST", TOKEN_PATH, json={"accessToken": "two"})
    manager = TokenManager(check_required_fields(fire_config), http_client=server.client())

    await manager.get_access_token()
    result = await manager.get_access_token(force=True)

    assert result.value == "two"
    assert len(server.calls("POST", TOKEN_PATH)) == 2
