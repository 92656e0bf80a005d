"""Tests for the asynchronous Peyflex client."""

from __future__ import annotations

from typing import Any
from unittest.mock import AsyncMock, call, patch

import httpx
import pytest

from peyflex.client import AsyncPeyflexClient
from peyflex.shared.exceptions import PeyflexException
from peyflex.shared.retry import ExponentialBackoff

TEST_TOKEN = "test-token"
TEST_BASE_URL = "https://api.test.com/api"

# (method, args, verb, path, query, body)
ENDPOINTS: list[tuple[str, tuple[Any, ...], str, str, dict | None, dict | None]] = [
    ("get_profile", (), "GET", "user/profile", None, None),
    ("get_balance", (), "GET", "user/balance", None, None),
    ("get_airtime_networks", (), "GET", "airtime/networks", None, None),
    (
        "purchase_airtime",
        ("glo", "08051234567", 200.0),
        "POST",
        "airtime/purchase",
        None,
        {"network": "glo", "phone": "08051234567", "amount": 200.0},
    ),
    ("get_data_networks", (), "GET", "data/networks", None, None),
    ("get_data_plans", ("glo_data",), "GET", "data/plans", {"network": "glo_data"}, None),
    (
        "purchase_data",
        ("glo_data", "08051234567", "1gb"),
        "POST",
        "data/purchase",
        None,
        {"network": "glo_data", "phone": "08051234567", "plan": "1gb"},
    ),
    ("get_cable_providers", (), "GET", "cable/providers", None, None),
    (
        "verify_cable",
        ("gotv", "7012345678"),
        "POST",
        "cable/verify",
        None,
        {"provider": "gotv", "iuc_number": "7012345678"},
    ),
    (
        "purchase_cable",
        ("gotv", "7012345678", "gotv_max"),
        "POST",
        "cable/purchase",
        None,
        {"provider": "gotv", "iuc_number": "7012345678", "plan": "gotv_max"},
    ),
    (
        "get_electricity_plans",
        (),
        "GET",
        "electricity/plans",
        {"identifier": "electricity"},
        None,
    ),
    (
        "verify_meter",
        ("eko_electric", "0101", "postpaid"),
        "POST",
        "electricity/verify",
        None,
        {
            "identifier": "electricity",
            "provider": "eko_electric",
            "meter_number": "0101",
            "type": "postpaid",
        },
    ),
    (
        "purchase_electricity",
        ("eko_electric", "0101", 3000),
        "POST",
        "electricity/purchase",
        None,
        {"provider": "eko_electric", "meter_number": "0101", "amount": 3000, "type": "prepaid"},
    ),
]


def _client(handler: Any, **kwargs: Any) -> AsyncPeyflexClient:
    return AsyncPeyflexClient(
        TEST_TOKEN, base_url=TEST_BASE_URL, transport=httpx.MockTransport(handler), **kwargs
    )


@pytest.mark.asyncio
@pytest.mark.parametrize(("method", "args", "verb", "path", "query", "body"), ENDPOINTS)
async def test_endpoint_contract(handler, method, args, verb, path, query, body):
    handler.responses = [httpx.Response(200, json={"ok": True})]

    async with _client(handler) as client:
        result = await getattr(client, method)(*args)

    assert result == {"ok": True}
    request = handler.last
    assert request.method == verb
    assert request.url.path == f"/api/{path}"
    assert dict(request.url.params) == (query or {})
    assert request.headers["Authorization"] == f"Bearer {TEST_TOKEN}"
    if body is not None:
        assert handler.last_json() == body


@pytest.mark.asyncio
async def test_async_retry_then_success(handler):
    handler.responses = [
        httpx.Response(502),
        httpx.Response(200, json={"balance": 10}),
    ]

    with patch("asyncio.sleep", new_callable=AsyncMock) as mock_sleep:
        async with _client(handler) as client:
            assert await client.get_balance() == {"balance": 10}

    assert len(handler.requests) == 2
    mock_sleep.assert_awaited_once_with(1.0)


@pytest.mark.asyncio
async def test_async_retries_exhausted(handler):
    handler.responses = [httpx.Response(500, json={"error": "Internal error"})]

    with patch("asyncio.sleep", new_callable=AsyncMock) as mock_sleep:
        async with _client(handler, retries=3) as client:
            with pytest.raises(PeyflexException) as excinfo:
                await client.get_profile()

    assert excinfo.value.message == "API Request Failed: Internal error"
    assert excinfo.value.status_code == 500
    assert len(handler.requests) == 4
    assert mock_sleep.await_args_list == [call(1.0), call(2.0), call(4.0)]


@pytest.mark.asyncio
async def test_async_error_message(handler):
    handler.responses = [httpx.Response(400, json={"error": "Insufficient balance"})]

    async with _client(handler) as client:
        with pytest.raises(PeyflexException, match="^API Request Failed: Insufficient balance$"):
            await client.purchase_airtime("mtn", "08012345678", 50000)


@pytest.mark.asyncio
async def test_async_connection_error_exhausts_capped_policy(handler):
    handler.responses = [httpx.ConnectError("Connection refused")]
    policy = ExponentialBackoff(max_retries=3, base_delay=0, max_connect_retries=2)

    async with _client(handler, retry_policy=policy) as client:
        with pytest.raises(PeyflexException) as excinfo:
            await client.get_profile()

    assert excinfo.value.message == "API Request Failed: Connection refused"
    assert len(handler.requests) == 3


@pytest.mark.asyncio
async def test_async_malformed_json(handler):
    handler.responses = [httpx.Response(200, content=b"not json")]

    async with _client(handler) as client:
        with pytest.raises(PeyflexException, match="Failed to decode JSON response"):
            await client.get_balance()
