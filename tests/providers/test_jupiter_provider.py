"""
Tests for the Jupiter quote/swap HTTP provider.
"""

import json

import httpx
import pytest

from jupiter_swap.core.errors import ApiError, ErrorCode, NetworkError
from jupiter_swap.providers.jupiter import JupiterSwapProvider, fetch_json
from tests.conftest import QUOTE_URL, SOL, SWAP_URL, USDC, make_quote


def _provider(handler) -> JupiterSwapProvider:
    return JupiterSwapProvider(
        quote_api_url=QUOTE_URL,
        swap_api_url=SWAP_URL,
        transport=httpx.MockTransport(handler),
    )


@pytest.mark.asyncio
async def test_get_quote_sends_query_and_returns_body_unchanged():
    body = make_quote()
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json=body)

    quote = await _provider(handler).get_quote(SOL, USDC, 1_000_000_000, slippage_bps=75)

    assert quote == body
    assert len(seen) == 1
    request = seen[0]
    assert request.method == "GET"
    assert request.url.params["inputMint"] == SOL
    assert request.url.params["outputMint"] == USDC
    assert request.url.params["amount"] == "1000000000"
    assert request.url.params["slippageBps"] == "75"


@pytest.mark.asyncio
async def test_get_quote_is_repeatable():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json=make_quote())

    provider = _provider(handler)
    first = await provider.get_quote(SOL, USDC, 1000)
    second = await provider.get_quote(SOL, USDC, 1000)

    assert json.dumps(first, sort_keys=True) == json.dumps(second, sort_keys=True)


@pytest.mark.asyncio
@pytest.mark.parametrize("status", [400, 404, 429, 500, 503])
async def test_get_quote_error_status_raises_api_error_with_body_message(status):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(status, json={"error": "Could not find any route"})

    with pytest.raises(ApiError) as excinfo:
        await _provider(handler).get_quote(SOL, USDC, 1000)

    assert excinfo.value.code == ErrorCode.API_ERROR
    assert excinfo.value.status_code == status
    assert "Could not find any route" in excinfo.value.message


@pytest.mark.asyncio
async def test_get_quote_error_without_json_uses_reason_phrase():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(502, text="<html>bad gateway</html>")

    with pytest.raises(ApiError) as excinfo:
        await _provider(handler).get_quote(SOL, USDC, 1000)

    assert excinfo.value.message == "API request failed: Bad Gateway"


@pytest.mark.asyncio
async def test_connection_refused_raises_network_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("Connection refused", request=request)

    with pytest.raises(NetworkError) as excinfo:
        await _provider(handler).get_quote(SOL, USDC, 1000)

    assert excinfo.value.code == ErrorCode.NETWORK_ERROR
    assert "Connection refused" in excinfo.value.message


@pytest.mark.asyncio
async def test_success_with_invalid_json_raises_network_error():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, text="not json")

    with pytest.raises(NetworkError):
        await fetch_json("GET", QUOTE_URL, transport=httpx.MockTransport(handler))


@pytest.mark.asyncio
async def test_build_swap_transaction_posts_quote_and_preferences():
    quote = make_quote()
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"swapTransaction": "AQID", "lastValidBlockHeight": 10})

    response = await _provider(handler).build_swap_transaction(
        quote, user_public_key="Wallet1111111111111111111111111111111111111", max_slippage_bps=120
    )

    assert response["swapTransaction"] == "AQID"
    assert seen[0].method == "POST"
    assert json.loads(seen[0].content) == {
        "quoteResponse": quote,
        "userPublicKey": "Wallet1111111111111111111111111111111111111",
        "wrapAndUnwrapSol": True,
        "dynamicComputeUnitLimit": True,
        "prioritizationFeeLamports": "auto",
        "dynamicSlippage": {"maxBps": 120},
    }


@pytest.mark.asyncio
async def test_build_swap_transaction_transport_failure_raises_network_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("timed out", request=request)

    with pytest.raises(NetworkError):
        await _provider(handler).build_swap_transaction(make_quote(), user_public_key="x")
