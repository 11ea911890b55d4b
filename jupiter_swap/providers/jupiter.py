"""
Jupiter v6 quote and swap-transaction provider.

Two endpoints are used:
- GET  /quote: priced route for an input/output mint pair
- POST /swap:  unsigned VersionedTransaction (base64) for a quote

Quote bodies are returned exactly as Jupiter sent them so they can be posted
back to /swap without loss.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import httpx

from ..core.errors import ApiError, NetworkError
from ..core.swap.constants import (
    DEFAULT_SLIPPAGE_BPS,
    JUPITER_V6_QUOTE_API,
    JUPITER_V6_SWAP_API,
    SWAP_EXECUTION_PREFERENCES,
)
from ..core.swap.models import QuoteResponse

logger = logging.getLogger(__name__)


def _error_message(response: httpx.Response) -> str:
    """Pull the error text out of a failed response, falling back to the reason phrase."""
    try:
        data = response.json()
    except ValueError:
        data = None

    if isinstance(data, dict):
        error = data.get("error") or data.get("message")
        if error:
            return str(error)

    return response.reason_phrase or f"HTTP {response.status_code}"


async def fetch_json(
    method: str,
    url: str,
    *,
    params: Optional[Dict[str, Any]] = None,
    json: Optional[Dict[str, Any]] = None,
    timeout_s: float = 30.0,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> Any:
    """
    Perform a single HTTP request and decode the JSON body.

    Raises:
        ApiError: the server answered with a non-2xx status
        NetworkError: the request never completed, or the body is not JSON
    """
    try:
        async with httpx.AsyncClient(timeout=timeout_s, transport=transport) as client:
            response = await client.request(method, url, params=params, json=json)
    except httpx.HTTPError as e:
        raise NetworkError(f"Network request failed: {str(e) or e.__class__.__name__}")

    if not response.is_success:
        message = _error_message(response)
        logger.warning(f"Jupiter API {method} {url} returned {response.status_code}: {message}")
        raise ApiError(
            f"API request failed: {message}",
            status_code=response.status_code,
        )

    try:
        return response.json()
    except ValueError as e:
        raise NetworkError(f"Network request failed: invalid JSON response ({e})")


class JupiterSwapProvider:
    """
    Jupiter swap provider for Solana token swaps.

    Usage:
        provider = JupiterSwapProvider()

        quote = await provider.get_quote(
            input_mint=WRAPPED_SOL_MINT,
            output_mint=USDC_MINT,
            amount=1_000_000_000,  # 1 SOL in lamports
            slippage_bps=50,
        )

        swap_tx = await provider.build_swap_transaction(
            quote=quote,
            user_public_key="...",
            max_slippage_bps=50,
        )
    """

    def __init__(
        self,
        quote_api_url: str = JUPITER_V6_QUOTE_API,
        swap_api_url: str = JUPITER_V6_SWAP_API,
        timeout_s: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.quote_api_url = quote_api_url
        self.swap_api_url = swap_api_url
        self._timeout_s = timeout_s
        self._transport = transport

    async def get_quote(
        self,
        input_mint: str,
        output_mint: str,
        amount: int,
        slippage_bps: int = DEFAULT_SLIPPAGE_BPS,
    ) -> QuoteResponse:
        """
        Get a swap quote from Jupiter.

        Args:
            input_mint: Input token mint address
            output_mint: Output token mint address
            amount: Amount in smallest units (lamports for SOL)
            slippage_bps: Slippage tolerance in basis points (50 = 0.5%)

        Returns:
            The quote body, unchanged
        """
        params = {
            "inputMint": input_mint,
            "outputMint": output_mint,
            "amount": str(amount),
            "slippageBps": slippage_bps,
        }
        logger.debug(f"Requesting Jupiter quote {input_mint} -> {output_mint} amount={amount}")
        return await fetch_json(
            "GET",
            self.quote_api_url,
            params=params,
            timeout_s=self._timeout_s,
            transport=self._transport,
        )

    async def build_swap_transaction(
        self,
        quote: QuoteResponse,
        user_public_key: str,
        max_slippage_bps: int = DEFAULT_SLIPPAGE_BPS,
    ) -> Dict[str, Any]:
        """
        Request an unsigned swap transaction for a quote.

        Native SOL is wrapped/unwrapped automatically, compute units and the
        priority fee are sized by Jupiter, and dynamic slippage is capped at
        ``max_slippage_bps``.

        Returns:
            The /swap response body; ``swapTransaction`` holds the base64 payload
        """
        payload = {
            "quoteResponse": quote,
            "userPublicKey": user_public_key,
            **SWAP_EXECUTION_PREFERENCES,
            "dynamicSlippage": {"maxBps": max_slippage_bps},
        }
        return await fetch_json(
            "POST",
            self.swap_api_url,
            json=payload,
            timeout_s=self._timeout_s,
            transport=self._transport,
        )


__all__ = [
    "JupiterSwapProvider",
    "fetch_json",
]
