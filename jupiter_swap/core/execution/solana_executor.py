"""
Solana Transaction Executor.

Handles sending and confirming Solana transactions built by Jupiter.
"""

from __future__ import annotations

import asyncio
import base64
import logging
from typing import Any, Dict, List, Optional

import httpx

from ..errors import ConfirmationError, RpcConnectionError, RpcError
from ..swap.models import LatestBlockhash

logger = logging.getLogger(__name__)

_COMMITMENT_RANK = {"processed": 0, "confirmed": 1, "finalized": 2}
_RPC_URL_SCHEMES = {"http", "https", "ws", "wss"}


def create_connection(
    rpc_url: str,
    commitment: str = "confirmed",
    max_retries: int = 3,
    timeout_s: float = 30.0,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> "SolanaExecutor":
    """
    Validate an RPC endpoint and build an executor for it.

    Raises:
        RpcConnectionError: the URL or commitment is unusable
    """
    try:
        url = httpx.URL(rpc_url)
    except (httpx.InvalidURL, TypeError) as e:
        raise RpcConnectionError(f"Failed to create connection: {e}")

    if url.scheme not in _RPC_URL_SCHEMES or not url.host:
        raise RpcConnectionError(f"Failed to create connection: invalid RPC URL {rpc_url!r}")
    if commitment not in _COMMITMENT_RANK:
        raise RpcConnectionError(f"Failed to create connection: unknown commitment {commitment!r}")

    # JSON-RPC goes over HTTP even when a websocket URL is configured
    if url.scheme in ("ws", "wss"):
        url = url.copy_with(scheme="https" if url.scheme == "wss" else "http")

    return SolanaExecutor(
        rpc_url=str(url),
        commitment=commitment,
        max_retries=max_retries,
        timeout_s=timeout_s,
        transport=transport,
    )


class SolanaExecutor:
    """
    JSON-RPC client for submitting and confirming Solana transactions.

    The underlying httpx client is created lazily and reused, so a single
    executor can serve concurrent swaps.

    Usage:
        executor = create_connection("https://api.mainnet-beta.solana.com")

        latest = await executor.get_latest_blockhash()
        signature = await executor.send_raw_transaction(bytes(signed_tx), skip_preflight=True)
        await executor.confirm_transaction(
            signature, latest.blockhash, latest.last_valid_block_height
        )
    """

    def __init__(
        self,
        rpc_url: str,
        commitment: str = "confirmed",
        max_retries: int = 3,
        timeout_s: float = 30.0,
        poll_interval_s: float = 1.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.rpc_url = rpc_url
        self.commitment = commitment
        self._max_retries = max(1, max_retries)
        self._timeout_s = timeout_s
        self._poll_interval_s = poll_interval_s
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None
        self._request_id = 0

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self._timeout_s, transport=self._transport)
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None

    async def _rpc_call(
        self,
        method: str,
        params: List[Any],
        retry: bool = True,
    ) -> Any:
        """
        Make an RPC call to the Solana node and return its ``result``.

        Transport and HTTP failures are retried with linear backoff unless
        ``retry`` is False, in which case the first failure is raised.
        """
        client = await self._get_client()

        self._request_id += 1
        payload = {
            "jsonrpc": "2.0",
            "id": self._request_id,
            "method": method,
            "params": params,
        }

        attempts = self._max_retries if retry else 1
        for attempt in range(attempts):
            try:
                response = await client.post(
                    self.rpc_url,
                    json=payload,
                    headers={"Content-Type": "application/json"},
                )
                response.raise_for_status()
                data = response.json()

                if "error" in data:
                    error = data["error"]
                    error_msg = error.get("message", str(error)) if isinstance(error, dict) else str(error)
                    raise RpcError(f"RPC error in {method}: {error_msg}", details={"error": error})

                return data.get("result")

            except httpx.HTTPStatusError as e:
                if attempt == attempts - 1:
                    raise RpcError(f"HTTP error in {method}: {e.response.status_code}")
                logger.warning(f"Solana RPC {method} returned {e.response.status_code}, retrying")
                await asyncio.sleep(0.5 * (attempt + 1))
            except RpcError:
                raise
            except (httpx.HTTPError, ValueError) as e:
                if attempt == attempts - 1:
                    raise RpcError(f"RPC request {method} failed: {str(e) or e.__class__.__name__}")
                logger.warning(f"Solana RPC {method} failed ({e}), retrying")
                await asyncio.sleep(0.5 * (attempt + 1))

        raise RpcError("Max retries exceeded")

    async def get_latest_blockhash(self) -> LatestBlockhash:
        """Get the latest blockhash and the block height it stays valid until."""
        result = await self._rpc_call(
            "getLatestBlockhash",
            [{"commitment": self.commitment}],
        )

        value = (result or {}).get("value") or {}
        blockhash = value.get("blockhash")
        last_valid = value.get("lastValidBlockHeight")
        if not blockhash or last_valid is None:
            raise RpcError("getLatestBlockhash returned no blockhash")

        return LatestBlockhash(blockhash=blockhash, last_valid_block_height=int(last_valid))

    async def get_block_height(self) -> int:
        result = await self._rpc_call("getBlockHeight", [{"commitment": self.commitment}])
        return int(result)

    async def send_raw_transaction(
        self,
        raw_transaction: bytes,
        skip_preflight: bool = False,
        max_retries: Optional[int] = None,
    ) -> str:
        """
        Send a signed, serialized transaction to the network.

        Args:
            raw_transaction: Wire-format transaction bytes
            skip_preflight: Skip preflight simulation
            max_retries: Rebroadcast attempts performed by the node

        Returns:
            Transaction signature (base58)
        """
        options: Dict[str, Any] = {
            "encoding": "base64",
            "skipPreflight": skip_preflight,
            "preflightCommitment": self.commitment,
        }
        if max_retries is not None:
            options["maxRetries"] = max_retries

        encoded = base64.b64encode(raw_transaction).decode("ascii")
        # rebroadcast is left to the node via maxRetries
        signature = await self._rpc_call("sendTransaction", [encoded, options], retry=False)
        if not signature:
            raise RpcError("No signature returned from sendTransaction")

        logger.info(f"Submitted Solana transaction {signature}")
        return signature

    async def get_signature_status(self, signature: str) -> Optional[Dict[str, Any]]:
        """Return the node's status entry for a signature, or None if unknown."""
        result = await self._rpc_call(
            "getSignatureStatuses",
            [[signature], {"searchTransactionHistory": False}],
        )
        statuses = (result or {}).get("value") or [None]
        return statuses[0]

    async def confirm_transaction(
        self,
        signature: str,
        blockhash: str,
        last_valid_block_height: int,
    ) -> Dict[str, Any]:
        """
        Wait until a transaction reaches this executor's commitment level.

        Polls until the signature is confirmed, reports an on-chain error, or
        the chain moves past ``last_valid_block_height`` (the blockhash expired).

        Returns:
            The final signature status entry

        Raises:
            ConfirmationError: the transaction failed or expired
        """
        target = _COMMITMENT_RANK.get(self.commitment, 1)

        while True:
            status = await self.get_signature_status(signature)

            if status is not None:
                if status.get("err") is not None:
                    raise ConfirmationError(
                        f"Transaction {signature} failed: {status['err']}",
                        signature=signature,
                        details={"err": status["err"], "slot": status.get("slot")},
                    )
                reached = _COMMITMENT_RANK.get(status.get("confirmationStatus") or "", -1)
                if reached >= target:
                    logger.info(f"Transaction {signature} reached {status.get('confirmationStatus')}")
                    return status

            block_height = await self.get_block_height()
            if block_height > last_valid_block_height:
                raise ConfirmationError(
                    f"Transaction {signature} expired: block height exceeded "
                    f"({block_height} > {last_valid_block_height}) for blockhash {blockhash}",
                    signature=signature,
                )

            await asyncio.sleep(self._poll_interval_s)


__all__ = [
    "SolanaExecutor",
    "create_connection",
]
