"""Shared stubs for the Jupiter quote/swap APIs and a Solana JSON-RPC node."""

from __future__ import annotations

import base64
import json
from typing import Any, Callable, Dict, List, Optional

import httpx
import pytest
from solders.hash import Hash
from solders.keypair import Keypair
from solders.message import MessageV0
from solders.pubkey import Pubkey
from solders.signature import Signature
from solders.system_program import TransferParams, transfer
from solders.transaction import VersionedTransaction

from jupiter_swap.config import JupiterConfig
from jupiter_swap.core.execution.solana_executor import SolanaExecutor
from jupiter_swap.core.swap.manager import JupiterSwap

QUOTE_URL = "https://jupiter.test/v6/quote"
SWAP_URL = "https://jupiter.test/v6/swap"
RPC_URL = "https://rpc.test/"

USDC = "EPjFWdd5AufqSSqeM2qN1xzybapC8G4wEGGkZwyTDt1v"
BONK = "DezXAZ8z7PnrnRJjz3wXBoRgixCa6xjnB7YaB1pPB263"
SOL = "So11111111111111111111111111111111111111112"


def make_quote(input_mint: str = SOL, output_mint: str = USDC, amount: str = "1000") -> Dict[str, Any]:
    return {
        "inputMint": input_mint,
        "inAmount": amount,
        "outputMint": output_mint,
        "outAmount": "171234",
        "otherAmountThreshold": "170378",
        "swapMode": "ExactIn",
        "slippageBps": 50,
        "platformFee": None,
        "priceImpactPct": "0.0001",
        "routePlan": [
            {
                "swapInfo": {"ammKey": "amm-1", "label": "Whirlpool", "inputMint": input_mint},
                "percent": 100,
            }
        ],
        "contextSlot": 301234567,
        "timeTaken": 0.012,
    }


def build_unsigned_transaction(payer: Keypair) -> str:
    """A base64 v0 transaction with one empty signature slot for ``payer``."""
    instruction = transfer(
        TransferParams(from_pubkey=payer.pubkey(), to_pubkey=Pubkey.new_unique(), lamports=1_000)
    )
    message = MessageV0.try_compile(payer.pubkey(), [instruction], [], Hash.default())
    transaction = VersionedTransaction.populate(message, [Signature.default()])
    return base64.b64encode(bytes(transaction)).decode("ascii")


def _base_url(request: httpx.Request) -> str:
    return f"{request.url.scheme}://{request.url.host}{request.url.path}"


class StubServices:
    """
    httpx handler standing in for Jupiter and a Solana node.

    Every request is recorded. Responses can be overridden per endpoint or
    per RPC method by assigning callables that take the request.
    """

    def __init__(self, wallet: Keypair) -> None:
        self.wallet = wallet
        self.requests: List[httpx.Request] = []
        self.quote_body: Dict[str, Any] = make_quote()
        self.swap_transaction: Any = build_unsigned_transaction(wallet)
        self.quote_handler: Optional[Callable[[httpx.Request], httpx.Response]] = None
        self.swap_handler: Optional[Callable[[httpx.Request], httpx.Response]] = None
        self.rpc_results: Dict[str, Any] = {
            "getLatestBlockhash": {
                "context": {"slot": 1},
                "value": {"blockhash": str(Hash.default()), "lastValidBlockHeight": 1_000},
            },
            "getSignatureStatuses": {
                "context": {"slot": 2},
                "value": [
                    {"slot": 2, "confirmations": 1, "err": None, "confirmationStatus": "confirmed"}
                ],
            },
            "getBlockHeight": 900,
        }
        self.rpc_errors: Dict[str, Dict[str, Any]] = {}
        self.submitted: List[VersionedTransaction] = []

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handle)

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        url = _base_url(request)

        if url == QUOTE_URL:
            if self.quote_handler:
                return self.quote_handler(request)
            return httpx.Response(200, json=self.quote_body)

        if url == SWAP_URL:
            if self.swap_handler:
                return self.swap_handler(request)
            return httpx.Response(200, json={"swapTransaction": self.swap_transaction})

        if url == RPC_URL:
            return self._handle_rpc(request)

        return httpx.Response(404, json={"error": f"no stub for {url}"})

    def _handle_rpc(self, request: httpx.Request) -> httpx.Response:
        payload = json.loads(request.content)
        method = payload["method"]
        base = {"jsonrpc": "2.0", "id": payload["id"]}

        if method in self.rpc_errors:
            return httpx.Response(200, json={**base, "error": self.rpc_errors[method]})

        if method == "sendTransaction":
            raw = base64.b64decode(payload["params"][0])
            transaction = VersionedTransaction.from_bytes(raw)
            self.submitted.append(transaction)
            return httpx.Response(200, json={**base, "result": str(transaction.signatures[0])})

        result = self.rpc_results[method]
        if callable(result):
            result = result(payload)
        return httpx.Response(200, json={**base, "result": result})

    def calls(self, url: str) -> List[httpx.Request]:
        return [r for r in self.requests if _base_url(r) == url]

    def rpc_methods(self) -> List[str]:
        return [json.loads(r.content)["method"] for r in self.calls(RPC_URL)]


@pytest.fixture
def wallet() -> Keypair:
    return Keypair()


@pytest.fixture
def stubs(wallet: Keypair) -> StubServices:
    return StubServices(wallet)


@pytest.fixture
def config() -> JupiterConfig:
    return JupiterConfig(
        rpc_url=RPC_URL,
        quote_api_url=QUOTE_URL,
        swap_api_url=SWAP_URL,
        rpc_max_retries=1,
    )


@pytest.fixture
def jupiter(config: JupiterConfig, stubs: StubServices) -> JupiterSwap:
    transport = stubs.transport()
    executor = SolanaExecutor(
        RPC_URL,
        commitment=config.commitment,
        max_retries=1,
        poll_interval_s=0,
        transport=transport,
    )
    return JupiterSwap(config, executor=executor, transport=transport)
