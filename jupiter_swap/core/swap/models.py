"""Typed models used by the swap subsystem."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Dict, List, Optional, TypedDict, Union

from solders.pubkey import Pubkey

from ..errors import ErrorCode

PublicKeyLike = Union[str, Pubkey]
AmountLike = Union[int, float, str, Decimal]


class QuoteResponse(TypedDict, total=False):
    """Quote body returned by the Jupiter quote API. Passed through untouched."""

    inputMint: str
    inAmount: str
    outputMint: str
    outAmount: str
    amount: str
    otherAmountThreshold: str
    swapMode: str
    slippageBps: int
    platformFee: Any
    priceImpactPct: str
    routePlan: List[Any]
    contextSlot: int
    timeTaken: float


@dataclass
class SwapParams:
    """Parameters for a single quote or swap request."""

    input_mint: PublicKeyLike
    output_mint: PublicKeyLike
    amount: AmountLike                          # Human-scale, e.g. 1.5 SOL
    wallet_public_key: Optional[PublicKeyLike] = None
    decimals: Optional[int] = None              # Input asset precision


@dataclass(frozen=True)
class LatestBlockhash:
    """Blockhash plus the last block height at which it is still accepted."""

    blockhash: str
    last_valid_block_height: int


@dataclass(frozen=True)
class SwapResult:
    """Outcome of a swap. success=False always carries error and error_code."""

    signature: str
    success: bool
    error: Optional[str] = None
    error_code: Optional[str] = None

    @classmethod
    def failed(cls, code: ErrorCode, message: str) -> "SwapResult":
        return cls(signature="", success=False, error=message, error_code=code.value)

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"signature": self.signature, "success": self.success}
        if self.error is not None:
            payload["error"] = self.error
            payload["error_code"] = self.error_code
        return payload
