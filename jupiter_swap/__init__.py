"""Jupiter aggregator swap client for Solana."""

from .config import JupiterConfig, Settings, settings
from .core.errors import (
    ApiError,
    ConfirmationError,
    ErrorCode,
    InvalidAmountError,
    InvalidPublicKeyError,
    JupiterError,
    NetworkError,
    RpcConnectionError,
    RpcError,
    TransactionError,
)
from .core.swap.constants import USDC_MINT, USDT_MINT, WRAPPED_SOL_MINT
from .core.swap.manager import JupiterSwap, get_jupiter_swap
from .core.swap.models import QuoteResponse, SwapParams, SwapResult
from .services.address import load_keypair, normalize_amount, validate_public_key

__version__ = "0.1.0"

__all__ = [
    "JupiterSwap",
    "JupiterConfig",
    "Settings",
    "settings",
    "get_jupiter_swap",
    "SwapParams",
    "SwapResult",
    "QuoteResponse",
    "ErrorCode",
    "JupiterError",
    "InvalidPublicKeyError",
    "InvalidAmountError",
    "RpcConnectionError",
    "TransactionError",
    "ApiError",
    "NetworkError",
    "RpcError",
    "ConfirmationError",
    "validate_public_key",
    "normalize_amount",
    "load_keypair",
    "WRAPPED_SOL_MINT",
    "USDC_MINT",
    "USDT_MINT",
]
