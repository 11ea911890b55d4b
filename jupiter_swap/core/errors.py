"""
Error Classification

Defines the error taxonomy for quote retrieval and swap execution.
Every error carries a human-readable message and a machine-readable code.
"""

import asyncio
from enum import Enum
from typing import Any, Dict, Optional, Tuple


class ErrorCode(str, Enum):
    """Machine-readable error codes."""

    INVALID_PUBLIC_KEY = "INVALID_PUBLIC_KEY"    # Malformed mint or wallet address
    INVALID_AMOUNT = "INVALID_AMOUNT"            # Non-positive or non-numeric amount
    CONNECTION_ERROR = "CONNECTION_ERROR"        # RPC client could not be created
    TRANSACTION_ERROR = "TRANSACTION_ERROR"      # Payload decode or signing failure
    API_ERROR = "API_ERROR"                      # Jupiter returned a non-success status
    NETWORK_ERROR = "NETWORK_ERROR"              # Transport failure reaching Jupiter
    RPC_ERROR = "RPC_ERROR"                      # Solana node rejected or failed a call
    CONFIRMATION_ERROR = "CONFIRMATION_ERROR"    # Transaction failed or expired on-chain
    TIMEOUT = "TIMEOUT"                          # Caller deadline elapsed
    UNKNOWN_ERROR = "UNKNOWN_ERROR"


class JupiterError(Exception):
    """Base class for all swap client errors."""

    default_code: ErrorCode = ErrorCode.UNKNOWN_ERROR

    def __init__(
        self,
        message: str,
        code: Optional[ErrorCode] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self.default_code
        self.details = details or {}

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.code.value!r}, message={self.message!r})"


class InvalidPublicKeyError(JupiterError):
    """Address is not a valid base58-encoded 32-byte public key."""

    default_code = ErrorCode.INVALID_PUBLIC_KEY


class InvalidAmountError(JupiterError):
    default_code = ErrorCode.INVALID_AMOUNT


class RpcConnectionError(JupiterError):
    """Solana RPC client could not be constructed."""

    default_code = ErrorCode.CONNECTION_ERROR


class TransactionError(JupiterError):
    """Swap transaction could not be decoded or signed."""

    default_code = ErrorCode.TRANSACTION_ERROR


class ApiError(JupiterError):
    """Jupiter API returned a non-success HTTP status."""

    default_code = ErrorCode.API_ERROR

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message, details=details)
        self.status_code = status_code


class NetworkError(JupiterError):
    """Jupiter API could not be reached or returned an unreadable body."""

    default_code = ErrorCode.NETWORK_ERROR


class RpcError(JupiterError):
    """Solana node returned an error or could not be reached."""

    default_code = ErrorCode.RPC_ERROR


class ConfirmationError(JupiterError):
    """Submitted transaction failed or expired before confirmation."""

    default_code = ErrorCode.CONFIRMATION_ERROR

    def __init__(
        self,
        message: str,
        signature: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message, details=details)
        self.signature = signature


def classify_error(error: BaseException) -> Tuple[ErrorCode, str]:
    """
    Flatten an exception into an (error code, message) pair.

    Taxonomy errors keep their own code. A timeout raised by the caller's
    deadline maps to TIMEOUT; everything else is UNKNOWN_ERROR.
    """
    if isinstance(error, JupiterError):
        return error.code, error.message

    if isinstance(error, asyncio.TimeoutError):
        return ErrorCode.TIMEOUT, str(error) or "Swap timed out"

    return ErrorCode.UNKNOWN_ERROR, str(error) or "Unknown error occurred during swap"


__all__ = [
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
    "classify_error",
]
