"""Helpers for validating Solana addresses, keypairs and token amounts."""

from __future__ import annotations

import json
from decimal import Decimal, InvalidOperation, ROUND_DOWN
from functools import lru_cache
from typing import Any, Union

from solders.keypair import Keypair
from solders.pubkey import Pubkey

from ..core.errors import InvalidAmountError, InvalidPublicKeyError

_BASE58_ALPHABET = "123456789ABCDEFGHJKLMNPQRSTUVWXYZabcdefghijkmnopqrstuvwxyz"
_BASE58_INDEX = {char: index for index, char in enumerate(_BASE58_ALPHABET)}

PUBLIC_KEY_LENGTH = 32
KEYPAIR_LENGTH = 64


@lru_cache(maxsize=128)
def is_valid_solana_address(address: str) -> bool:
    if not address:
        return False
    length = len(address)
    if length < 32 or length > 44:
        return False
    return all(ch in _BASE58_INDEX for ch in address)


def base58_decode(value: str) -> bytes:
    if not value:
        return b""
    num = 0
    for char in value:
        if char not in _BASE58_INDEX:
            raise ValueError("Invalid base58 character")
        num = num * 58 + _BASE58_INDEX[char]
    combined = num.to_bytes((num.bit_length() + 7) // 8, "big") if num else b""
    pad = len(value) - len(value.lstrip("1"))
    return b"\x00" * pad + combined


def validate_public_key(key: Union[str, Pubkey]) -> Pubkey:
    """
    Normalize a mint or wallet address to a Pubkey.

    Pubkey instances pass through; strings must decode to exactly 32 bytes of
    base58. Raises InvalidPublicKeyError otherwise.
    """
    if isinstance(key, Pubkey):
        return key
    if not isinstance(key, str):
        raise InvalidPublicKeyError(
            f"Invalid public key: expected str or Pubkey, got {type(key).__name__}"
        )

    if not is_valid_solana_address(key):
        raise InvalidPublicKeyError(f"Invalid public key: {key!r} is not a base58 Solana address")

    raw = base58_decode(key)
    if len(raw) != PUBLIC_KEY_LENGTH:
        raise InvalidPublicKeyError(
            f"Invalid public key: {key!r} decodes to {len(raw)} bytes, expected {PUBLIC_KEY_LENGTH}"
        )
    return Pubkey.from_bytes(raw)


def load_keypair(secret: Any) -> Keypair:
    """
    Load a signing keypair from a Keypair, raw bytes, a base58 secret key
    string, or the JSON byte array written by ``solana-keygen``.
    """
    if isinstance(secret, Keypair):
        return secret

    try:
        if isinstance(secret, str):
            raw = secret.strip()
            if raw.startswith("["):
                data = bytes(json.loads(raw))
            else:
                data = base58_decode(raw)
        elif isinstance(secret, (bytes, bytearray, list)):
            data = bytes(secret)
        else:
            raise InvalidPublicKeyError(
                f"Invalid keypair: unsupported type {type(secret).__name__}"
            )

        if len(data) != KEYPAIR_LENGTH:
            raise InvalidPublicKeyError(
                f"Invalid keypair: expected {KEYPAIR_LENGTH} bytes, got {len(data)}"
            )
        return Keypair.from_bytes(data)
    except InvalidPublicKeyError:
        raise
    except (ValueError, TypeError) as e:
        raise InvalidPublicKeyError(f"Invalid keypair: {e}")


def normalize_amount(amount: Any, decimals: int) -> int:
    """
    Convert a human-scale amount into the asset's smallest unit.

    Uses Decimal arithmetic so 0.1 SOL is exactly 100_000_000 lamports.
    Fractions below one smallest unit are truncated.
    """
    if isinstance(decimals, bool) or not isinstance(decimals, int) or decimals < 0:
        raise InvalidAmountError(f"Invalid decimals: {decimals!r}")
    if isinstance(amount, bool):
        raise InvalidAmountError(f"Invalid amount: {amount!r}")

    try:
        value = Decimal(str(amount))
    except (InvalidOperation, ValueError, TypeError):
        raise InvalidAmountError(f"Invalid amount: {amount!r}")

    if not value.is_finite() or value <= 0:
        raise InvalidAmountError(f"Amount must be a positive number, got {amount!r}")

    try:
        scaled = (value * (Decimal(10) ** decimals)).to_integral_value(rounding=ROUND_DOWN)
    except InvalidOperation:
        raise InvalidAmountError(f"Amount {amount!r} cannot be scaled to {decimals} decimals")

    if scaled <= 0:
        raise InvalidAmountError(
            f"Amount {amount!r} is smaller than one unit at {decimals} decimals"
        )
    return int(scaled)


__all__ = [
    "is_valid_solana_address",
    "base58_decode",
    "validate_public_key",
    "load_keypair",
    "normalize_amount",
]
