"""Decode and sign the versioned transactions returned by Jupiter."""

from __future__ import annotations

import base64
import binascii

from solders.errors import BincodeError, SignerError
from solders.keypair import Keypair
from solders.transaction import VersionedTransaction

from ..errors import TransactionError


def deserialize_transaction(transaction_base64: str) -> VersionedTransaction:
    if not isinstance(transaction_base64, str) or not transaction_base64:
        raise TransactionError("Failed to deserialize transaction: empty payload")

    try:
        raw = base64.b64decode(transaction_base64, validate=True)
    except (binascii.Error, ValueError) as e:
        raise TransactionError(f"Failed to deserialize transaction: invalid base64 ({e})")

    try:
        return VersionedTransaction.from_bytes(raw)
    except (BincodeError, ValueError) as e:
        raise TransactionError(f"Failed to deserialize transaction: {e}")


def sign_transaction(transaction: VersionedTransaction, wallet: Keypair) -> VersionedTransaction:
    """
    Sign a transaction's message with ``wallet``.

    The wallet must be the message's only required signer, which is how
    Jupiter builds swaps for ``userPublicKey``.
    """
    try:
        return VersionedTransaction(transaction.message, [wallet])
    except (SignerError, ValueError) as e:
        raise TransactionError(f"Failed to sign transaction: {e}")


__all__ = [
    "deserialize_transaction",
    "sign_transaction",
]
