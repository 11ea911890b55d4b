"""
Transaction Execution Layer

- SolanaExecutor: submits signed transactions and waits for confirmation
- deserialize_transaction / sign_transaction: Jupiter payload handling

Usage:
    from jupiter_swap.core.execution import create_connection, sign_transaction

    executor = create_connection("https://api.mainnet-beta.solana.com")
"""

from .solana_executor import SolanaExecutor, create_connection
from .transactions import deserialize_transaction, sign_transaction

__all__ = [
    "SolanaExecutor",
    "create_connection",
    "deserialize_transaction",
    "sign_transaction",
]
