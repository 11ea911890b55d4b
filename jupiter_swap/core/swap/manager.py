"""JupiterSwap orchestrates Jupiter-powered token swaps on Solana."""

from __future__ import annotations

import asyncio
import logging
from typing import Optional

import httpx
import structlog
from solders.keypair import Keypair

from ...config import JupiterConfig
from ...providers.jupiter import JupiterSwapProvider
from ...services.address import normalize_amount, validate_public_key
from ..errors import InvalidPublicKeyError, TransactionError, classify_error
from ..execution.solana_executor import SolanaExecutor, create_connection
from ..execution.transactions import deserialize_transaction, sign_transaction
from .constants import SOL_DECIMALS
from .models import AmountLike, PublicKeyLike, QuoteResponse, SwapParams, SwapResult


class JupiterSwap:
    """
    Quote and execute token swaps through the Jupiter aggregator.

    ``get_quote`` raises on failure. ``swap`` and its SOL helpers never raise
    for ordinary errors; they return a SwapResult with ``success=False`` and
    the failure's ``error_code``.

    Usage:
        async with JupiterSwap(JupiterConfig(rpc_url="https://api.mainnet-beta.solana.com")) as jupiter:
            result = await jupiter.swap_from_sol(USDC_MINT, 0.1, wallet)
            if not result.success:
                print(result.error_code, result.error)
    """

    def __init__(
        self,
        config: JupiterConfig,
        *,
        provider: Optional[JupiterSwapProvider] = None,
        executor: Optional[SolanaExecutor] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self.config = config
        self.slippage_bps: int = config.slippage_bps
        self._logger = logger or logging.getLogger(__name__)
        self._provider = provider or JupiterSwapProvider(
            quote_api_url=config.quote_api_url,
            swap_api_url=config.swap_api_url,
            timeout_s=config.request_timeout_s,
            transport=transport,
        )
        self._executor = executor or create_connection(
            config.rpc_url,
            commitment=config.commitment,
            max_retries=config.rpc_max_retries,
            timeout_s=config.request_timeout_s,
            transport=transport,
        )

    async def close(self) -> None:
        await self._executor.close()

    async def __aenter__(self) -> "JupiterSwap":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    async def get_quote(self, params: SwapParams) -> QuoteResponse:
        """
        Get a quote for swapping tokens.

        Raises:
            InvalidPublicKeyError, InvalidAmountError: before any request is made
            ApiError, NetworkError: the quote API failed
        """
        input_mint = str(validate_public_key(params.input_mint))
        output_mint = str(validate_public_key(params.output_mint))
        decimals = params.decimals if params.decimals is not None else self.config.default_decimals
        amount = normalize_amount(params.amount, decimals)

        return await self._provider.get_quote(
            input_mint=input_mint,
            output_mint=output_mint,
            amount=amount,
            slippage_bps=self.slippage_bps,
        )

    async def swap(
        self,
        params: SwapParams,
        wallet: Keypair,
        *,
        timeout_s: Optional[float] = None,
    ) -> SwapResult:
        """
        Execute a token swap.

        Args:
            params: Pair, human-scale amount and input decimals
            wallet: Keypair that signs and pays for the transaction
            timeout_s: Optional deadline for the whole sequence, including
                confirmation

        Returns:
            SwapResult with the transaction signature on success
        """
        with structlog.contextvars.bound_contextvars(
            input_mint=str(getattr(params, "input_mint", None)),
            output_mint=str(getattr(params, "output_mint", None)),
        ):
            try:
                if timeout_s is None:
                    signature = await self._execute(params, wallet)
                else:
                    signature = await asyncio.wait_for(self._execute(params, wallet), timeout_s)
            except Exception as e:
                code, message = classify_error(e)
                self._logger.error(f"Swap failed [{code.value}]: {message}")
                return SwapResult.failed(code, message)

            self._logger.info(f"Swap confirmed: {signature}")
            return SwapResult(signature=signature, success=True)

    async def _execute(self, params: SwapParams, wallet: Keypair) -> str:
        if params.wallet_public_key is not None:
            expected = validate_public_key(params.wallet_public_key)
            if expected != wallet.pubkey():
                raise InvalidPublicKeyError(
                    f"Invalid public key: wallet {wallet.pubkey()} does not match {expected}"
                )

        quote = await self.get_quote(params)
        user_public_key = str(wallet.pubkey())

        swap_response = await self._provider.build_swap_transaction(
            quote=quote,
            user_public_key=user_public_key,
            max_slippage_bps=self.slippage_bps,
        )
        swap_transaction = swap_response.get("swapTransaction") if isinstance(swap_response, dict) else None
        if not swap_transaction:
            raise TransactionError("Swap response did not include a transaction")

        transaction = sign_transaction(deserialize_transaction(swap_transaction), wallet)

        latest = await self._executor.get_latest_blockhash()
        signature = await self._executor.send_raw_transaction(
            bytes(transaction),
            skip_preflight=True,
            max_retries=self.config.send_max_retries,
        )
        self._logger.info(
            f"Swap {quote.get('inputMint')} -> {quote.get('outputMint')} submitted: {signature}"
        )

        await self._executor.confirm_transaction(
            signature,
            blockhash=latest.blockhash,
            last_valid_block_height=latest.last_valid_block_height,
        )
        return signature

    async def swap_from_sol(
        self,
        output_mint: PublicKeyLike,
        amount: AmountLike,
        wallet: Keypair,
        *,
        timeout_s: Optional[float] = None,
    ) -> SwapResult:
        """Swap ``amount`` SOL into ``output_mint``."""
        return await self.swap(
            SwapParams(
                input_mint=self.config.native_mint,
                output_mint=output_mint,
                amount=amount,
                wallet_public_key=wallet.pubkey(),
                decimals=SOL_DECIMALS,
            ),
            wallet,
            timeout_s=timeout_s,
        )

    async def swap_to_sol(
        self,
        input_mint: PublicKeyLike,
        amount: AmountLike,
        wallet: Keypair,
        *,
        decimals: Optional[int] = None,
        timeout_s: Optional[float] = None,
    ) -> SwapResult:
        """Swap ``amount`` of ``input_mint`` into SOL."""
        return await self.swap(
            SwapParams(
                input_mint=input_mint,
                output_mint=self.config.native_mint,
                amount=amount,
                wallet_public_key=wallet.pubkey(),
                decimals=decimals,
            ),
            wallet,
            timeout_s=timeout_s,
        )


# Singleton instance
_jupiter_swap: Optional[JupiterSwap] = None


def get_jupiter_swap() -> JupiterSwap:
    """Get the process-wide JupiterSwap built from environment settings."""
    global _jupiter_swap
    if _jupiter_swap is None:
        _jupiter_swap = JupiterSwap(JupiterConfig.from_settings())
    return _jupiter_swap


__all__ = [
    "JupiterSwap",
    "get_jupiter_swap",
]
