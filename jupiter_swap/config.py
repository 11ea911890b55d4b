from __future__ import annotations

from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Optional

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .core.swap.constants import (
    DEFAULT_DECIMALS,
    DEFAULT_SLIPPAGE_BPS,
    JUPITER_V6_QUOTE_API,
    JUPITER_V6_SWAP_API,
    SEND_MAX_RETRIES,
    WRAPPED_SOL_MINT,
)


BASE_DIR = Path(__file__).resolve().parents[1]


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=BASE_DIR / ".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    log_level: str = Field(default="INFO", description="Logging level")
    request_timeout_seconds: float = Field(default=30.0, gt=0, description="HTTP request timeout")

    # Solana RPC
    solana_rpc_url: str = Field(
        default="https://api.mainnet-beta.solana.com",
        description="Solana JSON-RPC endpoint used to submit and confirm swaps",
        validation_alias=AliasChoices("solana_rpc_url", "SOLANA_RPC_URL", "RPC_URL"),
    )
    solana_commitment: str = Field(
        default="confirmed",
        description="Commitment level used for blockhash fetches and confirmation",
    )
    solana_send_max_retries: int = Field(
        default=SEND_MAX_RETRIES,
        ge=0,
        description="maxRetries forwarded to sendTransaction",
    )
    solana_rpc_max_retries: int = Field(
        default=3,
        ge=1,
        description="Attempts per JSON-RPC call on transport failures",
    )

    # Jupiter aggregator
    jupiter_quote_api_url: str = Field(default=JUPITER_V6_QUOTE_API, description="Jupiter quote endpoint")
    jupiter_swap_api_url: str = Field(default=JUPITER_V6_SWAP_API, description="Jupiter swap endpoint")
    jupiter_slippage_bps: int = Field(
        default=DEFAULT_SLIPPAGE_BPS,
        ge=0,
        le=10_000,
        description="Slippage tolerance in basis points (50 = 0.5%)",
    )
    jupiter_native_mint: str = Field(default=WRAPPED_SOL_MINT, description="Wrapped SOL mint address")
    jupiter_default_decimals: int = Field(
        default=DEFAULT_DECIMALS,
        ge=0,
        description="Decimals assumed for an input asset when a request does not specify them",
    )


@dataclass(frozen=True)
class JupiterConfig:
    """Immutable per-instance configuration for JupiterSwap."""

    rpc_url: str
    slippage_bps: Optional[int] = None
    quote_api_url: str = JUPITER_V6_QUOTE_API
    swap_api_url: str = JUPITER_V6_SWAP_API
    native_mint: str = WRAPPED_SOL_MINT
    default_decimals: int = DEFAULT_DECIMALS
    commitment: str = "confirmed"
    send_max_retries: int = SEND_MAX_RETRIES
    rpc_max_retries: int = 3
    request_timeout_s: float = 30.0

    def __post_init__(self) -> None:
        if self.slippage_bps is None:
            object.__setattr__(self, "slippage_bps", DEFAULT_SLIPPAGE_BPS)

    @classmethod
    def from_settings(cls, source: Optional[Settings] = None, **overrides: Any) -> "JupiterConfig":
        """Build a config from environment settings, with explicit overrides winning."""
        source = source or settings
        config = cls(
            rpc_url=source.solana_rpc_url,
            slippage_bps=source.jupiter_slippage_bps,
            quote_api_url=source.jupiter_quote_api_url,
            swap_api_url=source.jupiter_swap_api_url,
            native_mint=source.jupiter_native_mint,
            default_decimals=source.jupiter_default_decimals,
            commitment=source.solana_commitment,
            send_max_retries=source.solana_send_max_retries,
            rpc_max_retries=source.solana_rpc_max_retries,
            request_timeout_s=source.request_timeout_seconds,
        )
        return replace(config, **overrides) if overrides else config


# Global settings instance
settings = Settings()
