"""Constants for Jupiter swap orchestration."""

from __future__ import annotations

JUPITER_V6_API = "https://quote-api.jup.ag/v6"
JUPITER_V6_QUOTE_API = f"{JUPITER_V6_API}/quote"
JUPITER_V6_SWAP_API = f"{JUPITER_V6_API}/swap"

# Well-known token mints
WRAPPED_SOL_MINT = "So11111111111111111111111111111111111111112"
USDC_MINT = "EPjFWdd5AufqSSqeM2qN1xzybapC8G4wEGGkZwyTDt1v"
USDT_MINT = "Es9vMFrzaCERmJfrF4H2FYD4KCoNkY11McCe8BenwNYB"

SOL_DECIMALS = 9
DEFAULT_DECIMALS = SOL_DECIMALS
DEFAULT_SLIPPAGE_BPS = 50  # 0.5%

# Forwarded to sendTransaction; the node handles rebroadcasting.
SEND_MAX_RETRIES = 2

# Execution preferences sent with every swap build request.
SWAP_EXECUTION_PREFERENCES = {
    "wrapAndUnwrapSol": True,
    "dynamicComputeUnitLimit": True,
    "prioritizationFeeLamports": "auto",
}
