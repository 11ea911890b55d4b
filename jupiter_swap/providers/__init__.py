from .jupiter import JupiterSwapProvider, fetch_json

__all__ = ["JupiterSwapProvider", "fetch_json"]
