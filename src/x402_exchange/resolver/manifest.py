"""Pricing manifest construction for the x402 payment middleware.

The manifest shape is what the middleware expects::

    {
        "walletAddress": "0x...",
        "network": "base-mainnet",
        "asset": "USDC",
        "endpoints": {"GET /api/data": {"price": "$0.010", "network": "base-mainnet"}},
    }
"""

from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Iterable

_PRICE_QUANTUM = Decimal("0.001")


def format_price(price: Any) -> str:
    """Dollar price with exactly three decimals, half-up: 0.0125 -> "$0.013"."""
    # Rounds the stored decimal exactly; 1.0005 gives $1.001, not the float $1.000
    value = Decimal(str(price)).quantize(_PRICE_QUANTUM, rounding=ROUND_HALF_UP)
    return f"${value}"


def normalize_path(path: str) -> str:
    return path if path.startswith("/") else f"/{path}"


def route_key(path: str, method: str = "GET") -> str:
    return f"{method} {normalize_path(path)}"


def build_endpoint_prices(endpoints: Iterable[Any]) -> dict[str, dict[str, str]]:
    """Map active endpoint rows to ``{"GET /path": {"price", "network"}}``.

    Later rows win when two endpoints normalise to the same route.
    """
    prices: dict[str, dict[str, str]] = {}
    for endpoint in endpoints:
        if not endpoint.is_active:
            continue
        prices[route_key(endpoint.endpoint_path)] = {
            "price": format_price(endpoint.price_per_call),
            "network": endpoint.network,
        }
    return prices


def build_manifest(wallet: Any, endpoints: Iterable[Any], asset: str = "USDC") -> dict:
    return {
        "walletAddress": wallet.wallet_address,
        "endpoints": build_endpoint_prices(endpoints),
        "network": wallet.network,
        "asset": asset,
    }
