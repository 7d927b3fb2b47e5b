"""x402 Exchange: pricing and wallet configuration for x402 API gateways."""

from x402_exchange.client import ConfigClient
from x402_exchange.resolver.manifest import build_manifest, format_price, route_key

__all__ = [
    "ConfigClient",
    "build_manifest",
    "format_price",
    "route_key",
]
__version__ = "0.1.0"
