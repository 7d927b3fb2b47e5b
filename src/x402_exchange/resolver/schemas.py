"""Pydantic schemas for the pricing manifest."""

from pydantic import BaseModel


class EndpointPrice(BaseModel):
    price: str
    network: str


class GatewayConfig(BaseModel):
    walletAddress: str
    endpoints: dict[str, EndpointPrice]
    network: str
    asset: str
