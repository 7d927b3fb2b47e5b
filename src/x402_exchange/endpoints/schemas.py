"""Pydantic schemas for endpoint configuration."""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field


class EndpointCreate(BaseModel):
    endpoint_path: str = Field(..., min_length=1, max_length=500)
    price_per_call: Decimal
    description: Optional[str] = None
    currency: str = "USDC"
    network: str = "base-mainnet"


class EndpointUpdate(BaseModel):
    endpoint_path: Optional[str] = Field(default=None, min_length=1, max_length=500)
    price_per_call: Optional[Decimal] = None
    description: Optional[str] = None
    currency: Optional[str] = None
    network: Optional[str] = None


class EndpointResponse(BaseModel):
    id: str
    endpoint_path: str
    description: Optional[str]
    price_per_call: Decimal
    currency: str
    network: str
    is_active: bool
    created_at: datetime

    model_config = {"from_attributes": True}
