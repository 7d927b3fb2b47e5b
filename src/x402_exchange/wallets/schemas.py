"""Pydantic schemas for wallet endpoints."""

from datetime import datetime

from pydantic import BaseModel, Field


class WalletSave(BaseModel):
    wallet_address: str = Field(..., min_length=1, max_length=255)
    network: str = Field(default="base-mainnet", min_length=1, max_length=50)


class WalletResponse(BaseModel):
    id: str
    wallet_address: str
    network: str
    created_at: datetime

    model_config = {"from_attributes": True}


class WalletSaveResponse(WalletResponse):
    created: bool
