"""Pydantic schemas for call analytics."""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel


class DashboardStats(BaseModel):
    total_calls: int
    total_revenue: Decimal
    active_endpoints: int
    avg_response_time: int


class CallResponse(BaseModel):
    id: str
    timestamp: datetime
    endpoint_path: str
    payment_amount: Decimal
    status: str
    response_time_ms: int
    wallet_address: Optional[str] = None

    model_config = {"from_attributes": True}


class CallListResponse(BaseModel):
    preset: str
    start: Optional[datetime] = None
    end: Optional[datetime] = None
    total: int
    items: list[CallResponse]
