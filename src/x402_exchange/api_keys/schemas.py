"""Pydantic schemas for API key endpoints."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel


class ApiKeyResponse(BaseModel):
    api_key: str
    is_active: bool
    last_used_at: Optional[datetime] = None
    created_at: datetime

    model_config = {"from_attributes": True}
