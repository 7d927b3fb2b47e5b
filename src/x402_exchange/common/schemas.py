"""Shared Pydantic schemas for x402 Exchange."""

from pydantic import BaseModel


class HealthResponse(BaseModel):
    status: str = "ok"
    version: str = "0.1.0"
    service: str = "x402-exchange"


class ErrorResponse(BaseModel):
    error: str
    code: str = ""
