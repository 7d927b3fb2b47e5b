"""SQLAlchemy model for the paid-call log."""

from datetime import datetime
from decimal import Decimal

from sqlalchemy import JSON, DateTime, ForeignKey, Integer, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column

from x402_exchange.common.models import Base, generate_uuid, utcnow

CALL_STATUSES = ("success", "failed", "pending")


class ApiCallModel(Base):
    __tablename__ = "api_calls"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_uuid)
    user_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("profiles.id"), nullable=False, index=True
    )
    endpoint_id: Mapped[str | None] = mapped_column(
        String(36), ForeignKey("endpoints.id"), nullable=True, index=True
    )
    timestamp: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, nullable=False, index=True
    )
    payment_amount: Mapped[Decimal] = mapped_column(Numeric(18, 6), default=Decimal("0"))
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="pending")
    response_time_ms: Mapped[int | None] = mapped_column(Integer, nullable=True)
    wallet_address: Mapped[str | None] = mapped_column(String(255), nullable=True)
    request_metadata: Mapped[dict] = mapped_column(JSON, default=dict)
