"""SQLAlchemy model for priced API endpoints."""

from decimal import Decimal

from sqlalchemy import Boolean, ForeignKey, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from x402_exchange.common.models import Base, TimestampMixin, generate_uuid


class EndpointModel(Base, TimestampMixin):
    __tablename__ = "endpoints"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_uuid)
    user_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("profiles.id"), nullable=False, index=True
    )
    endpoint_path: Mapped[str] = mapped_column(String(500), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    price_per_call: Mapped[Decimal] = mapped_column(Numeric(18, 6), nullable=False)
    currency: Mapped[str] = mapped_column(String(20), default="USDC")
    network: Mapped[str] = mapped_column(String(50), default="base-mainnet")
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, index=True)
