"""SQLAlchemy model for user profiles."""

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from x402_exchange.common.models import Base, TimestampMixin, generate_uuid


class ProfileModel(Base, TimestampMixin):
    __tablename__ = "profiles"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_uuid)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    display_name: Mapped[str] = mapped_column(String(255), default="")
