"""Endpoint service: CRUD and activation for priced API paths."""

from decimal import Decimal, InvalidOperation
from typing import Any

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from x402_exchange.calls.models import ApiCallModel
from x402_exchange.common.exceptions import (
    ConfigurationValidationError,
    EndpointNotFoundError,
)
from x402_exchange.endpoints.models import EndpointModel

_EDITABLE_FIELDS = ("endpoint_path", "description", "price_per_call", "currency", "network")


def validate_path(endpoint_path: str | None) -> str:
    path = (endpoint_path or "").strip()
    if not path:
        raise ConfigurationValidationError("Please fill in required fields")
    if not path.startswith("/"):
        raise ConfigurationValidationError('Endpoint path must start with "/"')
    return path


def parse_price(value: Any) -> Decimal:
    """Accept form strings or numbers; reject anything not strictly positive."""
    if value is None or (isinstance(value, str) and not value.strip()):
        raise ConfigurationValidationError("Please fill in required fields")
    try:
        price = Decimal(str(value).strip())
    except InvalidOperation:
        raise ConfigurationValidationError("Price must be a positive number")
    if not price.is_finite() or price <= 0:
        raise ConfigurationValidationError("Price must be a positive number")
    return price


class EndpointService:
    """Endpoint configuration operations, always scoped to one user."""

    async def list_endpoints(
        self,
        session: AsyncSession,
        user_id: str,
        active_only: bool = False,
    ) -> list[EndpointModel]:
        query = select(EndpointModel).where(EndpointModel.user_id == user_id)
        if active_only:
            query = query.where(EndpointModel.is_active.is_(True))
        query = query.order_by(EndpointModel.created_at.desc(), EndpointModel.id)
        result = await session.execute(query)
        return list(result.scalars().all())

    async def count_active(self, session: AsyncSession, user_id: str) -> int:
        result = await session.execute(
            select(func.count(EndpointModel.id)).where(
                EndpointModel.user_id == user_id,
                EndpointModel.is_active.is_(True),
            )
        )
        return result.scalar() or 0

    async def get_endpoint(
        self, session: AsyncSession, user_id: str, endpoint_id: str
    ) -> EndpointModel | None:
        endpoint = await session.get(EndpointModel, endpoint_id)
        if endpoint is None or endpoint.user_id != user_id:
            return None
        return endpoint

    async def create_endpoint(
        self,
        session: AsyncSession,
        user_id: str,
        endpoint_path: str,
        price_per_call: Any,
        description: str | None = None,
        currency: str = "USDC",
        network: str = "base-mainnet",
        is_active: bool = True,
    ) -> EndpointModel:
        endpoint = EndpointModel(
            user_id=user_id,
            endpoint_path=validate_path(endpoint_path),
            description=description or None,
            price_per_call=parse_price(price_per_call),
            currency=currency,
            network=network,
            is_active=is_active,
        )
        session.add(endpoint)
        await session.flush()
        return endpoint

    async def update_endpoint(
        self, session: AsyncSession, user_id: str, endpoint_id: str, **updates
    ) -> EndpointModel:
        endpoint = await self.get_endpoint(session, user_id, endpoint_id)
        if endpoint is None:
            raise EndpointNotFoundError()

        if "endpoint_path" in updates and updates["endpoint_path"] is not None:
            updates["endpoint_path"] = validate_path(updates["endpoint_path"])
        if "price_per_call" in updates and updates["price_per_call"] is not None:
            updates["price_per_call"] = parse_price(updates["price_per_call"])
        if "description" in updates:
            # Blank descriptions are stored as NULL
            endpoint.description = updates.pop("description") or None

        for field in _EDITABLE_FIELDS:
            if field in updates and updates[field] is not None:
                setattr(endpoint, field, updates[field])
        await session.flush()
        return endpoint

    async def toggle_endpoint(
        self, session: AsyncSession, user_id: str, endpoint_id: str
    ) -> EndpointModel:
        endpoint = await self.get_endpoint(session, user_id, endpoint_id)
        if endpoint is None:
            raise EndpointNotFoundError()
        endpoint.is_active = not endpoint.is_active
        await session.flush()
        return endpoint

    async def delete_endpoint(
        self, session: AsyncSession, user_id: str, endpoint_id: str
    ) -> None:
        endpoint = await self.get_endpoint(session, user_id, endpoint_id)
        if endpoint is None:
            raise EndpointNotFoundError()

        # Call history outlives the endpoint
        await session.execute(
            update(ApiCallModel)
            .where(ApiCallModel.endpoint_id == endpoint_id)
            .values(endpoint_id=None)
        )
        await session.delete(endpoint)
        await session.flush()
