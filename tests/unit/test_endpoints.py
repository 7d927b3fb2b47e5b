"""Tests for EndpointService: validation, CRUD, toggle and delete."""

from decimal import Decimal

import pytest
from sqlalchemy import select

from x402_exchange.calls.models import ApiCallModel
from x402_exchange.common.exceptions import (
    ConfigurationValidationError,
    EndpointNotFoundError,
)
from x402_exchange.endpoints.service import EndpointService, parse_price, validate_path


class TestValidation:
    def test_path_required(self):
        with pytest.raises(ConfigurationValidationError, match="Please fill in required fields"):
            validate_path("  ")

    def test_path_leading_slash(self):
        with pytest.raises(ConfigurationValidationError, match='must start with "/"'):
            validate_path("api/data")

    def test_path_trimmed(self):
        assert validate_path(" /api/data ") == "/api/data"

    @pytest.mark.parametrize("value", ["0", "-1", "abc", "NaN", "Infinity"])
    def test_price_positive(self, value):
        with pytest.raises(ConfigurationValidationError, match="Price must be a positive number"):
            parse_price(value)

    def test_price_required(self):
        with pytest.raises(ConfigurationValidationError, match="Please fill in required fields"):
            parse_price("")

    def test_price_parsed(self):
        assert parse_price("0.001") == Decimal("0.001")


class TestEndpointCrud:
    async def test_create_defaults(self, session, user_id):
        endpoint = await EndpointService().create_endpoint(
            session, user_id, endpoint_path="/api/data", price_per_call="0.01", description="",
        )
        assert endpoint.is_active is True
        assert endpoint.currency == "USDC"
        assert endpoint.network == "base-mainnet"
        assert endpoint.description is None

    async def test_list_newest_first_and_active_only(self, session, user_id):
        svc = EndpointService()
        a = await svc.create_endpoint(session, user_id, "/a", "0.01")
        b = await svc.create_endpoint(session, user_id, "/b", "0.02")
        await svc.toggle_endpoint(session, user_id, a.id)

        all_ids = {e.id for e in await svc.list_endpoints(session, user_id)}
        active = await svc.list_endpoints(session, user_id, active_only=True)
        assert all_ids == {a.id, b.id}
        assert [e.id for e in active] == [b.id]
        assert await svc.count_active(session, user_id) == 1

    async def test_update(self, session, user_id):
        svc = EndpointService()
        endpoint = await svc.create_endpoint(session, user_id, "/a", "0.01", description="old")
        updated = await svc.update_endpoint(
            session, user_id, endpoint.id,
            endpoint_path="/b", price_per_call="0.5", description="",
            network="base-sepolia",
        )
        assert updated.endpoint_path == "/b"
        assert updated.price_per_call == Decimal("0.5")
        assert updated.description is None
        assert updated.network == "base-sepolia"

    async def test_update_validates(self, session, user_id):
        svc = EndpointService()
        endpoint = await svc.create_endpoint(session, user_id, "/a", "0.01")
        with pytest.raises(ConfigurationValidationError):
            await svc.update_endpoint(session, user_id, endpoint.id, price_per_call="-2")

    async def test_toggle_flips(self, session, user_id):
        svc = EndpointService()
        endpoint = await svc.create_endpoint(session, user_id, "/a", "0.01")
        assert (await svc.toggle_endpoint(session, user_id, endpoint.id)).is_active is False
        assert (await svc.toggle_endpoint(session, user_id, endpoint.id)).is_active is True

    async def test_other_users_endpoint_not_found(self, session, user_id):
        svc = EndpointService()
        endpoint = await svc.create_endpoint(session, user_id, "/a", "0.01")
        assert await svc.get_endpoint(session, "intruder", endpoint.id) is None
        with pytest.raises(EndpointNotFoundError):
            await svc.toggle_endpoint(session, "intruder", endpoint.id)
        with pytest.raises(EndpointNotFoundError):
            await svc.delete_endpoint(session, "intruder", endpoint.id)

    async def test_delete_keeps_call_history(self, session, user_id):
        svc = EndpointService()
        endpoint = await svc.create_endpoint(session, user_id, "/a", "0.01")
        session.add(ApiCallModel(
            user_id=user_id, endpoint_id=endpoint.id,
            payment_amount=Decimal("0.01"), status="success", response_time_ms=100,
        ))
        await session.flush()

        await svc.delete_endpoint(session, user_id, endpoint.id)

        assert await svc.list_endpoints(session, user_id) == []
        calls = (await session.execute(select(ApiCallModel))).scalars().all()
        assert len(calls) == 1
        assert calls[0].endpoint_id is None
