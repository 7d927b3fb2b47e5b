"""Tests for DemoSeeder: default endpoint and synthetic call rows."""

import random
from datetime import datetime, timedelta, timezone
from decimal import Decimal

from sqlalchemy import select

from x402_exchange.calls.models import ApiCallModel
from x402_exchange.endpoints.service import EndpointService
from x402_exchange.seeder.service import MOCK_WALLETS, DemoSeeder

NOW = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)


def _seeder(settings, seed=42):
    return DemoSeeder(settings, EndpointService(), rng=random.Random(seed))


async def _calls(session, user_id):
    result = await session.execute(
        select(ApiCallModel).where(ApiCallModel.user_id == user_id)
    )
    return list(result.scalars().all())


class TestSeed:
    async def test_creates_demo_endpoint_when_none(self, settings, session, user_id):
        result = await _seeder(settings).seed(session, user_id, now=NOW)

        endpoints = await EndpointService().list_endpoints(session, user_id)
        assert len(endpoints) == 1
        demo = endpoints[0]
        assert demo.endpoint_path == "/api/demo"
        assert demo.price_per_call == Decimal("0.01")
        assert demo.currency == "USD"
        assert demo.network == "base"
        assert demo.description == "Demo endpoint for testing"
        assert demo.is_active is True

        assert result.created_endpoint_id == demo.id
        assert result.calls_inserted == 20
        assert result.message == "Seeded 20 API calls across 1 endpoint(s)"
        assert len(await _calls(session, user_id)) == 20

    async def test_uses_existing_endpoints_round_robin(self, settings, session, user_id):
        svc = EndpointService()
        a = await svc.create_endpoint(session, user_id, "/a", "0.01")
        b = await svc.create_endpoint(session, user_id, "/b", "0.02")

        result = await _seeder(settings).seed(session, user_id, now=NOW)
        assert result.created_endpoint_id is None
        assert result.endpoint_count == 2

        calls = await _calls(session, user_id)
        counts = {a.id: 0, b.id: 0}
        for call in calls:
            counts[call.endpoint_id] += 1
        assert counts == {a.id: 10, b.id: 10}

    async def test_row_values_in_bounds(self, settings, session, user_id):
        await _seeder(settings).seed(session, user_id, now=NOW)
        calls = await _calls(session, user_id)

        for call in calls:
            assert Decimal("0.01") <= Decimal(str(call.payment_amount)) <= Decimal("0.10")
            assert 50 <= call.response_time_ms < 550
            assert call.status in ("success", "failed")
            assert call.wallet_address in MOCK_WALLETS
            assert call.request_metadata["user_agent"] == "API-Client/1.0"
            assert call.request_metadata["method"] == "GET"
            assert call.request_metadata["ip"].startswith("192.168.")

    def test_timestamps_step_back_hourly(self, settings):
        seeder = _seeder(settings)
        rows = [seeder.build_call("u", "e", NOW - timedelta(hours=i)) for i in range(3)]
        assert [r.timestamp for r in rows] == [NOW, NOW - timedelta(hours=1), NOW - timedelta(hours=2)]

    def test_deterministic_with_seeded_rng(self, settings):
        a = _seeder(settings, seed=7).build_call("u", "e", NOW)
        b = _seeder(settings, seed=7).build_call("u", "e", NOW)
        assert (a.payment_amount, a.status, a.response_time_ms, a.wallet_address) == (
            b.payment_amount, b.status, b.response_time_ms, b.wallet_address,
        )

    async def test_not_idempotent(self, settings, session, user_id):
        seeder = _seeder(settings)
        await seeder.seed(session, user_id, now=NOW)
        second = await seeder.seed(session, user_id, now=NOW)
        assert second.created_endpoint_id is None
        assert len(await _calls(session, user_id)) == 40
