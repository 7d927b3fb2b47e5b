"""Tests for ConfigResolver: API key -> manifest."""

from unittest.mock import AsyncMock

import pytest
from sqlalchemy.exc import OperationalError

from x402_exchange.api_keys.service import ApiKeyService
from x402_exchange.common.exceptions import InvalidApiKeyError, WalletNotConfiguredError
from x402_exchange.endpoints.service import EndpointService
from x402_exchange.resolver.service import ConfigResolver, EndpointLookupError
from x402_exchange.wallets.service import WalletService


@pytest.fixture
def resolver(settings):
    return ConfigResolver(
        settings,
        api_keys=ApiKeyService(settings),
        wallets=WalletService(),
        endpoints=EndpointService(),
    )


@pytest.fixture
async def api_key(resolver, session, user_id):
    key = await resolver.api_keys.get_or_create_key(session, user_id)
    return key.api_key


class TestResolve:
    async def test_full_manifest(self, resolver, session, user_id, api_key):
        await resolver.wallets.save_wallet(session, user_id, "0xabc", "base-mainnet")
        await resolver.endpoints.create_endpoint(session, user_id, "/api/data", "0.01")
        off = await resolver.endpoints.create_endpoint(session, user_id, "/api/off", "0.02")
        await resolver.endpoints.toggle_endpoint(session, user_id, off.id)

        manifest = await resolver.resolve(session, api_key)
        assert manifest == {
            "walletAddress": "0xabc",
            "endpoints": {"GET /api/data": {"price": "$0.010", "network": "base-mainnet"}},
            "network": "base-mainnet",
            "asset": "USDC",
        }

    async def test_wallet_without_endpoints(self, resolver, session, user_id, api_key):
        await resolver.wallets.save_wallet(session, user_id, "0xabc", "base-sepolia")
        manifest = await resolver.resolve(session, api_key)
        assert manifest["endpoints"] == {}
        assert manifest["network"] == "base-sepolia"

    async def test_unknown_key(self, resolver, session):
        with pytest.raises(InvalidApiKeyError):
            await resolver.resolve(session, "402x_unknown")

    async def test_inactive_key(self, resolver, session, user_id, api_key):
        await resolver.api_keys.regenerate_key(session, user_id)
        with pytest.raises(InvalidApiKeyError):
            await resolver.resolve(session, api_key)

    async def test_no_wallet_regardless_of_endpoints(self, resolver, session, user_id, api_key):
        await resolver.endpoints.create_endpoint(session, user_id, "/api/data", "0.01")
        with pytest.raises(WalletNotConfiguredError):
            await resolver.resolve(session, api_key)

    async def test_touches_last_used_even_on_404(self, resolver, session, user_id, api_key):
        with pytest.raises(WalletNotConfiguredError):
            await resolver.resolve(session, api_key)
        key = await resolver.api_keys.get_active_key(session, api_key)
        await session.refresh(key)
        assert key.last_used_at is not None

    async def test_endpoint_query_failure(self, resolver, session, user_id, api_key):
        await resolver.wallets.save_wallet(session, user_id, "0xabc", "base-mainnet")
        resolver.endpoints = AsyncMock()
        resolver.endpoints.list_endpoints.side_effect = OperationalError("SELECT", {}, Exception("boom"))
        with pytest.raises(EndpointLookupError) as exc_info:
            await resolver.resolve(session, api_key)
        assert exc_info.value.status_code == 500
        assert exc_info.value.message == "Error fetching endpoints"
