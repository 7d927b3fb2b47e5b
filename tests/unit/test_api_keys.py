"""Tests for ApiKeyService: issue, rotate, resolve and touch."""

from unittest.mock import AsyncMock

from sqlalchemy.exc import OperationalError

from x402_exchange.api_keys.service import ApiKeyService


class TestApiKeyService:
    def test_key_format(self, settings):
        key = ApiKeyService(settings).generate_key()
        assert key.startswith("402x_")
        assert len(key) > 20

    async def test_get_or_create_is_stable(self, settings, session, user_id):
        svc = ApiKeyService(settings)
        first = await svc.get_or_create_key(session, user_id)
        second = await svc.get_or_create_key(session, user_id)
        assert first.id == second.id
        assert first.is_active is True

    async def test_regenerate_deactivates_old(self, settings, session, user_id):
        svc = ApiKeyService(settings)
        old = await svc.get_or_create_key(session, user_id)
        new = await svc.regenerate_key(session, user_id)
        await session.refresh(old)

        assert new.api_key != old.api_key
        assert old.is_active is False
        assert await svc.get_active_key(session, old.api_key) is None
        assert (await svc.get_active_key(session, new.api_key)).id == new.id
        assert (await svc.get_current_key(session, user_id)).id == new.id

    async def test_unknown_key(self, settings, session):
        assert await ApiKeyService(settings).get_active_key(session, "402x_nope") is None

    async def test_touch_sets_last_used(self, settings, session, user_id):
        svc = ApiKeyService(settings)
        key = await svc.get_or_create_key(session, user_id)
        assert key.last_used_at is None

        assert await svc.touch_last_used(session, key) is True
        await session.refresh(key)
        assert key.last_used_at is not None

    async def test_touch_failure_is_swallowed(self, settings, session, user_id):
        svc = ApiKeyService(settings)
        key = await svc.get_or_create_key(session, user_id)

        broken = AsyncMock()
        broken.execute.side_effect = OperationalError("UPDATE", {}, Exception("locked"))
        assert await svc.touch_last_used(broken, key) is False
        broken.rollback.assert_awaited_once()
