"""API key service: issue, rotate and resolve configuration keys."""

import logging
import secrets

from sqlalchemy import select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from x402_exchange.api_keys.models import ApiKeyModel
from x402_exchange.common.config import ExchangeSettings
from x402_exchange.common.models import utcnow

logger = logging.getLogger(__name__)


class ApiKeyService:
    """Per-user API key operations."""

    def __init__(self, settings: ExchangeSettings):
        self.settings = settings

    def generate_key(self) -> str:
        return f"{self.settings.api_key_prefix}{secrets.token_urlsafe(24)}"

    async def get_active_key(
        self, session: AsyncSession, raw_key: str
    ) -> ApiKeyModel | None:
        result = await session.execute(
            select(ApiKeyModel).where(
                ApiKeyModel.api_key == raw_key,
                ApiKeyModel.is_active.is_(True),
            )
        )
        return result.scalar_one_or_none()

    async def get_current_key(
        self, session: AsyncSession, user_id: str
    ) -> ApiKeyModel | None:
        result = await session.execute(
            select(ApiKeyModel)
            .where(
                ApiKeyModel.user_id == user_id,
                ApiKeyModel.is_active.is_(True),
            )
            .order_by(ApiKeyModel.created_at.desc())
            .limit(1)
        )
        return result.scalar_one_or_none()

    async def issue_key(self, session: AsyncSession, user_id: str) -> ApiKeyModel:
        key = ApiKeyModel(user_id=user_id, api_key=self.generate_key(), is_active=True)
        session.add(key)
        await session.flush()
        return key

    async def get_or_create_key(
        self, session: AsyncSession, user_id: str
    ) -> ApiKeyModel:
        key = await self.get_current_key(session, user_id)
        if key is None:
            key = await self.issue_key(session, user_id)
            logger.info("API key generated for user %s", user_id)
        return key

    async def regenerate_key(
        self, session: AsyncSession, user_id: str
    ) -> ApiKeyModel:
        """Deactivate every active key of the user and issue a fresh one."""
        await session.execute(
            update(ApiKeyModel)
            .where(
                ApiKeyModel.user_id == user_id,
                ApiKeyModel.is_active.is_(True),
            )
            .values(is_active=False)
        )
        key = await self.issue_key(session, user_id)
        logger.info("API key rotated for user %s", user_id)
        return key

    async def touch_last_used(self, session: AsyncSession, key: ApiKeyModel) -> bool:
        """Best-effort ``last_used_at`` update, committed on its own.

        Committed immediately so the touch survives a later failure of the
        same request. Never raises.
        """
        try:
            await session.execute(
                update(ApiKeyModel)
                .where(ApiKeyModel.id == key.id)
                .values(last_used_at=utcnow())
            )
            await session.commit()
        except SQLAlchemyError:
            await session.rollback()
            logger.warning("Failed to update last_used_at for key %s", key.id, exc_info=True)
            return False
        return True
