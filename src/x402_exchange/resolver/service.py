"""Configuration resolver: API key -> pricing manifest."""

import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from x402_exchange.api_keys.service import ApiKeyService
from x402_exchange.common.config import ExchangeSettings
from x402_exchange.common.exceptions import (
    ExchangeError,
    InvalidApiKeyError,
    WalletNotConfiguredError,
)
from x402_exchange.endpoints.service import EndpointService
from x402_exchange.resolver.manifest import build_manifest
from x402_exchange.wallets.service import WalletService

logger = logging.getLogger(__name__)


class EndpointLookupError(ExchangeError):
    """Raised when the active-endpoint query fails."""

    status_code = 500

    def __init__(self, message: str = "Error fetching endpoints"):
        super().__init__(message, code="ENDPOINT_LOOKUP_FAILED")


class ConfigResolver:
    """Builds the manifest a gateway fetches with its API key.

    Each call is an independent read apart from the ``last_used_at`` touch.
    """

    def __init__(
        self,
        settings: ExchangeSettings,
        api_keys: ApiKeyService,
        wallets: WalletService,
        endpoints: EndpointService,
    ):
        self.settings = settings
        self.api_keys = api_keys
        self.wallets = wallets
        self.endpoints = endpoints

    async def resolve(self, session: AsyncSession, raw_key: str) -> dict:
        key = await self.api_keys.get_active_key(session, raw_key)
        if key is None:
            logger.warning("Invalid or inactive API key presented")
            raise InvalidApiKeyError()

        user_id = key.user_id
        await self.api_keys.touch_last_used(session, key)

        wallet = await self.wallets.get_primary_wallet(session, user_id)
        if wallet is None:
            logger.warning("No wallet configured for user %s", user_id)
            raise WalletNotConfiguredError()

        try:
            endpoints = await self.endpoints.list_endpoints(session, user_id, active_only=True)
        except SQLAlchemyError as exc:
            logger.exception("Error fetching endpoints for user %s", user_id)
            raise EndpointLookupError() from exc

        manifest = build_manifest(wallet, endpoints, asset=self.settings.asset)
        logger.info(
            "Configuration fetched for user %s (%d endpoints)",
            user_id, len(manifest["endpoints"]),
        )
        return manifest
