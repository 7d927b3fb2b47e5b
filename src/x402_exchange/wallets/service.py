"""Wallet service: one payout address per network per user."""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from x402_exchange.common.exceptions import ConfigurationValidationError
from x402_exchange.wallets.models import WalletModel


class WalletService:
    """Wallet configuration operations."""

    async def list_wallets(
        self, session: AsyncSession, user_id: str
    ) -> list[WalletModel]:
        result = await session.execute(
            select(WalletModel)
            .where(WalletModel.user_id == user_id)
            .order_by(WalletModel.created_at, WalletModel.id)
        )
        return list(result.scalars().all())

    async def get_for_network(
        self, session: AsyncSession, user_id: str, network: str
    ) -> WalletModel | None:
        result = await session.execute(
            select(WalletModel).where(
                WalletModel.user_id == user_id,
                WalletModel.network == network,
            )
        )
        return result.scalar_one_or_none()

    async def get_primary_wallet(
        self, session: AsyncSession, user_id: str
    ) -> WalletModel | None:
        """The wallet a pricing manifest pays out to: the first one configured."""
        wallets = await self.list_wallets(session, user_id)
        return wallets[0] if wallets else None

    async def save_wallet(
        self,
        session: AsyncSession,
        user_id: str,
        wallet_address: str,
        network: str,
    ) -> tuple[WalletModel, bool]:
        """Update the wallet on ``network`` or add one. Returns (wallet, created)."""
        wallet_address = (wallet_address or "").strip()
        network = (network or "").strip()
        if not wallet_address or not network:
            raise ConfigurationValidationError("Please fill in all wallet fields")

        existing = await self.get_for_network(session, user_id, network)
        if existing is not None:
            existing.wallet_address = wallet_address
            await session.flush()
            return existing, False

        wallet = WalletModel(
            user_id=user_id,
            wallet_address=wallet_address,
            network=network,
        )
        session.add(wallet)
        await session.flush()
        return wallet, True
