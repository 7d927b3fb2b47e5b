"""Wallet API router."""

from fastapi import APIRouter, Depends

from x402_exchange.common.security import require_user
from x402_exchange.wallets.schemas import WalletResponse, WalletSave, WalletSaveResponse

router = APIRouter(prefix="/wallets")


def _get_service():
    from x402_exchange.deps import get_wallet_service
    return get_wallet_service()


def _get_db():
    from x402_exchange.deps import get_db
    return get_db()


@router.get("", response_model=list[WalletResponse])
async def list_wallets(user_id: str = Depends(require_user)):
    svc = _get_service()
    db = _get_db()
    async with db.get_session() as session:
        wallets = await svc.list_wallets(session, user_id)
        return [WalletResponse.model_validate(w) for w in wallets]


@router.put("", response_model=WalletSaveResponse)
async def save_wallet(body: WalletSave, user_id: str = Depends(require_user)):
    svc = _get_service()
    db = _get_db()
    async with db.get_session() as session:
        wallet, created = await svc.save_wallet(
            session, user_id, body.wallet_address, body.network,
        )
        return WalletSaveResponse(
            id=wallet.id,
            wallet_address=wallet.wallet_address,
            network=wallet.network,
            created_at=wallet.created_at,
            created=created,
        )
