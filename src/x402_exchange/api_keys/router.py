"""API key router."""

from fastapi import APIRouter, Depends

from x402_exchange.api_keys.schemas import ApiKeyResponse
from x402_exchange.common.security import require_user

router = APIRouter(prefix="/api-keys")


def _get_service():
    from x402_exchange.deps import get_api_key_service
    return get_api_key_service()


def _get_db():
    from x402_exchange.deps import get_db
    return get_db()


@router.get("/current", response_model=ApiKeyResponse)
async def current_key(user_id: str = Depends(require_user)):
    svc = _get_service()
    db = _get_db()
    async with db.get_session() as session:
        key = await svc.get_or_create_key(session, user_id)
        return ApiKeyResponse.model_validate(key)


@router.post("/regenerate", response_model=ApiKeyResponse)
async def regenerate_key(user_id: str = Depends(require_user)):
    svc = _get_service()
    db = _get_db()
    async with db.get_session() as session:
        key = await svc.regenerate_key(session, user_id)
        return ApiKeyResponse.model_validate(key)
