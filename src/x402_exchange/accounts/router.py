"""Account API router: sign-up, token issue, current profile."""

from fastapi import APIRouter, Depends, HTTPException

from x402_exchange.accounts.schemas import (
    ProfileResponse,
    SignupRequest,
    TokenRequest,
    TokenResponse,
)
from x402_exchange.common.config import get_settings
from x402_exchange.common.security import create_access_token, require_user

router = APIRouter(prefix="/auth")


def _get_service():
    from x402_exchange.deps import get_account_service
    return get_account_service()


def _get_db():
    from x402_exchange.deps import get_db
    return get_db()


@router.post("/signup", response_model=ProfileResponse, status_code=201)
async def signup(body: SignupRequest):
    svc = _get_service()
    db = _get_db()
    async with db.get_session() as session:
        profile = await svc.create_account(
            session, body.email, body.password, display_name=body.display_name,
        )
        return ProfileResponse.model_validate(profile)


@router.post("/token", response_model=TokenResponse)
async def issue_token(body: TokenRequest):
    svc = _get_service()
    db = _get_db()
    async with db.get_session() as session:
        profile = await svc.authenticate(session, body.email, body.password)
    settings = get_settings()
    return TokenResponse(
        access_token=create_access_token(profile.id),
        expires_in=settings.access_token_ttl,
        user_id=profile.id,
    )


@router.get("/me", response_model=ProfileResponse)
async def me(user_id: str = Depends(require_user)):
    svc = _get_service()
    db = _get_db()
    async with db.get_session() as session:
        profile = await svc.get_by_id(session, user_id)
        if profile is None:
            raise HTTPException(status_code=404, detail="Profile not found")
        return ProfileResponse.model_validate(profile)
