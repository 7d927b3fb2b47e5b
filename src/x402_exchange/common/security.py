"""Bearer-token authentication for the REST API and the functions."""

from typing import Optional

from fastapi import Header, HTTPException
from itsdangerous import BadSignature, SignatureExpired, URLSafeTimedSerializer

from x402_exchange.common.config import ExchangeSettings, get_settings

ACCESS_TOKEN_SALT = "access-token"


def _get_serializer(settings: ExchangeSettings | None = None) -> URLSafeTimedSerializer:
    settings = settings or get_settings()
    return URLSafeTimedSerializer(settings.secret_key, salt=ACCESS_TOKEN_SALT)


def create_access_token(user_id: str, settings: ExchangeSettings | None = None) -> str:
    """Sign a bearer token naming the user."""
    return _get_serializer(settings).dumps({"sub": user_id})


def verify_access_token(
    token: str, settings: ExchangeSettings | None = None
) -> Optional[str]:
    """Return the user id carried by a valid token, or None."""
    settings = settings or get_settings()
    try:
        payload = _get_serializer(settings).loads(token, max_age=settings.access_token_ttl)
    except (BadSignature, SignatureExpired):
        return None
    if not isinstance(payload, dict):
        return None
    return payload.get("sub")


def parse_bearer(authorization: Optional[str]) -> Optional[str]:
    """Extract the token from an ``Authorization: Bearer <token>`` header."""
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


async def resolve_user_id(authorization: Optional[str]) -> Optional[str]:
    """Verify the bearer header and check the profile still exists."""
    token = parse_bearer(authorization)
    if token is None:
        return None
    user_id = verify_access_token(token)
    if user_id is None:
        return None

    from x402_exchange.deps import get_account_service, get_db
    svc = get_account_service()
    db = get_db()
    async with db.get_session() as session:
        profile = await svc.get_by_id(session, user_id)
    return profile.id if profile else None


async def require_user(
    authorization: Optional[str] = Header(None),
) -> str:
    """FastAPI dependency that resolves the calling user from a bearer token."""
    user_id = await resolve_user_id(authorization)
    if user_id is None:
        raise HTTPException(status_code=401, detail="Unauthorized")
    return user_id
