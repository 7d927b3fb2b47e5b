"""Dashboard cookie-based session authentication."""

from itsdangerous import URLSafeTimedSerializer, BadSignature, SignatureExpired
from starlette.requests import Request
from starlette.responses import RedirectResponse

COOKIE_NAME = "x402x_dash_session"


def _get_serializer() -> URLSafeTimedSerializer:
    from x402_exchange.common.config import get_settings
    return URLSafeTimedSerializer(get_settings().secret_key, salt="dashboard-session")


def session_max_age() -> int:
    from x402_exchange.common.config import get_settings
    return get_settings().session_ttl


def create_session_cookie(user_id: str, email: str) -> str:
    """Sign a session payload and return the cookie value."""
    s = _get_serializer()
    return s.dumps({"user_id": user_id, "email": email})


def verify_session_cookie(cookie: str) -> dict | None:
    """Verify and decode a session cookie. Returns payload or None."""
    s = _get_serializer()
    try:
        payload = s.loads(cookie, max_age=session_max_age())
    except (BadSignature, SignatureExpired):
        return None
    if not isinstance(payload, dict) or not payload.get("user_id"):
        return None
    return payload


def get_session(request: Request) -> dict | None:
    """Extract and verify the session from a request."""
    cookie = request.cookies.get(COOKIE_NAME)
    if not cookie:
        return None
    return verify_session_cookie(cookie)


def login_redirect() -> RedirectResponse:
    """Create a redirect to the login page."""
    return RedirectResponse("/dashboard/login", status_code=302)


def start_session(response, user_id: str, email: str):
    response.set_cookie(
        COOKIE_NAME, create_session_cookie(user_id, email),
        max_age=session_max_age(), httponly=True, samesite="lax",
    )
    return response
