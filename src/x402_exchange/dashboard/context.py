"""Shared template context helpers for the dashboard."""

from starlette.requests import Request

from x402_exchange.common.config import CURRENCIES, NETWORKS

NAV_ITEMS = [
    {"label": "Dashboard", "url": "/dashboard/", "icon": "activity"},
    {"label": "Configuration", "url": "/dashboard/config", "icon": "settings"},
    {"label": "Integration", "url": "/dashboard/integration", "icon": "code"},
    {"label": "Settings", "url": "/dashboard/settings", "icon": "user"},
]


def network_label(network: str) -> str:
    return NETWORKS.get(network, network)


def base_context(request: Request, session: dict | None) -> dict:
    """Build the base template context with nav items and the signed-in user."""
    path = request.url.path
    nav = []
    for item in NAV_ITEMS:
        entry = dict(item)
        entry["active"] = path == entry["url"] or (
            entry["url"] != "/dashboard/" and path.startswith(entry["url"])
        )
        nav.append(entry)

    return {
        "request": request,
        "nav_items": nav,
        "user_email": (session or {}).get("email", ""),
        "networks": NETWORKS,
        "currencies": CURRENCIES,
        "network_label": network_label,
    }
