"""Dashboard sub-application: routes and handlers."""

import json
import pathlib
from datetime import datetime
from typing import Optional
from urllib.parse import urlencode

from fastapi import FastAPI, Form, Query, Request
from fastapi.responses import HTMLResponse, RedirectResponse, Response
from fastapi.staticfiles import StaticFiles
from fastapi.templating import Jinja2Templates
from starlette.middleware.base import BaseHTTPMiddleware

from x402_exchange.calls.ranges import PRESETS, resolve_range
from x402_exchange.calls.table import (
    SORT_FIELDS,
    STATUS_FILTERS,
    apply_table_view,
    csv_filename,
    export_csv,
    format_amount,
    format_timestamp,
    next_sort,
    truncate_wallet,
)
from x402_exchange.common.exceptions import ExchangeError
from x402_exchange.dashboard.auth import (
    COOKIE_NAME,
    get_session,
    login_redirect,
    start_session,
)
from x402_exchange.dashboard.context import base_context

_DIR = pathlib.Path(__file__).parent
_TEMPLATES_DIR = _DIR / "templates"
_STATIC_DIR = _DIR / "static"

templates = Jinja2Templates(directory=str(_TEMPLATES_DIR))
templates.env.filters["amount"] = format_amount
templates.env.filters["when"] = format_timestamp
templates.env.filters["wallet"] = truncate_wallet
templates.env.filters["qs"] = urlencode

PUBLIC_PATHS = ("/dashboard/login", "/dashboard/signup")


# ── Auth middleware ──


class DashboardAuthMiddleware(BaseHTTPMiddleware):
    """Redirect unauthenticated requests to login page."""

    async def dispatch(self, request, call_next):
        path = request.url.path
        # Allow login/signup pages and static assets
        if path in PUBLIC_PATHS or path.startswith("/dashboard/static"):
            return await call_next(request)
        session = get_session(request)
        if session is None:
            return login_redirect()
        request.state.session = session
        return await call_next(request)


# ── Helpers ──


def _get_db():
    from x402_exchange.deps import get_db
    return get_db()


def _get_accounts():
    from x402_exchange.deps import get_account_service
    return get_account_service()


def _get_wallets():
    from x402_exchange.deps import get_wallet_service
    return get_wallet_service()


def _get_endpoints():
    from x402_exchange.deps import get_endpoint_service
    return get_endpoint_service()


def _get_api_keys():
    from x402_exchange.deps import get_api_key_service
    return get_api_key_service()


def _get_calls():
    from x402_exchange.deps import get_call_service
    return get_call_service()


def _get_seeder():
    from x402_exchange.deps import get_demo_seeder
    return get_demo_seeder()


def _ctx(request: Request) -> dict:
    """Build base context from request."""
    session = getattr(request.state, "session", None)
    return base_context(request, session)


def _user_id(request: Request) -> str:
    return request.state.session["user_id"]


def _is_htmx(request: Request) -> bool:
    return request.headers.get("HX-Request") == "true"


def _flash(response, message: str, level: str = "success"):
    """Set HX-Trigger header for flash messages."""
    response.headers["HX-Trigger"] = json.dumps({
        "showFlash": {"message": message, "level": level}
    })
    return response


class TableView:
    """Query-string state of the recent-calls table."""

    def __init__(
        self,
        preset: Optional[str],
        start: Optional[datetime],
        end: Optional[datetime],
        search: str,
        status: str,
        sort: str,
        direction: str,
    ):
        self.date_range = resolve_range(preset, start, end)
        self.search = search
        self.status = status if status in STATUS_FILTERS else "all"
        self.sort = sort if sort in SORT_FIELDS else "timestamp"
        self.direction = direction if direction in ("asc", "desc") else "desc"

    def params(self, **overrides) -> dict:
        params = {
            "preset": self.date_range.preset,
            "search": self.search,
            "status": self.status,
            "sort": self.sort,
            "direction": self.direction,
        }
        if self.date_range.preset == "custom":
            if self.date_range.start:
                params["start"] = self.date_range.start.isoformat()
            if self.date_range.end:
                params["end"] = self.date_range.end.isoformat()
        params.update(overrides)
        return params

    def sort_params(self, field: str) -> dict:
        sort, direction = next_sort(self.sort, self.direction, field)
        return self.params(sort=sort, direction=direction)


async def _load_table(request: Request, view: TableView) -> dict:
    db = _get_db()
    svc = _get_calls()
    async with db.get_session() as session:
        rows = await svc.recent_calls(session, _user_id(request), view.date_range)
    calls = apply_table_view(rows, view.search, view.status, view.sort, view.direction)
    return {"calls": calls, "fetched_count": len(rows), "view": view}


# ── App factory ──


def create_dashboard_app() -> FastAPI:
    """Create the dashboard FastAPI sub-application."""
    app = FastAPI(docs_url=None, openapi_url=None, redoc_url=None)
    app.add_middleware(DashboardAuthMiddleware)
    app.mount("/static", StaticFiles(directory=str(_STATIC_DIR)), name="dashboard-static")

    # ────────────────────────────────────────────
    # Auth routes
    # ────────────────────────────────────────────

    @app.get("/login", response_class=HTMLResponse)
    async def login_page(request: Request):
        return templates.TemplateResponse(request, "login.html", {"error": None})

    @app.post("/login")
    async def login_submit(
        request: Request,
        email: str = Form(...),
        password: str = Form(...),
    ):
        db = _get_db()
        svc = _get_accounts()
        try:
            async with db.get_session() as session:
                profile = await svc.authenticate(session, email, password)
        except ExchangeError as e:
            return templates.TemplateResponse(
                request, "login.html", {"error": e.message}, status_code=401,
            )

        response = RedirectResponse("/dashboard/", status_code=302)
        return start_session(response, profile.id, profile.email)

    @app.get("/signup", response_class=HTMLResponse)
    async def signup_page(request: Request):
        return templates.TemplateResponse(request, "signup.html", {"error": None})

    @app.post("/signup")
    async def signup_submit(
        request: Request,
        email: str = Form(...),
        password: str = Form(...),
        display_name: str = Form(""),
    ):
        db = _get_db()
        svc = _get_accounts()
        try:
            async with db.get_session() as session:
                profile = await svc.create_account(
                    session, email, password, display_name=display_name,
                )
        except ExchangeError as e:
            return templates.TemplateResponse(
                request, "signup.html", {"error": e.message}, status_code=e.status_code,
            )

        response = RedirectResponse("/dashboard/", status_code=302)
        return start_session(response, profile.id, profile.email)

    @app.post("/logout")
    async def logout():
        response = RedirectResponse("/dashboard/login", status_code=302)
        response.delete_cookie(COOKIE_NAME)
        return response

    # ────────────────────────────────────────────
    # Analytics
    # ────────────────────────────────────────────

    @app.get("/", response_class=HTMLResponse)
    async def overview(
        request: Request,
        preset: Optional[str] = Query(None),
        start: Optional[datetime] = Query(None),
        end: Optional[datetime] = Query(None),
        search: str = Query(""),
        status: str = Query("all"),
        sort: str = Query("timestamp"),
        direction: str = Query("desc"),
    ):
        db = _get_db()
        calls_svc = _get_calls()
        user_id = _user_id(request)
        view = TableView(preset, start, end, search, status, sort, direction)

        async with db.get_session() as session:
            has_endpoints = await calls_svc.has_endpoints(session, user_id)
            stats = None
            if has_endpoints:
                stats = await calls_svc.get_stats(session, user_id, view.date_range)

        ctx = _ctx(request)
        if not has_endpoints:
            return templates.TemplateResponse(request, "welcome.html", ctx)

        ctx.update(await _load_table(request, view))
        ctx.update({"stats": stats, "presets": list(PRESETS)})
        return templates.TemplateResponse(request, "overview.html", ctx)

    @app.get("/calls/table", response_class=HTMLResponse)
    async def calls_table(
        request: Request,
        preset: Optional[str] = Query(None),
        start: Optional[datetime] = Query(None),
        end: Optional[datetime] = Query(None),
        search: str = Query(""),
        status: str = Query("all"),
        sort: str = Query("timestamp"),
        direction: str = Query("desc"),
    ):
        view = TableView(preset, start, end, search, status, sort, direction)
        return templates.TemplateResponse(
            request, "calls/_table.html", await _load_table(request, view),
        )

    @app.get("/calls/export")
    async def calls_export(
        request: Request,
        preset: Optional[str] = Query(None),
        start: Optional[datetime] = Query(None),
        end: Optional[datetime] = Query(None),
        search: str = Query(""),
        status: str = Query("all"),
        sort: str = Query("timestamp"),
        direction: str = Query("desc"),
    ):
        view = TableView(preset, start, end, search, status, sort, direction)
        table = await _load_table(request, view)
        response = Response(
            content=export_csv(table["calls"]),
            media_type="text/csv",
            headers={"Content-Disposition": f'attachment; filename="{csv_filename()}"'},
        )
        return _flash(response, "Exported to CSV")

    @app.post("/seed")
    async def seed_demo_data(request: Request):
        db = _get_db()
        svc = _get_seeder()
        async with db.get_session() as session:
            result = await svc.seed(session, _user_id(request))

        if _is_htmx(request):
            response = HTMLResponse("", headers={"HX-Refresh": "true"})
            return _flash(response, f"Successfully seeded {result.calls_inserted} API calls!")
        return RedirectResponse("/dashboard/", status_code=302)

    # ────────────────────────────────────────────
    # Configuration
    # ────────────────────────────────────────────

    async def _config_context(request: Request, edit_id: Optional[str] = None) -> dict:
        db = _get_db()
        user_id = _user_id(request)
        async with db.get_session() as session:
            wallets = await _get_wallets().list_wallets(session, user_id)
            endpoints = await _get_endpoints().list_endpoints(session, user_id)
            editing = None
            if edit_id:
                editing = await _get_endpoints().get_endpoint(session, user_id, edit_id)
        ctx = _ctx(request)
        ctx.update({"wallets": wallets, "endpoints": endpoints, "editing": editing})
        return ctx

    async def _endpoints_partial(request: Request, message: str, level: str = "success"):
        db = _get_db()
        async with db.get_session() as session:
            endpoints = await _get_endpoints().list_endpoints(session, _user_id(request))
        ctx = _ctx(request)
        ctx["endpoints"] = endpoints
        resp = templates.TemplateResponse(request, "config/_endpoints.html", ctx)
        return _flash(resp, message, level)

    @app.get("/config", response_class=HTMLResponse)
    async def config_page(request: Request, edit: Optional[str] = Query(None)):
        ctx = await _config_context(request, edit)
        return templates.TemplateResponse(request, "config/page.html", ctx)

    @app.post("/config/wallet", response_class=HTMLResponse)
    async def save_wallet(
        request: Request,
        wallet_address: str = Form(""),
        network: str = Form("base-mainnet"),
    ):
        db = _get_db()
        svc = _get_wallets()
        error = None
        message = None
        try:
            async with db.get_session() as session:
                _, created = await svc.save_wallet(
                    session, _user_id(request), wallet_address, network,
                )
            message = "Wallet added successfully" if created else "Wallet updated successfully"
        except ExchangeError as e:
            error = e.message

        ctx = await _config_context(request)
        if _is_htmx(request):
            resp = templates.TemplateResponse(request, "config/_wallets.html", ctx)
            return _flash(resp, error or message, "error" if error else "success")

        ctx["error"] = error
        return templates.TemplateResponse(
            request, "config/page.html", ctx, status_code=422 if error else 200,
        )

    @app.post("/config/endpoints", response_class=HTMLResponse)
    async def create_endpoint(
        request: Request,
        endpoint_path: str = Form(""),
        price_per_call: str = Form(""),
        description: str = Form(""),
        currency: str = Form("USDC"),
        network: str = Form("base-mainnet"),
    ):
        db = _get_db()
        svc = _get_endpoints()
        error = None
        try:
            async with db.get_session() as session:
                await svc.create_endpoint(
                    session, _user_id(request),
                    endpoint_path=endpoint_path,
                    price_per_call=price_per_call,
                    description=description,
                    currency=currency,
                    network=network,
                )
        except ExchangeError as e:
            error = e.message

        if _is_htmx(request):
            if error:
                return await _endpoints_partial(request, error, "error")
            return await _endpoints_partial(request, "Endpoint added successfully")

        if error:
            ctx = await _config_context(request)
            ctx["error"] = error
            return templates.TemplateResponse(request, "config/page.html", ctx, status_code=422)
        return RedirectResponse("/dashboard/config", status_code=302)

    @app.post("/config/endpoints/{endpoint_id}", response_class=HTMLResponse)
    async def update_endpoint(
        request: Request,
        endpoint_id: str,
        endpoint_path: str = Form(""),
        price_per_call: str = Form(""),
        description: str = Form(""),
        currency: str = Form("USDC"),
        network: str = Form("base-mainnet"),
    ):
        db = _get_db()
        svc = _get_endpoints()
        error = None
        try:
            async with db.get_session() as session:
                await svc.update_endpoint(
                    session, _user_id(request), endpoint_id,
                    endpoint_path=endpoint_path,
                    price_per_call=price_per_call,
                    description=description,
                    currency=currency,
                    network=network,
                )
        except ExchangeError as e:
            error = e.message

        if _is_htmx(request):
            if error:
                return await _endpoints_partial(request, error, "error")
            return await _endpoints_partial(request, "Endpoint updated successfully")

        if error:
            ctx = await _config_context(request, endpoint_id)
            ctx["error"] = error
            return templates.TemplateResponse(request, "config/page.html", ctx, status_code=422)
        return RedirectResponse("/dashboard/config", status_code=302)

    @app.post("/config/endpoints/{endpoint_id}/toggle", response_class=HTMLResponse)
    async def toggle_endpoint(request: Request, endpoint_id: str):
        db = _get_db()
        svc = _get_endpoints()
        try:
            async with db.get_session() as session:
                endpoint = await svc.toggle_endpoint(session, _user_id(request), endpoint_id)
        except ExchangeError:
            return await _endpoints_partial(request, "Failed to update endpoint", "error")
        state = "activated" if endpoint.is_active else "deactivated"
        return await _endpoints_partial(request, f"Endpoint {state}")

    @app.delete("/config/endpoints/{endpoint_id}", response_class=HTMLResponse)
    async def delete_endpoint(request: Request, endpoint_id: str):
        db = _get_db()
        svc = _get_endpoints()
        try:
            async with db.get_session() as session:
                await svc.delete_endpoint(session, _user_id(request), endpoint_id)
        except ExchangeError:
            return await _endpoints_partial(request, "Failed to delete endpoint", "error")
        return await _endpoints_partial(request, "Endpoint deleted successfully")

    # ────────────────────────────────────────────
    # Integration & settings
    # ────────────────────────────────────────────

    @app.get("/integration", response_class=HTMLResponse)
    async def integration_page(request: Request):
        from x402_exchange.common.config import get_settings
        db = _get_db()
        svc = _get_api_keys()
        async with db.get_session() as session:
            key = await svc.get_or_create_key(session, _user_id(request))
        ctx = _ctx(request)
        ctx.update({"api_key": key.api_key, "public_url": get_settings().public_url})
        return templates.TemplateResponse(request, "integration.html", ctx)

    @app.post("/integration/regenerate", response_class=HTMLResponse)
    async def regenerate_key(request: Request):
        from x402_exchange.common.config import get_settings
        db = _get_db()
        svc = _get_api_keys()
        async with db.get_session() as session:
            key = await svc.regenerate_key(session, _user_id(request))

        if _is_htmx(request):
            ctx = _ctx(request)
            ctx.update({"api_key": key.api_key, "public_url": get_settings().public_url})
            resp = templates.TemplateResponse(request, "_api_key.html", ctx)
            return _flash(resp, "API key generated")
        return RedirectResponse("/dashboard/integration", status_code=302)

    @app.get("/settings", response_class=HTMLResponse)
    async def settings_page(request: Request):
        return templates.TemplateResponse(request, "settings.html", _ctx(request))

    return app
