"""FastAPI application factory for x402 Exchange."""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from x402_exchange.common.config import get_settings
from x402_exchange.common.exceptions import ExchangeError
from x402_exchange.common.logging import setup_logging
from x402_exchange.common.schemas import ErrorResponse, HealthResponse


def create_app() -> FastAPI:
    settings = get_settings()
    setup_logging(settings.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Startup
        from x402_exchange.deps import get_db
        db = get_db()
        await db.init()
        await db.create_all()
        yield
        # Shutdown
        await db.close()

    app = FastAPI(
        title=settings.api_title,
        version=settings.api_version,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["authorization", "x-client-info", "apikey", "content-type"],
    )

    @app.exception_handler(ExchangeError)
    async def exchange_error_handler(request: Request, exc: ExchangeError):
        body = ErrorResponse(error=exc.message, code=exc.code)
        return JSONResponse(body.model_dump(), status_code=exc.status_code)

    @app.get("/health", response_model=HealthResponse)
    async def health():
        return HealthResponse(version=settings.api_version)

    # Mount routers
    from x402_exchange.accounts.router import router as accounts_router
    from x402_exchange.wallets.router import router as wallets_router
    from x402_exchange.endpoints.router import router as endpoints_router
    from x402_exchange.api_keys.router import router as api_keys_router
    from x402_exchange.calls.router import router as calls_router
    from x402_exchange.resolver.router import router as resolver_router
    from x402_exchange.seeder.router import router as seeder_router

    prefix = settings.api_prefix
    app.include_router(accounts_router, prefix=prefix, tags=["auth"])
    app.include_router(wallets_router, prefix=prefix, tags=["wallets"])
    app.include_router(endpoints_router, prefix=prefix, tags=["endpoints"])
    app.include_router(api_keys_router, prefix=prefix, tags=["api-keys"])
    app.include_router(calls_router, prefix=prefix, tags=["calls"])
    app.include_router(resolver_router, prefix=prefix, tags=["functions"])
    app.include_router(seeder_router, prefix=prefix, tags=["functions"])

    # Mount dashboard sub-application
    from x402_exchange.dashboard.router import create_dashboard_app
    app.mount("/dashboard", create_dashboard_app())

    return app
