"""The ``get-config`` function: manifest lookup by API key."""

import logging
from typing import Optional

from fastapi import APIRouter, Query
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from x402_exchange.common.exceptions import ExchangeError
from x402_exchange.resolver.schemas import GatewayConfig

logger = logging.getLogger(__name__)

router = APIRouter()


def _get_service():
    from x402_exchange.deps import get_config_resolver
    return get_config_resolver()


def _get_db():
    from x402_exchange.deps import get_db
    return get_db()


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse({"error": message}, status_code=status_code)


async def _get_config(api_key: Optional[str]):
    if not api_key:
        logger.warning("Missing apiKey parameter")
        return _error(400, "Missing apiKey parameter")

    svc = _get_service()
    db = _get_db()
    try:
        async with db.get_session() as session:
            manifest = await svc.resolve(session, api_key)
    except ExchangeError as e:
        return _error(e.status_code, e.message)
    except SQLAlchemyError:
        logger.exception("Unexpected error in get-config")
        return _error(500, "Internal server error")
    return GatewayConfig.model_validate(manifest)


@router.get(
    "/functions/get-config",
    response_model=GatewayConfig,
    responses={400: {}, 401: {}, 404: {}, 500: {}},
)
async def get_config(api_key: Optional[str] = Query(None, alias="apiKey")):
    return await _get_config(api_key)


@router.get("/config", response_model=GatewayConfig, include_in_schema=False)
async def get_config_alias(api_key: Optional[str] = Query(None, alias="apiKey")):
    return await _get_config(api_key)
