"""The ``seed-api-calls`` function."""

import logging
from typing import Optional

from fastapi import APIRouter, Header
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from sqlalchemy.exc import SQLAlchemyError

from x402_exchange.common.security import resolve_user_id

logger = logging.getLogger(__name__)

router = APIRouter()


class SeedResponse(BaseModel):
    success: bool
    message: str
    endpointCount: int


def _get_service():
    from x402_exchange.deps import get_demo_seeder
    return get_demo_seeder()


def _get_db():
    from x402_exchange.deps import get_db
    return get_db()


@router.post(
    "/functions/seed-api-calls",
    response_model=SeedResponse,
    responses={401: {}, 500: {}},
)
async def seed_api_calls(authorization: Optional[str] = Header(None)):
    try:
        user_id = await resolve_user_id(authorization)
        if user_id is None:
            return JSONResponse({"error": "Unauthorized"}, status_code=401)

        svc = _get_service()
        db = _get_db()
        async with db.get_session() as session:
            result = await svc.seed(session, user_id)
    except SQLAlchemyError as e:
        logger.exception("Database error seeding API calls")
        # Only the driver message; str(e) carries the SQL statement
        orig = getattr(e, "orig", None)
        return JSONResponse({"error": str(orig) if orig else "Database error"}, status_code=500)
    except Exception as e:
        logger.exception("Error seeding API calls")
        return JSONResponse({"error": str(e) or "Unknown error"}, status_code=500)

    return SeedResponse(
        success=True,
        message=result.message,
        endpointCount=result.endpoint_count,
    )
