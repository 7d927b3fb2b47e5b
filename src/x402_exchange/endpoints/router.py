"""Endpoint configuration API router."""

from fastapi import APIRouter, Depends

from x402_exchange.common.security import require_user
from x402_exchange.endpoints.schemas import EndpointCreate, EndpointResponse, EndpointUpdate

router = APIRouter(prefix="/endpoints")


def _get_service():
    from x402_exchange.deps import get_endpoint_service
    return get_endpoint_service()


def _get_db():
    from x402_exchange.deps import get_db
    return get_db()


@router.get("", response_model=list[EndpointResponse])
async def list_endpoints(user_id: str = Depends(require_user)):
    svc = _get_service()
    db = _get_db()
    async with db.get_session() as session:
        endpoints = await svc.list_endpoints(session, user_id)
        return [EndpointResponse.model_validate(e) for e in endpoints]


@router.post("", response_model=EndpointResponse, status_code=201)
async def create_endpoint(body: EndpointCreate, user_id: str = Depends(require_user)):
    svc = _get_service()
    db = _get_db()
    async with db.get_session() as session:
        endpoint = await svc.create_endpoint(
            session,
            user_id,
            endpoint_path=body.endpoint_path,
            price_per_call=body.price_per_call,
            description=body.description,
            currency=body.currency,
            network=body.network,
        )
        return EndpointResponse.model_validate(endpoint)


@router.patch("/{endpoint_id}", response_model=EndpointResponse)
async def update_endpoint(
    endpoint_id: str, body: EndpointUpdate, user_id: str = Depends(require_user)
):
    svc = _get_service()
    db = _get_db()
    async with db.get_session() as session:
        endpoint = await svc.update_endpoint(
            session, user_id, endpoint_id, **body.model_dump(exclude_unset=True)
        )
        return EndpointResponse.model_validate(endpoint)


@router.post("/{endpoint_id}/toggle", response_model=EndpointResponse)
async def toggle_endpoint(endpoint_id: str, user_id: str = Depends(require_user)):
    svc = _get_service()
    db = _get_db()
    async with db.get_session() as session:
        endpoint = await svc.toggle_endpoint(session, user_id, endpoint_id)
        return EndpointResponse.model_validate(endpoint)


@router.delete("/{endpoint_id}", status_code=204)
async def delete_endpoint(endpoint_id: str, user_id: str = Depends(require_user)):
    svc = _get_service()
    db = _get_db()
    async with db.get_session() as session:
        await svc.delete_endpoint(session, user_id, endpoint_id)
