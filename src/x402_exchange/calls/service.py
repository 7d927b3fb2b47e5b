"""Call-log service: dashboard stats and the recent-calls feed."""

from decimal import ROUND_HALF_UP, Decimal

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from x402_exchange.calls.models import ApiCallModel
from x402_exchange.calls.ranges import DateRange
from x402_exchange.calls.table import CallRow
from x402_exchange.common.config import ExchangeSettings
from x402_exchange.endpoints.models import EndpointModel
from x402_exchange.endpoints.service import EndpointService


def _in_range(query, date_range: DateRange):
    if date_range.start is not None:
        query = query.where(ApiCallModel.timestamp >= date_range.start)
    if date_range.end is not None:
        query = query.where(ApiCallModel.timestamp <= date_range.end)
    return query


class CallService:
    """Read side of the call log."""

    def __init__(self, settings: ExchangeSettings, endpoints: EndpointService):
        self.settings = settings
        self.endpoints = endpoints

    async def has_endpoints(self, session: AsyncSession, user_id: str) -> bool:
        result = await session.execute(
            select(func.count(EndpointModel.id)).where(EndpointModel.user_id == user_id)
        )
        return (result.scalar() or 0) > 0

    async def get_stats(
        self, session: AsyncSession, user_id: str, date_range: DateRange
    ) -> dict:
        """Totals over successful calls in the range."""
        query = select(
            func.count(ApiCallModel.id).label("total_calls"),
            func.sum(ApiCallModel.payment_amount).label("total_revenue"),
            func.avg(ApiCallModel.response_time_ms).label("avg_response_time"),
        ).where(
            ApiCallModel.user_id == user_id,
            ApiCallModel.status == "success",
        )
        row = (await session.execute(_in_range(query, date_range))).one()

        total_revenue = Decimal(str(row.total_revenue or 0)).quantize(Decimal("0.000001"))
        avg_response = Decimal(str(row.avg_response_time or 0))
        return {
            "total_calls": row.total_calls or 0,
            "total_revenue": total_revenue,
            "active_endpoints": await self.endpoints.count_active(session, user_id),
            "avg_response_time": int(avg_response.quantize(Decimal(1), rounding=ROUND_HALF_UP)),
        }

    async def recent_calls(
        self,
        session: AsyncSession,
        user_id: str,
        date_range: DateRange,
        limit: int | None = None,
    ) -> list[CallRow]:
        """Newest-first calls in the range, joined with their endpoint path."""
        limit = limit or self.settings.recent_calls_limit
        query = (
            select(ApiCallModel, EndpointModel.endpoint_path)
            .outerjoin(EndpointModel, ApiCallModel.endpoint_id == EndpointModel.id)
            .where(ApiCallModel.user_id == user_id)
        )
        query = _in_range(query, date_range)
        query = query.order_by(ApiCallModel.timestamp.desc()).limit(limit)
        result = await session.execute(query)

        return [
            CallRow(
                id=call.id,
                timestamp=call.timestamp,
                endpoint_path=endpoint_path or "Unknown",
                payment_amount=Decimal(str(call.payment_amount or 0)),
                status=call.status,
                response_time_ms=call.response_time_ms or 0,
                wallet_address=call.wallet_address,
            )
            for call, endpoint_path in result.all()
        ]
