"""Demo-data seeder: synthetic call history for the dashboard."""

import logging
import random
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from x402_exchange.calls.models import ApiCallModel
from x402_exchange.common.config import ExchangeSettings
from x402_exchange.endpoints.models import EndpointModel
from x402_exchange.endpoints.service import EndpointService

logger = logging.getLogger(__name__)

DEMO_ENDPOINT = {
    "endpoint_path": "/api/demo",
    "price_per_call": Decimal("0.01"),
    "currency": "USD",
    "network": "base",
    "description": "Demo endpoint for testing",
}

# Four successes to one failure
STATUSES = ("success", "success", "success", "success", "failed")

MOCK_WALLETS = (
    "0x742d35Cc6634C0532925a3b844Bc9e7595f0bEb",
    "0x8ba1f109551bD432803012645Ac136ddd64DBA72",
    "0xAb5801a7D398351b8bE11C439e05C5B3259aeC9B",
    "0x4B0897b0513fdC7C541B6d9D7E929C4e5364D2dB",
    "0x583031D1113aD414F02576BD6afaBfb302140225",
)


@dataclass
class SeedResult:
    endpoint_count: int
    calls_inserted: int
    created_endpoint_id: Optional[str] = None

    @property
    def message(self) -> str:
        return (
            f"Seeded {self.calls_inserted} API calls across "
            f"{self.endpoint_count} endpoint(s)"
        )


class DemoSeeder:
    """Appends synthetic call rows; every run adds another batch."""

    def __init__(
        self,
        settings: ExchangeSettings,
        endpoints: EndpointService,
        rng: Optional[random.Random] = None,
    ):
        self.settings = settings
        self.endpoints = endpoints
        self.rng = rng or random.Random()

    async def ensure_endpoints(
        self, session: AsyncSession, user_id: str
    ) -> tuple[list[EndpointModel], Optional[str]]:
        """The user's endpoints, creating the demo one when there are none."""
        endpoints = await self.endpoints.list_endpoints(session, user_id)
        if endpoints:
            return endpoints, None

        endpoint = await self.endpoints.create_endpoint(session, user_id, **DEMO_ENDPOINT)
        logger.info("Created demo endpoint %s for user %s", endpoint.id, user_id)
        return [endpoint], endpoint.id

    def build_call(
        self,
        user_id: str,
        endpoint_id: str,
        timestamp: datetime,
    ) -> ApiCallModel:
        rng = self.rng
        amount = Decimal(str(rng.uniform(0.01, 0.10))).quantize(Decimal("0.01"))
        return ApiCallModel(
            user_id=user_id,
            endpoint_id=endpoint_id,
            timestamp=timestamp,
            payment_amount=amount,
            response_time_ms=rng.randrange(50, 550),
            status=rng.choice(STATUSES),
            wallet_address=rng.choice(MOCK_WALLETS),
            request_metadata={
                "ip": f"192.168.{rng.randrange(255)}.{rng.randrange(255)}",
                "user_agent": "API-Client/1.0",
                "method": "GET",
            },
        )

    async def seed(
        self,
        session: AsyncSession,
        user_id: str,
        now: Optional[datetime] = None,
    ) -> SeedResult:
        logger.info("Seeding API calls for user %s", user_id)
        endpoints, created_id = await self.ensure_endpoints(session, user_id)
        logger.info("Distributing calls across %d endpoint(s)", len(endpoints))

        now = now or datetime.now(timezone.utc)
        count = self.settings.seed_call_count
        calls = [
            self.build_call(
                user_id,
                endpoints[i % len(endpoints)].id,
                now - timedelta(hours=i),
            )
            for i in range(count)
        ]
        session.add_all(calls)
        await session.flush()

        logger.info("Successfully seeded %d API calls", count)
        return SeedResult(
            endpoint_count=len(endpoints),
            calls_inserted=count,
            created_endpoint_id=created_id,
        )
