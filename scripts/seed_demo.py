#!/usr/bin/env python3
"""Seed demo API calls for an existing account, straight into the database.

Usage:
    python scripts/seed_demo.py user@example.com [batches]
"""

import asyncio
import sys
from pathlib import Path

# Ensure project root is on path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent / "src"))

from x402_exchange.common.config import get_settings
from x402_exchange.common.database import DatabaseManager
from x402_exchange.accounts.service import AccountService
from x402_exchange.endpoints.service import EndpointService
from x402_exchange.seeder.service import DemoSeeder


async def seed_demo(email: str, batches: int = 1) -> int:
    settings = get_settings()
    db = DatabaseManager(settings)
    await db.init()
    await db.create_all()

    accounts = AccountService()
    seeder = DemoSeeder(settings, EndpointService())

    try:
        async with db.get_session() as session:
            profile = await accounts.get_by_email(session, email)
            if profile is None:
                print(f"  [error] no account for {email}")
                return 1

            for _ in range(batches):
                result = await seeder.seed(session, profile.id)
                print(f"  [seeded] {result.message}")
    finally:
        await db.close()

    print(f"\nDone. {batches} batch(es) seeded for {email}.")
    return 0


if __name__ == "__main__":
    if len(sys.argv) < 2:
        print(__doc__)
        sys.exit(2)
    count = int(sys.argv[2]) if len(sys.argv) > 2 else 1
    sys.exit(asyncio.run(seed_demo(sys.argv[1], count)))
