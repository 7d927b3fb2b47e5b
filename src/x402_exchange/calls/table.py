"""Filtering, sorting and CSV export over the recent-calls table.

All functions operate on an already-bounded list of rows (at most the
dashboard's recent-calls limit), so nothing here touches the database.
"""

import csv
import io
from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import Decimal
from typing import Iterable, Optional

from x402_exchange.calls.models import CALL_STATUSES
from x402_exchange.calls.ranges import as_utc

SORT_FIELDS = ("timestamp", "endpoint_path", "payment_amount", "status", "response_time_ms")
STATUS_FILTERS = ("all",) + CALL_STATUSES
CSV_HEADERS = ["Time", "Endpoint", "Wallet", "Amount", "Status", "Response Time"]


@dataclass
class CallRow:
    id: str
    timestamp: datetime
    endpoint_path: str
    payment_amount: Decimal
    status: str
    response_time_ms: int
    wallet_address: Optional[str] = None


def truncate_wallet(wallet: Optional[str]) -> str:
    if not wallet:
        return "N/A"
    if len(wallet) <= 10:
        return wallet
    return f"{wallet[:6]}...{wallet[-4:]}"


def filter_calls(
    rows: Iterable[CallRow], search: str = "", status: str = "all"
) -> list[CallRow]:
    """Case-insensitive search on endpoint path or wallet, plus a status filter."""
    needle = (search or "").lower()
    result = []
    for row in rows:
        matches_search = needle in row.endpoint_path.lower() or (
            bool(row.wallet_address) and needle in row.wallet_address.lower()
        )
        matches_status = status in ("", "all") or row.status == status
        if matches_search and matches_status:
            result.append(row)
    return result


def _sort_key(field: str):
    if field == "timestamp":
        return lambda row: as_utc(row.timestamp)
    return lambda row: getattr(row, field)


def sort_calls(
    rows: Iterable[CallRow], field: str = "timestamp", direction: str = "desc"
) -> list[CallRow]:
    if field not in SORT_FIELDS:
        raise ValueError(f"Unknown sort field: {field}")
    return sorted(rows, key=_sort_key(field), reverse=direction == "desc")


def next_sort(current_field: str, current_direction: str, field: str) -> tuple[str, str]:
    """Clicking the active column flips direction; a new column starts ascending."""
    if field == current_field:
        return field, "asc" if current_direction == "desc" else "desc"
    return field, "asc"


def apply_table_view(
    rows: Iterable[CallRow],
    search: str = "",
    status: str = "all",
    sort: str = "timestamp",
    direction: str = "desc",
) -> list[CallRow]:
    return sort_calls(filter_calls(rows, search, status), sort, direction)


def format_amount(amount: Decimal) -> str:
    return f"${Decimal(amount):.4f}"


def format_timestamp(value: datetime) -> str:
    return as_utc(value).strftime("%Y-%m-%d %H:%M:%S UTC")


def export_csv(rows: Iterable[CallRow]) -> str:
    """Render exactly the given rows (already filtered and sorted) as CSV."""
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writerow(CSV_HEADERS)
    for row in rows:
        writer.writerow([
            format_timestamp(row.timestamp),
            row.endpoint_path,
            row.wallet_address or "N/A",
            format_amount(row.payment_amount),
            row.status,
            f"{row.response_time_ms}ms",
        ])
    return buffer.getvalue()


def csv_filename(now: Optional[datetime] = None) -> str:
    now = now or datetime.now(timezone.utc)
    return f"api-calls-{now.strftime('%Y-%m-%d')}.csv"
