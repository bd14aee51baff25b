"""
Monthly dashboard summary.

Derived on every request from the full shipment/expense history; nothing
is materialized. Amounts are free text on shipments, so parsing is
tolerant: anything without a leading number counts as zero.
"""
import math
import re
from datetime import datetime
from typing import Iterable, List, Optional, Union
from decimal import Decimal

from catchbook.core.time_utils import local_now, same_month
from catchbook.schemas.records import Expense, Shipment
from catchbook.services.store import RecordStore

RECENT_SHIPMENTS_LIMIT = 5

# Leading decimal number, e.g. "25000", "12.5kg", "-3", ".5", "1e3"
_LEADING_NUMBER = re.compile(r"^\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")


def parse_amount(value: Union[str, Decimal, float, int, None]) -> float:
    """
    Parse a stored amount. Returns 0.0 for None, empty or non-numeric text.

    A leading number is taken and any trailing text ignored, so "12.5kg"
    parses as 12.5 and "abc" as 0.0.
    """
    if value is None:
        return 0.0
    if isinstance(value, (Decimal, int, float)):
        number = float(value)
    else:
        match = _LEADING_NUMBER.match(str(value))
        if not match:
            return 0.0
        number = float(match.group(1))
    if math.isnan(number) or math.isinf(number):
        return 0.0
    return number


def round_half_up(value: float) -> int:
    """Nearest whole unit; halves round towards positive infinity."""
    return int(math.floor(value + 0.5))


def recent_shipments(shipments: Iterable[Shipment], limit: int = RECENT_SHIPMENTS_LIMIT) -> List[Shipment]:
    return sorted(shipments, key=lambda s: s.shipment_date, reverse=True)[:limit]


def compute_monthly_summary(
    shipments: List[Shipment],
    expenses: List[Expense],
    now: Optional[datetime] = None,
) -> dict:
    """
    Totals for the calendar month containing `now` (host local time).

    Returns: {revenue, expenses, profit, shipments, revenueChange, expenseChange}
    Month-over-month change is not computed; both change fields are 0.
    """
    now = now or local_now()

    month_shipments = [s for s in shipments if same_month(s.shipment_date, now)]
    month_expenses = [e for e in expenses if same_month(e.expense_date, now)]

    total_revenue = sum(parse_amount(s.total_amount) for s in month_shipments)
    total_expenses = sum(parse_amount(e.amount) for e in month_expenses)
    profit = total_revenue - total_expenses

    return {
        "revenue": round_half_up(total_revenue),
        "expenses": round_half_up(total_expenses),
        "profit": round_half_up(profit),
        "shipments": len(month_shipments),
        "revenueChange": 0,
        "expenseChange": 0,
    }


def build_dashboard(store: RecordStore, user_id: str, now: Optional[datetime] = None) -> dict:
    """
    Dashboard payload for one user.

    Store failures propagate (StoreError); no defaults are substituted.
    """
    shipments = store.get_shipments(user_id)
    expenses = store.get_expenses(user_id)

    return {
        "monthlyStats": compute_monthly_summary(shipments, expenses, now=now),
        "recentShipments": recent_shipments(shipments),
    }
