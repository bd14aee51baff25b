"""Monthly dashboard computation."""
from datetime import datetime, timedelta
from decimal import Decimal

import pytest

from catchbook.core.exceptions import StoreError
from catchbook.schemas.records import Expense, ExpenseCreate, Shipment, ShipmentCreate
from catchbook.services.dashboard_service import (
    build_dashboard,
    compute_monthly_summary,
    parse_amount,
    round_half_up,
)
from catchbook.services.store import MemoryRecordStore

NOW = datetime(2026, 10, 19, 14, 0)
LAST_MONTH = datetime(2026, 9, 28, 9, 0)
LAST_YEAR_SAME_MONTH = datetime(2025, 10, 19, 9, 0)


def shipment(total_amount, when=NOW, sid=None):
    return Shipment(
        id=sid or f"s-{when.isoformat()}-{total_amount}",
        user_id="u",
        fish_species="マダイ",
        quantity="10kg",
        destination="篠島漁協",
        total_amount=total_amount,
        shipment_date=when,
        created_at=when,
    )


def expense(amount, when=NOW):
    return Expense(
        id=f"e-{when.isoformat()}-{amount}",
        user_id="u",
        category="燃料費",
        amount=Decimal(amount),
        expense_date=when,
        created_at=when,
    )


class TestParseAmount:

    @pytest.mark.parametrize("value, expected", [
        ("25000", 25000.0),
        ("12.5kg", 12.5),
        ("  300 ", 300.0),
        ("-150", -150.0),
        (Decimal("1200.50"), 1200.5),
        (7, 7.0),
    ])
    def test_numbers(self, value, expected):
        assert parse_amount(value) == expected

    @pytest.mark.parametrize("value", [None, "", "abc", "¥500", "NaN", "   "])
    def test_unparseable_is_zero(self, value):
        assert parse_amount(value) == 0.0


def test_round_half_up():
    assert round_half_up(2.5) == 3
    assert round_half_up(2.4) == 2
    assert round_half_up(-2.5) == -2
    assert round_half_up(-2.6) == -3


def test_no_records_reports_zeros():
    stats = compute_monthly_summary([], [], now=NOW)
    assert stats == {
        "revenue": 0,
        "expenses": 0,
        "profit": 0,
        "shipments": 0,
        "revenueChange": 0,
        "expenseChange": 0,
    }


def test_only_other_months_reports_zeros():
    stats = compute_monthly_summary(
        [shipment("1000", LAST_MONTH), shipment("1000", LAST_YEAR_SAME_MONTH)],
        [expense("500", LAST_MONTH)],
        now=NOW,
    )
    assert stats["revenue"] == 0
    assert stats["expenses"] == 0
    assert stats["shipments"] == 0


def test_revenue_includes_current_month_amount():
    stats = compute_monthly_summary([shipment("25000")], [], now=NOW)
    assert stats["revenue"] == 25000
    assert stats["shipments"] == 1


@pytest.mark.parametrize("bad", ["abc", None, ""])
def test_unparseable_total_contributes_zero(bad):
    stats = compute_monthly_summary([shipment("25000"), shipment(bad)], [], now=NOW)
    assert stats["revenue"] == 25000
    assert stats["shipments"] == 2


def test_profit_is_revenue_minus_expenses_even_when_negative():
    stats = compute_monthly_summary(
        [shipment("3000")],
        [expense("5000"), expense("1200.50")],
        now=NOW,
    )
    assert stats["expenses"] == 6201
    assert stats["profit"] == -3200
    assert stats["profit"] == round_half_up(3000 - 6200.5)


def test_change_fields_are_fixed_at_zero():
    stats = compute_monthly_summary([shipment("100")], [expense("50", LAST_MONTH)], now=NOW)
    assert stats["revenueChange"] == 0
    assert stats["expenseChange"] == 0


def test_build_dashboard_recent_shipments_capped_and_sorted():
    store = MemoryRecordStore()
    for days_ago in (40, 3, 10, 0, 1, 25, 7):
        store.create_shipment(ShipmentCreate(
            user_id="u",
            fish_species="アジ",
            quantity="1kg",
            destination="篠島漁協",
            total_amount="100",
            shipment_date=NOW - timedelta(days=days_ago),
        ))

    data = build_dashboard(store, "u", now=NOW)
    recent = data["recentShipments"]
    assert len(recent) == 5
    dates = [s.shipment_date for s in recent]
    assert dates == sorted(dates, reverse=True)
    assert dates[0] == NOW
    # recent list spans history; monthly stats only count October
    assert data["monthlyStats"]["shipments"] == 5


def test_build_dashboard_includes_store_expenses():
    store = MemoryRecordStore()
    store.create_expense(ExpenseCreate(user_id="u", category="燃料費", amount=Decimal("5000"), expense_date=NOW))
    data = build_dashboard(store, "u", now=NOW)
    assert data["monthlyStats"]["expenses"] == 5000
    assert data["monthlyStats"]["profit"] == -5000


class BrokenStore(MemoryRecordStore):
    def get_shipments(self, user_id):
        raise StoreError("database is locked")


def test_store_failure_propagates():
    with pytest.raises(StoreError):
        build_dashboard(BrokenStore(), "u", now=NOW)
