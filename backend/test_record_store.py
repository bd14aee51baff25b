"""
Record store contract, run against both the memory and the SQL backend.
"""
from datetime import datetime, timedelta
from decimal import Decimal

import pytest

from catchbook.core.config import settings
from catchbook.core.exceptions import NotFoundError
from catchbook.schemas.records import (
    DocumentCreate,
    ExpenseCreate,
    GrantCreate,
    InventoryItemCreate,
    InventoryItemUpdate,
    ShipmentCreate,
    UserCreate,
)

USER = settings.DEFAULT_USER_ID


def make_shipment(**overrides):
    fields = dict(
        user_id=USER,
        fish_species="アジ",
        quantity="12.5kg",
        destination="篠島漁協",
        total_amount="25000",
    )
    fields.update(overrides)
    return ShipmentCreate(**fields)


def test_default_user_exists(store):
    user = store.get_user(USER)
    assert user is not None
    assert user.name == settings.DEFAULT_USER_NAME
    assert store.get_user_by_name(settings.DEFAULT_USER_NAME).id == USER


def test_create_user_assigns_fresh_id(store):
    a = store.create_user(UserCreate(name="佐藤"))
    b = store.create_user(UserCreate(name="鈴木", phone="090-0000-0000"))
    assert a.id != b.id
    assert store.get_user(b.id).phone == "090-0000-0000"
    assert store.get_user("missing") is None


def test_create_shipment_defaults_shipment_date_to_creation_time(store):
    shipment = store.create_shipment(make_shipment())
    assert shipment.id
    assert shipment.shipment_date == shipment.created_at
    assert shipment.quantity == "12.5kg"
    assert shipment.total_amount == "25000"


def test_create_shipment_keeps_given_date(store):
    when = datetime(2026, 3, 14, 6, 30)
    shipment = store.create_shipment(make_shipment(shipment_date=when))
    assert shipment.shipment_date == when
    assert store.get_shipment(shipment.id).shipment_date == when


def test_shipments_listed_newest_first_and_by_owner(store):
    base = datetime(2026, 5, 1, 8, 0)
    for offset in (2, 0, 5, 1):
        store.create_shipment(make_shipment(shipment_date=base + timedelta(days=offset)))
    store.create_shipment(make_shipment(user_id="someone-else"))

    shipments = store.get_shipments(USER)
    assert len(shipments) == 4
    dates = [s.shipment_date for s in shipments]
    assert dates == sorted(dates, reverse=True)


def test_unparseable_total_amount_is_stored_as_is(store):
    shipment = store.create_shipment(make_shipment(total_amount="abc"))
    assert store.get_shipment(shipment.id).total_amount == "abc"


def test_expenses_listed_newest_first(store):
    store.create_expense(ExpenseCreate(
        user_id=USER, category="燃料費", amount=Decimal("5000"), expense_date=datetime(2026, 1, 5)
    ))
    store.create_expense(ExpenseCreate(
        user_id=USER, category="資材費", amount=Decimal("1200.50"), expense_date=datetime(2026, 2, 5)
    ))
    expenses = store.get_expenses(USER)
    assert [e.category for e in expenses] == ["資材費", "燃料費"]
    assert expenses[0].amount == Decimal("1200.50")


def test_expense_date_defaults_to_creation_time(store):
    expense = store.create_expense(ExpenseCreate(user_id=USER, category="氷", amount=Decimal("800")))
    assert expense.expense_date == expense.created_at
    assert store.get_expense(expense.id).category == "氷"


def test_update_inventory_item_merges_and_refreshes_timestamp(store):
    item = store.create_inventory_item(
        InventoryItemCreate(user_id=USER, item_name="ロープ（50m）", current_stock=1, min_threshold=3)
    )
    updated = store.update_inventory_item(item.id, InventoryItemUpdate(current_stock=4))

    assert updated.current_stock == 4
    assert updated.item_name == "ロープ（50m）"
    assert updated.min_threshold == 3
    assert updated.last_updated >= item.last_updated
    assert store.get_inventory(USER)[0].current_stock == 4


def test_update_inventory_item_ignores_explicit_nulls(store):
    item = store.create_inventory_item(
        InventoryItemCreate(user_id=USER, item_name="氷", current_stock=50, min_threshold=100)
    )
    updated = store.update_inventory_item(item.id, InventoryItemUpdate(item_name=None, min_threshold=40))
    assert updated.item_name == "氷"
    assert updated.min_threshold == 40


def test_update_unknown_inventory_item_raises_not_found(store):
    with pytest.raises(NotFoundError):
        store.update_inventory_item("no-such-id", InventoryItemUpdate(current_stock=1))
    assert store.get_inventory(USER) == []


def test_inventory_min_threshold_defaults_to_zero(store):
    item = store.create_inventory_item(InventoryItemCreate(user_id=USER, item_name="網", current_stock=3))
    assert item.min_threshold == 0


def test_documents_create_list_delete(store):
    doc = store.create_document(DocumentCreate(
        user_id=USER,
        document_name="漁業許可証",
        document_type="許可証",
        image_url="/uploads/permit.jpg",
        expiry_date=datetime(2027, 3, 31),
    ))
    assert [d.id for d in store.get_documents(USER)] == [doc.id]

    store.delete_document(doc.id)
    assert store.get_documents(USER) == []
    with pytest.raises(NotFoundError):
        store.delete_document(doc.id)


def test_grants_sorted_by_deadline_and_filtered_by_active(store):
    store.create_grant(GrantCreate(
        title="スマート漁業推進補助金", description="d", eligibility_requirements="e",
        application_deadline=datetime(2026, 12, 20),
    ))
    store.create_grant(GrantCreate(
        title="漁船設備更新支援事業", description="d", eligibility_requirements="e",
        application_deadline=datetime(2026, 11, 15), grant_amount=Decimal("2000000"),
    ))
    store.create_grant(GrantCreate(
        title="常設相談窓口", description="d", eligibility_requirements="e",
    ))
    store.create_grant(GrantCreate(
        title="終了した補助金", description="d", eligibility_requirements="e", is_active=False,
    ))

    titles = [g.title for g in store.get_grants()]
    assert titles == ["漁船設備更新支援事業", "スマート漁業推進補助金", "常設相談窓口"]
    assert len(store.get_grants(active_only=False)) == 4


def test_returned_records_are_copies(memory_store):
    shipment = memory_store.create_shipment(make_shipment())
    shipment.total_amount = "999999"
    assert memory_store.get_shipment(shipment.id).total_amount == "25000"


def test_amounts_and_confidence_read_back_exactly(store):
    shipment = store.create_shipment(make_shipment(confidence=0.856, price=Decimal("123.456")))
    expense = store.create_expense(ExpenseCreate(user_id=USER, category="燃料費", amount=Decimal("1234.567")))
    grant = store.create_grant(GrantCreate(
        title="t", description="d", eligibility_requirements="e", grant_amount=Decimal("2500000.125"),
    ))

    stored = store.get_shipment(shipment.id)
    assert (stored.confidence, stored.price) == (0.856, Decimal("123.456"))
    assert stored == shipment
    assert store.get_expense(expense.id).amount == Decimal("1234.567")
    assert str(store.get_expense(expense.id).amount) == "1234.567"
    assert [g.grant_amount for g in store.get_grants() if g.id == grant.id] == [Decimal("2500000.125")]
