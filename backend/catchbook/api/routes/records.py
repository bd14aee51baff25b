"""Records: shipments, expenses, inventory and documents for the default user.

Shipments and expenses are create/list only. Inventory supports partial
updates; documents can be deleted.
"""
import math
from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Any, List, Optional, Union

from fastapi import APIRouter, Depends, Query
from pydantic import Field, field_validator

from catchbook.api.deps import get_current_user_id, get_store
from catchbook.core.audit import AuditLog
from catchbook.core.config import settings
from catchbook.core.exceptions import BusinessError, NotFoundError, StoreError
from catchbook.core.time_utils import clean_date_input, local_now
from catchbook.schemas.records import (
    CamelModel,
    Document,
    DocumentCreate,
    Expense,
    ExpenseCreate,
    InventoryItem,
    InventoryItemCreate,
    InventoryItemUpdate,
    LocalTimesModel,
    Shipment,
    ShipmentCreate,
    as_text,
)
from catchbook.services.store import RecordStore

router = APIRouter()


# ==============================================================================
# REQUEST BODIES
# ==============================================================================

class ShipmentRequest(LocalTimesModel):
    """Everything optional; missing or empty fields take the cooperative defaults."""
    fish_species: Optional[str] = None
    quantity: Optional[str] = None
    destination: Optional[str] = None
    price: Optional[Decimal] = None
    total_amount: Optional[str] = None
    notes: Optional[str] = None
    confidence: Optional[float] = Field(default=None, ge=0.0, le=1.0)
    shipment_date: Optional[datetime] = None

    @field_validator("quantity", "total_amount", mode="before")
    @classmethod
    def numbers_as_text(cls, v: Any) -> Any:
        return as_text(v)

    @field_validator("shipment_date", mode="before")
    @classmethod
    def blank_date_is_missing(cls, v: Any) -> Any:
        return clean_date_input(v)


class ExpenseRequest(LocalTimesModel):
    category: Optional[str] = None
    amount: Optional[Union[str, float, int]] = None
    vendor: Optional[str] = None
    description: Optional[str] = None
    date: Optional[datetime] = None
    receipt_image_url: Optional[str] = None

    # OCR leaves date empty when the receipt is unreadable, or returns 2026/10/02
    @field_validator("date", mode="before")
    @classmethod
    def blank_date_is_missing(cls, v: Any) -> Any:
        return clean_date_input(v)


class InventoryRequest(CamelModel):
    item_name: str
    current_stock: int = 0
    min_threshold: int = 0


class DocumentRequest(LocalTimesModel):
    document_name: str
    document_type: str
    image_url: str
    expiry_date: Optional[datetime] = None

    @field_validator("expiry_date", mode="before")
    @classmethod
    def blank_date_is_missing(cls, v: Any) -> Any:
        return clean_date_input(v)


def parse_expense_amount(value: Union[str, float, int, None]) -> Decimal:
    """Expense amounts must be plain decimals; missing means 0."""
    text = str(value).strip() if value is not None else ""
    if not text:
        text = "0"
    try:
        amount = Decimal(text)
    except InvalidOperation:
        raise BusinessError.bad_request(f"amount: '{value}' is not a number")
    if not amount.is_finite():
        raise BusinessError.bad_request(f"amount: '{value}' is not a number")
    return amount


# ==============================================================================
# SHIPMENTS
# ==============================================================================

@router.post("/shipments")
def create_shipment(
    body: ShipmentRequest,
    store: RecordStore = Depends(get_store),
    user_id: str = Depends(get_current_user_id),
):
    """Save a shipment captured by photo, voice or manual entry."""
    data = ShipmentCreate(
        user_id=user_id,
        fish_species=body.fish_species or settings.DEFAULT_SPECIES,
        quantity=body.quantity or settings.DEFAULT_QUANTITY,
        destination=body.destination or settings.DEFAULT_DESTINATION,
        price=body.price,
        total_amount=body.total_amount or None,
        notes=body.notes or None,
        confidence=body.confidence,
        shipment_date=body.shipment_date,
    )
    try:
        shipment = store.create_shipment(data)
    except StoreError as e:
        raise BusinessError.server_error("出荷記録の保存に失敗しました", e)

    AuditLog.log_action("create", "shipment", shipment.id, user_id, changes={
        "fish_species": shipment.fish_species,
        "quantity": shipment.quantity,
        "total_amount": shipment.total_amount,
    })
    return {"success": True, "message": "出荷記録を保存しました", "data": shipment}


@router.get("/shipments", response_model=List[Shipment])
def list_shipments(
    store: RecordStore = Depends(get_store),
    user_id: str = Depends(get_current_user_id),
):
    """All shipments, newest shipment date first."""
    try:
        return store.get_shipments(user_id)
    except StoreError as e:
        raise BusinessError.server_error("出荷記録の取得に失敗しました", e)


# ==============================================================================
# EXPENSES
# ==============================================================================

@router.post("/expenses")
def create_expense(
    body: ExpenseRequest,
    store: RecordStore = Depends(get_store),
    user_id: str = Depends(get_current_user_id),
):
    """Save an expense, typically confirmed from a receipt scan."""
    data = ExpenseCreate(
        user_id=user_id,
        category=body.category or settings.DEFAULT_CATEGORY,
        amount=parse_expense_amount(body.amount),
        description=body.vendor or body.description or "",
        receipt_image_url=body.receipt_image_url,
        expense_date=body.date or local_now(),
    )
    try:
        expense = store.create_expense(data)
    except StoreError as e:
        raise BusinessError.server_error("経費記録の保存に失敗しました", e)

    AuditLog.log_action("create", "expense", expense.id, user_id, changes={
        "category": expense.category,
        "amount": expense.amount,
    })
    return {"success": True, "message": "経費記録を保存しました", "data": expense}


@router.get("/expenses", response_model=List[Expense])
def list_expenses(
    store: RecordStore = Depends(get_store),
    user_id: str = Depends(get_current_user_id),
):
    """All expenses, newest expense date first."""
    try:
        return store.get_expenses(user_id)
    except StoreError as e:
        raise BusinessError.server_error("経費記録の取得に失敗しました", e)


# ==============================================================================
# INVENTORY
# ==============================================================================

@router.get("/inventory", response_model=List[InventoryItem])
def list_inventory(
    store: RecordStore = Depends(get_store),
    user_id: str = Depends(get_current_user_id),
):
    try:
        return store.get_inventory(user_id)
    except StoreError as e:
        raise BusinessError.server_error("在庫の取得に失敗しました", e)


@router.get("/inventory/low-stock", response_model=List[InventoryItem])
def list_low_stock(
    store: RecordStore = Depends(get_store),
    user_id: str = Depends(get_current_user_id),
):
    """Items at or below their minimum threshold, emptiest first."""
    try:
        items = store.get_inventory(user_id)
    except StoreError as e:
        raise BusinessError.server_error("在庫の取得に失敗しました", e)
    low = [i for i in items if i.current_stock <= i.min_threshold]
    return sorted(low, key=lambda i: i.current_stock)


@router.post("/inventory", response_model=InventoryItem)
def create_inventory_item(
    body: InventoryRequest,
    store: RecordStore = Depends(get_store),
    user_id: str = Depends(get_current_user_id),
):
    """Add a new item (nets, rope, fuel, ice...) to inventory."""
    if not body.item_name.strip():
        raise BusinessError.bad_request("itemName: must not be empty")
    if body.current_stock < 0:
        raise BusinessError.bad_request("currentStock: cannot be negative")
    if body.min_threshold < 0:
        raise BusinessError.bad_request("minThreshold: cannot be negative")

    data = InventoryItemCreate(
        user_id=user_id,
        item_name=body.item_name.strip(),
        current_stock=body.current_stock,
        min_threshold=body.min_threshold,
    )
    try:
        item = store.create_inventory_item(data)
    except StoreError as e:
        raise BusinessError.server_error("在庫の登録に失敗しました", e)

    AuditLog.log_action("create", "inventory", item.id, user_id, changes=body.model_dump())
    return item


@router.patch("/inventory/{item_id}", response_model=InventoryItem)
def update_inventory_item(
    item_id: str,
    updates: InventoryItemUpdate,
    store: RecordStore = Depends(get_store),
    user_id: str = Depends(get_current_user_id),
):
    """Update stock count, threshold or name. Always refreshes lastUpdated."""
    if updates.current_stock is not None and updates.current_stock < 0:
        raise BusinessError.bad_request("currentStock: cannot be negative")
    if updates.min_threshold is not None and updates.min_threshold < 0:
        raise BusinessError.bad_request("minThreshold: cannot be negative")
    if updates.item_name is not None and not updates.item_name.strip():
        raise BusinessError.bad_request("itemName: must not be empty")

    try:
        item = store.update_inventory_item(item_id, updates)
    except NotFoundError as e:
        raise BusinessError.not_found("Inventory item", str(e))
    except StoreError as e:
        raise BusinessError.server_error("在庫の更新に失敗しました", e)

    AuditLog.log_action("update", "inventory", item.id, user_id,
                        changes=updates.model_dump(exclude_unset=True))
    return item


# ==============================================================================
# DOCUMENTS
# ==============================================================================

@router.get("/documents", response_model=List[Document])
def list_documents(
    store: RecordStore = Depends(get_store),
    user_id: str = Depends(get_current_user_id),
):
    try:
        return store.get_documents(user_id)
    except StoreError as e:
        raise BusinessError.server_error("書類の取得に失敗しました", e)


EXPIRING_SOON_DAYS = 30


def expiry_status(days_left: int) -> str:
    """Alert tier; anything past the 30 day window is only a warning."""
    if days_left < 0:
        return "expired"
    if days_left <= EXPIRING_SOON_DAYS:
        return "expiring"
    return "warning"


@router.get("/documents/expiring")
def list_expiring_documents(
    days: int = Query(30, ge=0, description="Alert for documents expiring within N days"),
    store: RecordStore = Depends(get_store),
    user_id: str = Depends(get_current_user_id),
):
    """
    Licences, permits and insurance cards that expire within `days`,
    including ones already expired. Soonest first.
    Status tiers: expired, expiring (30 days or less), warning.
    """
    try:
        documents = store.get_documents(user_id)
    except StoreError as e:
        raise BusinessError.server_error("書類の取得に失敗しました", e)

    now = local_now()
    alerts = []
    for d in documents:
        if d.expiry_date is None:
            continue
        days_left = math.ceil((d.expiry_date - now).total_seconds() / 86400)
        if days_left > days:
            continue
        alerts.append({
            "document": d,
            "daysUntilExpiry": days_left,
            "status": expiry_status(days_left),
        })
    alerts.sort(key=lambda a: a["daysUntilExpiry"])
    return alerts


@router.post("/documents", response_model=Document)
def create_document(
    body: DocumentRequest,
    store: RecordStore = Depends(get_store),
    user_id: str = Depends(get_current_user_id),
):
    """Register a photographed permit, licence or certificate."""
    for field, alias in (("document_name", "documentName"), ("document_type", "documentType"),
                         ("image_url", "imageUrl")):
        if not getattr(body, field).strip():
            raise BusinessError.bad_request(f"{alias}: must not be empty")

    data = DocumentCreate(user_id=user_id, **body.model_dump())
    try:
        document = store.create_document(data)
    except StoreError as e:
        raise BusinessError.server_error("書類の保存に失敗しました", e)

    AuditLog.log_action("create", "document", document.id, user_id, changes={
        "document_name": document.document_name,
        "document_type": document.document_type,
    })
    return document


@router.delete("/documents/{document_id}")
def delete_document(
    document_id: str,
    store: RecordStore = Depends(get_store),
    user_id: str = Depends(get_current_user_id),
):
    try:
        store.delete_document(document_id)
    except NotFoundError as e:
        raise BusinessError.not_found("Document", str(e))
    except StoreError as e:
        raise BusinessError.server_error("書類の削除に失敗しました", e)

    AuditLog.log_action("delete", "document", document_id, user_id)
    return {"success": True, "id": document_id}
