"""Record entities and the inputs the store accepts to create them.

Attributes are snake_case in Python and camelCase on the wire.
"""
from pydantic import BaseModel, Field, field_validator
from pydantic.alias_generators import to_camel
from typing import Any, Optional
from datetime import datetime
from decimal import Decimal

from catchbook.core.time_utils import to_local_naive


def as_text(v: Any) -> Any:
    """Numbers sent for free-text fields are kept as their text form."""
    if isinstance(v, (int, float, Decimal)) and not isinstance(v, bool):
        return str(v)
    return v


class CamelModel(BaseModel):
    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True


class LocalTimesModel(CamelModel):
    """Every datetime field is stored as host-local naive time."""

    @field_validator("*", mode="after")
    @classmethod
    def localize_datetimes(cls, v):
        if isinstance(v, datetime):
            return to_local_naive(v)
        return v


# ------------------------------------------------------------------------------
# Users
# ------------------------------------------------------------------------------

class UserCreate(CamelModel):
    name: str
    phone: Optional[str] = None
    address: Optional[str] = None


class User(UserCreate):
    id: str


# ------------------------------------------------------------------------------
# Shipments
# ------------------------------------------------------------------------------

class ShipmentCreate(LocalTimesModel):
    user_id: str
    fish_species: str
    quantity: str  # free text, e.g. "12.5kg"
    destination: str
    price: Optional[Decimal] = None  # unit price
    total_amount: Optional[str] = None  # free text, may not parse
    notes: Optional[str] = None
    confidence: Optional[float] = Field(default=None, ge=0.0, le=1.0)
    shipment_date: Optional[datetime] = None  # defaults to creation time


class Shipment(ShipmentCreate):
    id: str
    shipment_date: datetime
    created_at: datetime


# ------------------------------------------------------------------------------
# Expenses
# ------------------------------------------------------------------------------

class ExpenseCreate(LocalTimesModel):
    user_id: str
    category: str  # 燃料費, 資材費, 修理費, ...
    amount: Decimal
    description: Optional[str] = None
    receipt_image_url: Optional[str] = None
    expense_date: Optional[datetime] = None  # defaults to creation time


class Expense(ExpenseCreate):
    id: str
    expense_date: datetime
    created_at: datetime


# ------------------------------------------------------------------------------
# Inventory
# ------------------------------------------------------------------------------

class InventoryItemCreate(CamelModel):
    user_id: str
    item_name: str
    current_stock: int
    min_threshold: int = 0


class InventoryItemUpdate(CamelModel):
    item_name: Optional[str] = None
    current_stock: Optional[int] = None
    min_threshold: Optional[int] = None


class InventoryItem(InventoryItemCreate):
    id: str
    last_updated: datetime


# ------------------------------------------------------------------------------
# Documents
# ------------------------------------------------------------------------------

class DocumentCreate(LocalTimesModel):
    user_id: str
    document_name: str
    document_type: str  # 許可証, 免許, 保険証, ...
    image_url: str
    expiry_date: Optional[datetime] = None


class Document(DocumentCreate):
    id: str
    created_at: datetime


# ------------------------------------------------------------------------------
# Grants (subsidy notices, not owned by a user)
# ------------------------------------------------------------------------------

class GrantCreate(LocalTimesModel):
    title: str
    description: str
    eligibility_requirements: str
    application_deadline: Optional[datetime] = None
    grant_amount: Optional[Decimal] = None
    is_active: bool = True


class Grant(GrantCreate):
    id: str
    created_at: datetime
