"""
Record store: the single owner of every stored record.

`RecordStore` is the interface routes and services depend on. Two
implementations exist:
- MemoryRecordStore (here): dict maps that live as long as the process.
- SqlRecordStore (services/sql_store.py): SQLAlchemy tables.

Both hand out copies, so callers can never mutate stored state. Shipments
and expenses are insert-only; inventory items support partial updates.
"""
import logging
import uuid
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Dict, List, Optional

from catchbook.core.config import settings
from catchbook.core.exceptions import NotFoundError
from catchbook.core.time_utils import local_now
from catchbook.schemas.records import (
    Document,
    DocumentCreate,
    Expense,
    ExpenseCreate,
    Grant,
    GrantCreate,
    InventoryItem,
    InventoryItemCreate,
    InventoryItemUpdate,
    Shipment,
    ShipmentCreate,
    User,
    UserCreate,
)

logger = logging.getLogger(__name__)


def new_id() -> str:
    return str(uuid.uuid4())


def default_user() -> User:
    """The identity every route acts for."""
    return User(
        id=settings.DEFAULT_USER_ID,
        name=settings.DEFAULT_USER_NAME,
        phone=settings.DEFAULT_USER_PHONE or None,
        address=settings.DEFAULT_USER_ADDRESS or None,
    )


def merge_fields(updates: InventoryItemUpdate) -> dict:
    """Fields the caller actually provided; explicit nulls are ignored."""
    return {k: v for k, v in updates.model_dump(exclude_unset=True).items() if v is not None}


def grant_sort_key(grant: Grant):
    # Soonest deadline first, open-ended notices last
    deadline = grant.application_deadline
    return (deadline is None, deadline or datetime.max)


class RecordStore(ABC):
    """Create/list access to all records, keyed by owning user."""

    # Users

    @abstractmethod
    def get_user(self, user_id: str) -> Optional[User]:
        pass

    @abstractmethod
    def get_user_by_name(self, name: str) -> Optional[User]:
        pass

    @abstractmethod
    def create_user(self, data: UserCreate) -> User:
        pass

    # Shipments

    @abstractmethod
    def get_shipments(self, user_id: str) -> List[Shipment]:
        """All shipments of the user, newest shipment date first."""
        pass

    @abstractmethod
    def get_shipment(self, shipment_id: str) -> Optional[Shipment]:
        pass

    @abstractmethod
    def create_shipment(self, data: ShipmentCreate) -> Shipment:
        """Store a shipment. shipment_date defaults to the creation time."""
        pass

    # Expenses

    @abstractmethod
    def get_expenses(self, user_id: str) -> List[Expense]:
        """All expenses of the user, newest expense date first."""
        pass

    @abstractmethod
    def get_expense(self, expense_id: str) -> Optional[Expense]:
        pass

    @abstractmethod
    def create_expense(self, data: ExpenseCreate) -> Expense:
        """Store an expense. expense_date defaults to the creation time."""
        pass

    # Inventory

    @abstractmethod
    def get_inventory(self, user_id: str) -> List[InventoryItem]:
        """All inventory items of the user, most recently updated first."""
        pass

    @abstractmethod
    def create_inventory_item(self, data: InventoryItemCreate) -> InventoryItem:
        pass

    @abstractmethod
    def update_inventory_item(self, item_id: str, updates: InventoryItemUpdate) -> InventoryItem:
        """
        Merge the provided fields onto an existing item and refresh
        last_updated.

        Raises:
            NotFoundError: if item_id is unknown (nothing is created)
        """
        pass

    # Documents

    @abstractmethod
    def get_documents(self, user_id: str) -> List[Document]:
        """All documents of the user, newest first."""
        pass

    @abstractmethod
    def create_document(self, data: DocumentCreate) -> Document:
        pass

    @abstractmethod
    def delete_document(self, document_id: str) -> None:
        """
        Raises:
            NotFoundError: if document_id is unknown
        """
        pass

    # Grants

    @abstractmethod
    def get_grants(self, active_only: bool = True) -> List[Grant]:
        """Grant notices, soonest application deadline first."""
        pass

    @abstractmethod
    def create_grant(self, data: GrantCreate) -> Grant:
        pass


class MemoryRecordStore(RecordStore):
    """
    Process-lifetime store backed by plain dicts.

    Not synchronized: requests are assumed not to interleave on the same
    maps. Construct one per app (or per test) and pass it down.
    """

    def __init__(self):
        self._users: Dict[str, User] = {}
        self._shipments: Dict[str, Shipment] = {}
        self._expenses: Dict[str, Expense] = {}
        self._inventory: Dict[str, InventoryItem] = {}
        self._documents: Dict[str, Document] = {}
        self._grants: Dict[str, Grant] = {}

        user = default_user()
        self._users[user.id] = user

    # Users

    def get_user(self, user_id: str) -> Optional[User]:
        user = self._users.get(user_id)
        return user.model_copy() if user else None

    def get_user_by_name(self, name: str) -> Optional[User]:
        for user in self._users.values():
            if user.name == name:
                return user.model_copy()
        return None

    def create_user(self, data: UserCreate) -> User:
        user = User(id=new_id(), **data.model_dump())
        self._users[user.id] = user
        return user.model_copy()

    # Shipments

    def get_shipments(self, user_id: str) -> List[Shipment]:
        rows = [s for s in self._shipments.values() if s.user_id == user_id]
        rows.sort(key=lambda s: s.shipment_date, reverse=True)
        return [s.model_copy() for s in rows]

    def get_shipment(self, shipment_id: str) -> Optional[Shipment]:
        shipment = self._shipments.get(shipment_id)
        return shipment.model_copy() if shipment else None

    def create_shipment(self, data: ShipmentCreate) -> Shipment:
        now = local_now()
        fields = data.model_dump()
        fields["shipment_date"] = data.shipment_date or now
        shipment = Shipment(id=new_id(), created_at=now, **fields)
        self._shipments[shipment.id] = shipment
        return shipment.model_copy()

    # Expenses

    def get_expenses(self, user_id: str) -> List[Expense]:
        rows = [e for e in self._expenses.values() if e.user_id == user_id]
        rows.sort(key=lambda e: e.expense_date, reverse=True)
        return [e.model_copy() for e in rows]

    def get_expense(self, expense_id: str) -> Optional[Expense]:
        expense = self._expenses.get(expense_id)
        return expense.model_copy() if expense else None

    def create_expense(self, data: ExpenseCreate) -> Expense:
        now = local_now()
        fields = data.model_dump()
        fields["expense_date"] = data.expense_date or now
        expense = Expense(id=new_id(), created_at=now, **fields)
        self._expenses[expense.id] = expense
        return expense.model_copy()

    # Inventory

    def get_inventory(self, user_id: str) -> List[InventoryItem]:
        rows = [i for i in self._inventory.values() if i.user_id == user_id]
        rows.sort(key=lambda i: i.last_updated, reverse=True)
        return [i.model_copy() for i in rows]

    def create_inventory_item(self, data: InventoryItemCreate) -> InventoryItem:
        item = InventoryItem(id=new_id(), last_updated=local_now(), **data.model_dump())
        self._inventory[item.id] = item
        return item.model_copy()

    def update_inventory_item(self, item_id: str, updates: InventoryItemUpdate) -> InventoryItem:
        existing = self._inventory.get(item_id)
        if existing is None:
            raise NotFoundError("Inventory item", item_id)

        changes = merge_fields(updates)
        changes["last_updated"] = local_now()
        updated = existing.model_copy(update=changes)
        self._inventory[item_id] = updated
        return updated.model_copy()

    # Documents

    def get_documents(self, user_id: str) -> List[Document]:
        rows = [d for d in self._documents.values() if d.user_id == user_id]
        rows.sort(key=lambda d: d.created_at, reverse=True)
        return [d.model_copy() for d in rows]

    def create_document(self, data: DocumentCreate) -> Document:
        document = Document(id=new_id(), created_at=local_now(), **data.model_dump())
        self._documents[document.id] = document
        return document.model_copy()

    def delete_document(self, document_id: str) -> None:
        if self._documents.pop(document_id, None) is None:
            raise NotFoundError("Document", document_id)

    # Grants

    def get_grants(self, active_only: bool = True) -> List[Grant]:
        rows = [g for g in self._grants.values() if g.is_active or not active_only]
        rows.sort(key=grant_sort_key)
        return [g.model_copy() for g in rows]

    def create_grant(self, data: GrantCreate) -> Grant:
        grant = Grant(id=new_id(), created_at=local_now(), **data.model_dump())
        self._grants[grant.id] = grant
        return grant.model_copy()


def build_store() -> RecordStore:
    """Construct the store selected by STORAGE_BACKEND."""
    if settings.STORAGE_BACKEND == "sql":
        from catchbook.services.sql_store import SqlRecordStore

        logger.info("Using SQL record store")
        return SqlRecordStore(settings.DATABASE_URL)
    if settings.STORAGE_BACKEND != "memory":
        logger.warning(f"Unknown STORAGE_BACKEND '{settings.STORAGE_BACKEND}', using memory")
    logger.info("Using in-memory record store")
    return MemoryRecordStore()
