"""SQL record store. One table per entity, one session per operation."""
import logging
from contextlib import contextmanager
from typing import Iterator, List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from catchbook import models
from catchbook.core.exceptions import NotFoundError, StoreError
from catchbook.core.time_utils import local_now
from catchbook.db.base import Base
from catchbook.db.session import make_engine, make_session_factory
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
from catchbook.services.store import RecordStore, default_user, grant_sort_key, merge_fields, new_id

logger = logging.getLogger(__name__)


class SqlRecordStore(RecordStore):
    """
    RecordStore over SQLAlchemy. Tables are created on construction and
    the default user is inserted if missing.

    Any SQLAlchemy failure is re-raised as StoreError.
    """

    def __init__(self, database_url: str):
        self.engine = make_engine(database_url)
        self._session_factory = make_session_factory(self.engine)
        try:
            Base.metadata.create_all(bind=self.engine)
        except SQLAlchemyError as e:
            raise StoreError(f"Could not initialize tables: {e}") from e

        user = default_user()
        with self._session() as db:
            if db.get(models.User, user.id) is None:
                db.add(models.User(**user.model_dump()))

    @contextmanager
    def _session(self) -> Iterator[Session]:
        db = self._session_factory()
        try:
            yield db
            db.commit()
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"Record store operation failed: {e}")
            raise StoreError(str(e)) from e
        finally:
            db.close()

    # Users

    def get_user(self, user_id: str) -> Optional[User]:
        with self._session() as db:
            row = db.get(models.User, user_id)
            return User.model_validate(row) if row else None

    def get_user_by_name(self, name: str) -> Optional[User]:
        with self._session() as db:
            row = db.query(models.User).filter(models.User.name == name).first()
            return User.model_validate(row) if row else None

    def create_user(self, data: UserCreate) -> User:
        with self._session() as db:
            row = models.User(id=new_id(), **data.model_dump())
            db.add(row)
            db.flush()
            return User.model_validate(row)

    # Shipments

    def get_shipments(self, user_id: str) -> List[Shipment]:
        with self._session() as db:
            rows = (
                db.query(models.Shipment)
                .filter(models.Shipment.user_id == user_id)
                .order_by(models.Shipment.shipment_date.desc())
                .all()
            )
            return [Shipment.model_validate(r) for r in rows]

    def get_shipment(self, shipment_id: str) -> Optional[Shipment]:
        with self._session() as db:
            row = db.get(models.Shipment, shipment_id)
            return Shipment.model_validate(row) if row else None

    def create_shipment(self, data: ShipmentCreate) -> Shipment:
        now = local_now()
        fields = data.model_dump()
        fields["shipment_date"] = data.shipment_date or now
        with self._session() as db:
            row = models.Shipment(id=new_id(), created_at=now, **fields)
            db.add(row)
            db.flush()
            return Shipment.model_validate(row)

    # Expenses

    def get_expenses(self, user_id: str) -> List[Expense]:
        with self._session() as db:
            rows = (
                db.query(models.Expense)
                .filter(models.Expense.user_id == user_id)
                .order_by(models.Expense.expense_date.desc())
                .all()
            )
            return [Expense.model_validate(r) for r in rows]

    def get_expense(self, expense_id: str) -> Optional[Expense]:
        with self._session() as db:
            row = db.get(models.Expense, expense_id)
            return Expense.model_validate(row) if row else None

    def create_expense(self, data: ExpenseCreate) -> Expense:
        now = local_now()
        fields = data.model_dump()
        fields["expense_date"] = data.expense_date or now
        with self._session() as db:
            row = models.Expense(id=new_id(), created_at=now, **fields)
            db.add(row)
            db.flush()
            return Expense.model_validate(row)

    # Inventory

    def get_inventory(self, user_id: str) -> List[InventoryItem]:
        with self._session() as db:
            rows = (
                db.query(models.InventoryItem)
                .filter(models.InventoryItem.user_id == user_id)
                .order_by(models.InventoryItem.last_updated.desc())
                .all()
            )
            return [InventoryItem.model_validate(r) for r in rows]

    def create_inventory_item(self, data: InventoryItemCreate) -> InventoryItem:
        with self._session() as db:
            row = models.InventoryItem(id=new_id(), last_updated=local_now(), **data.model_dump())
            db.add(row)
            db.flush()
            return InventoryItem.model_validate(row)

    def update_inventory_item(self, item_id: str, updates: InventoryItemUpdate) -> InventoryItem:
        with self._session() as db:
            row = db.get(models.InventoryItem, item_id)
            if row is None:
                raise NotFoundError("Inventory item", item_id)

            for field, value in merge_fields(updates).items():
                setattr(row, field, value)
            row.last_updated = local_now()
            db.flush()
            return InventoryItem.model_validate(row)

    # Documents

    def get_documents(self, user_id: str) -> List[Document]:
        with self._session() as db:
            rows = (
                db.query(models.Document)
                .filter(models.Document.user_id == user_id)
                .order_by(models.Document.created_at.desc())
                .all()
            )
            return [Document.model_validate(r) for r in rows]

    def create_document(self, data: DocumentCreate) -> Document:
        with self._session() as db:
            row = models.Document(id=new_id(), created_at=local_now(), **data.model_dump())
            db.add(row)
            db.flush()
            return Document.model_validate(row)

    def delete_document(self, document_id: str) -> None:
        with self._session() as db:
            row = db.get(models.Document, document_id)
            if row is None:
                raise NotFoundError("Document", document_id)
            db.delete(row)

    # Grants

    def get_grants(self, active_only: bool = True) -> List[Grant]:
        with self._session() as db:
            q = db.query(models.Grant)
            if active_only:
                q = q.filter(models.Grant.is_active.is_(True))
            grants = [Grant.model_validate(r) for r in q.all()]
        grants.sort(key=grant_sort_key)
        return grants

    def create_grant(self, data: GrantCreate) -> Grant:
        with self._session() as db:
            row = models.Grant(id=new_id(), created_at=local_now(), **data.model_dump())
            db.add(row)
            db.flush()
            return Grant.model_validate(row)
