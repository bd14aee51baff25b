from sqlalchemy import Column, String, Text, Integer, DateTime
from catchbook.db.base import Base


class InventoryItem(Base):
    """
    Consumables on hand (nets, rope, fuel, ice).

    An item is "low" when current_stock <= min_threshold.
    """
    __tablename__ = "inventory"

    id = Column(String(36), primary_key=True, index=True)
    user_id = Column(String(36), nullable=False, index=True)
    item_name = Column(Text, nullable=False)
    current_stock = Column(Integer, nullable=False)
    min_threshold = Column(Integer, nullable=False, default=0)
    last_updated = Column(DateTime, nullable=False)
