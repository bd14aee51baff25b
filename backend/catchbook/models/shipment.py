from sqlalchemy import Column, String, Text, Float, DateTime
from catchbook.db.base import Base
from catchbook.db.types import ExactDecimal


class Shipment(Base):
    """
    One delivery of fish to a buyer.

    quantity and total_amount are free text ("12.5kg", "25000") exactly as
    captured; nothing here normalizes them.
    """
    __tablename__ = "shipments"

    id = Column(String(36), primary_key=True, index=True)
    user_id = Column(String(36), nullable=False, index=True)  # no FK enforcement
    fish_species = Column(Text, nullable=False)
    quantity = Column(Text, nullable=False)
    destination = Column(Text, nullable=False)
    price = Column(ExactDecimal, nullable=True)  # unit price
    total_amount = Column(Text, nullable=True)
    notes = Column(Text, nullable=True)  # voice transcript or extra memo
    confidence = Column(Float, nullable=True)  # recognition confidence
    shipment_date = Column(DateTime, nullable=False)
    created_at = Column(DateTime, nullable=False)
