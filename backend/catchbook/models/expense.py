from sqlalchemy import Column, String, Text, DateTime
from catchbook.db.base import Base
from catchbook.db.types import ExactDecimal


class Expense(Base):
    __tablename__ = "expenses"

    id = Column(String(36), primary_key=True, index=True)
    user_id = Column(String(36), nullable=False, index=True)
    category = Column(Text, nullable=False)  # 燃料費, 資材費, ...
    amount = Column(ExactDecimal, nullable=False)
    description = Column(Text, nullable=True)
    receipt_image_url = Column(Text, nullable=True)
    expense_date = Column(DateTime, nullable=False)
    created_at = Column(DateTime, nullable=False)
