from sqlalchemy import Column, String, Text, DateTime, Boolean
from catchbook.db.base import Base
from catchbook.db.types import ExactDecimal


class Grant(Base):
    """Subsidy / grant notice. Shared by all users."""
    __tablename__ = "grants"

    id = Column(String(36), primary_key=True, index=True)
    title = Column(Text, nullable=False)
    description = Column(Text, nullable=False)
    eligibility_requirements = Column(Text, nullable=False)
    application_deadline = Column(DateTime, nullable=True)
    grant_amount = Column(ExactDecimal, nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime, nullable=False)
