from sqlalchemy import Column, String, Text, DateTime
from catchbook.db.base import Base


class Document(Base):
    __tablename__ = "documents"

    id = Column(String(36), primary_key=True, index=True)
    user_id = Column(String(36), nullable=False, index=True)
    document_name = Column(Text, nullable=False)
    document_type = Column(Text, nullable=False)  # 許可証, 免許, 保険証, ...
    image_url = Column(Text, nullable=False)
    expiry_date = Column(DateTime, nullable=True)
    created_at = Column(DateTime, nullable=False)
