from sqlalchemy import Column, String, Text, DateTime
from datetime import datetime
from goaltracker.database import Base


class Document(Base):
    __tablename__ = "documents"

    key = Column(String, primary_key=True, index=True)  # e.g. "personal-goals"
    payload = Column(Text, nullable=False)  # JSON-encoded document body
    updated_at = Column(DateTime, default=datetime.now, onupdate=datetime.now)
