"""SQLAlchemy ORM models"""

from sqlalchemy import Column, String, Text, Boolean, DateTime
from datetime import datetime

from .database import Base


class StoredBlob(Base):
    """One row per store key"""
    __tablename__ = "kv_store"
    
    key = Column(String(100), primary_key=True)
    # base64(JSON) unless plain is set
    value = Column(Text, nullable=False)
    plain = Column(Boolean, nullable=False, default=False)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)
