"""
Category correction audit model.
"""

import uuid
from datetime import datetime
from sqlalchemy import Column, String, DateTime, Text, Index
from app.database import Base


class CategoryCorrection(Base):
    """Append-only record of a single manual category override."""

    __tablename__ = "category_corrections"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String(36), nullable=False)
    expense_id = Column(String(36), nullable=True)  # Source transaction, if known
    merchant = Column(Text, nullable=True)
    description = Column(Text, nullable=True)
    old_category = Column(String(100), nullable=False)
    new_category = Column(String(100), nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    __table_args__ = (
        Index("idx_correction_user_created", "user_id", "created_at"),
        Index("idx_correction_user_merchant", "user_id", "merchant"),
    )
