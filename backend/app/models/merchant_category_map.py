"""
Merchant dictionary database model.
"""

import uuid
from datetime import datetime
from sqlalchemy import Column, String, Boolean, DateTime, Float, Integer, Text, Index
from app.database import Base


SOURCE_SEED = "seed"
SOURCE_USER_CORRECTION = "user_correction"


class MerchantCategoryMap(Base):
    """
    A learned or seeded association between a normalized merchant token and a category.

    Rows with user_id NULL are global and visible to every user; all other rows
    are only visible to their owner. Rows are never deleted, only deactivated.
    """

    __tablename__ = "merchant_category_map"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String(36), nullable=True)  # NULL = global
    merchant_keyword = Column(Text, nullable=False)
    normalized_keyword = Column(Text, nullable=False, index=True)
    category = Column(String(100), nullable=False)
    confidence_score = Column(Float, default=0.8, nullable=False)
    source = Column(String(32), default=SOURCE_SEED, nullable=False)  # seed | user_correction
    hit_count = Column(Integer, default=0, nullable=False)
    last_matched_at = Column(DateTime, nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    __table_args__ = (
        Index("idx_merchant_map_user_keyword", "user_id", "normalized_keyword"),
        Index("idx_merchant_map_category_confidence", "category", "confidence_score"),
    )

    @property
    def is_global(self) -> bool:
        return self.user_id is None
