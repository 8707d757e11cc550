"""
Database models package.
"""

from app.models.merchant_category_map import (
    MerchantCategoryMap,
    SOURCE_SEED,
    SOURCE_USER_CORRECTION,
)
from app.models.category_correction import CategoryCorrection

__all__ = [
    "MerchantCategoryMap",
    "SOURCE_SEED",
    "SOURCE_USER_CORRECTION",
    "CategoryCorrection",
]
