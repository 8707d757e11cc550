"""
Pydantic schemas package.
"""

from app.schemas.categorization import (
    CategorizationResult,
    AdapterResponse,
    CategorizeRequest,
    CorrectionRequest,
    CorrectionResponse,
    DictionaryEntryResponse,
    DictionaryEntryList,
)
from app.schemas.settings import CategorizationSettings

__all__ = [
    "CategorizationResult",
    "AdapterResponse",
    "CategorizeRequest",
    "CorrectionRequest",
    "CorrectionResponse",
    "DictionaryEntryResponse",
    "DictionaryEntryList",
    "CategorizationSettings",
]
