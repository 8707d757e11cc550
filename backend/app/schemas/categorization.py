"""
Categorization Pydantic schemas.
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator
from datetime import datetime
from decimal import Decimal
from typing import Any, Optional


class CategorizationResult(BaseModel):
    """Value returned by every tier of the engine. Never an error object."""
    category: str
    confidence: float = Field(..., ge=0.0, le=1.0)
    reason: str


class AdapterResponse(BaseModel):
    """
    Loosely-typed model payload: {category, confidence, reason}.

    Missing fields get defaults, extra fields are ignored and a confidence that
    is not a number or is out of range is coerced into [0, 1].
    """

    model_config = ConfigDict(extra="ignore")

    category: Optional[str] = None
    confidence: float = 0.5
    reason: Optional[str] = None

    @field_validator("category", "reason", mode="before")
    @classmethod
    def _coerce_text(cls, value: Any) -> Optional[str]:
        if value is None:
            return None
        if not isinstance(value, (str, int, float)):
            return None
        text = str(value).strip()
        return text or None

    @field_validator("confidence", mode="before")
    @classmethod
    def _coerce_confidence(cls, value: Any) -> float:
        try:
            number = float(value)
        except (TypeError, ValueError):
            return 0.5
        if number != number:  # NaN
            return 0.5
        return min(max(number, 0.0), 1.0)

    @classmethod
    def parse_payload(cls, payload: Any) -> Optional["AdapterResponse"]:
        """Return a response with a usable category, or None."""
        if not isinstance(payload, dict):
            return None
        response = cls.model_validate(payload)
        if not response.category:
            return None
        return response


class CategorizeRequest(BaseModel):
    user_id: str = Field(..., min_length=1)
    amount: Optional[Decimal] = None
    description: Optional[str] = ""
    merchant: Optional[str] = ""
    payment_method: Optional[str] = None


class CorrectionRequest(BaseModel):
    user_id: str = Field(..., min_length=1)
    merchant: Optional[str] = None
    description: Optional[str] = None
    old_category: str = Field(..., min_length=1, max_length=100)
    new_category: str = Field(..., min_length=1, max_length=100)
    expense_id: Optional[str] = None


class CorrectionResponse(BaseModel):
    recorded: bool
    correction_id: Optional[str] = None
    dictionary_entry_id: Optional[str] = None


class DictionaryEntryResponse(BaseModel):
    id: str
    user_id: Optional[str]
    merchant_keyword: str
    normalized_keyword: str
    category: str
    confidence_score: float
    source: str
    hit_count: int
    last_matched_at: Optional[datetime]
    is_active: bool
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class DictionaryEntryList(BaseModel):
    items: list[DictionaryEntryResponse]
    total: int
