"""
Categorization API endpoints.
"""

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from app.config import CategorizationConfig
from app.database import get_db
from app.dependencies import get_categorization_config, get_categorization_engine
from app.schemas.categorization import (
    CategorizationResult,
    CategorizeRequest,
    CorrectionRequest,
    CorrectionResponse,
    DictionaryEntryList,
    DictionaryEntryResponse,
)
from app.services.categories import CATEGORIES
from app.services.categorization_service import CategorizationEngine
from app.services.correction_service import learn_from_correction
from app.services.errors import StorageUnavailable
from app.services.merchant_dictionary import get_visible_entries

router = APIRouter(prefix="/categorization", tags=["categorization"])


@router.get("/categories")
def list_categories():
    """List the fixed category enumeration."""
    return {"items": CATEGORIES, "total": len(CATEGORIES)}


@router.post("/categorize", response_model=CategorizationResult)
async def categorize(
    request: CategorizeRequest,
    engine: CategorizationEngine = Depends(get_categorization_engine)
):
    """Categorize one transaction. Always answers, worst case Uncategorized."""
    return await engine.categorize(
        user_id=request.user_id,
        amount=request.amount,
        description=request.description,
        merchant=request.merchant,
        payment_method=request.payment_method
    )


@router.post("/corrections", response_model=CorrectionResponse)
def record_correction(
    request: CorrectionRequest,
    db: Session = Depends(get_db),
    config: CategorizationConfig = Depends(get_categorization_config)
):
    """Record a manual category override and update the merchant dictionary."""
    try:
        outcome = learn_from_correction(
            db,
            user_id=request.user_id,
            merchant=request.merchant,
            description=request.description,
            old_category=request.old_category,
            new_category=request.new_category,
            expense_id=request.expense_id,
            locale_suffix=config.locale_suffix
        )
    except StorageUnavailable as e:
        raise HTTPException(status_code=503, detail=str(e))

    if outcome is None:
        return CorrectionResponse(recorded=False)

    return CorrectionResponse(
        recorded=True,
        correction_id=outcome.correction.id,
        dictionary_entry_id=outcome.entry.id if outcome.entry else None
    )


@router.get("/dictionary", response_model=DictionaryEntryList)
def list_dictionary(
    user_id: str = Query(..., min_length=1),
    limit: int = Query(300, ge=1, le=1000),
    db: Session = Depends(get_db)
):
    """Active dictionary entries visible to a user, strongest first."""
    try:
        entries = get_visible_entries(db, user_id, limit)
    except StorageUnavailable as e:
        raise HTTPException(status_code=503, detail=str(e))

    return DictionaryEntryList(
        items=[DictionaryEntryResponse.model_validate(e) for e in entries],
        total=len(entries)
    )
