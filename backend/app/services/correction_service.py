"""Service that turns manual category corrections into dictionary entries."""

import logging
from dataclasses import dataclass
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.models.category_correction import CategoryCorrection
from app.models.merchant_category_map import MerchantCategoryMap, SOURCE_USER_CORRECTION
from app.services.errors import StorageUnavailable, is_missing_table_error
from app.services.normalizer import DEFAULT_LOCALE_SUFFIX, normalize_text

logger = logging.getLogger(__name__)

CORRECTION_CONFIDENCE = 0.95


@dataclass
class CorrectionOutcome:
    correction: CategoryCorrection
    entry: Optional[MerchantCategoryMap] = None


def find_user_entry(db: Session, user_id: str, normalized_keyword: str) -> Optional[MerchantCategoryMap]:
    """Most recently updated dictionary row owned by this user for the keyword."""
    return db.query(MerchantCategoryMap).filter(
        MerchantCategoryMap.user_id == user_id,
        MerchantCategoryMap.normalized_keyword == normalized_keyword
    ).order_by(MerchantCategoryMap.updated_at.desc()).first()


def upsert_user_entry(
    db: Session,
    user_id: str,
    merchant: str,
    normalized_keyword: str,
    new_category: str
) -> MerchantCategoryMap:
    """
    Point the user's entry for this merchant at new_category.

    Confidence only ever goes up: an existing entry keeps its score if it is
    already above CORRECTION_CONFIDENCE.
    """
    entry = find_user_entry(db, user_id, normalized_keyword)
    if entry:
        entry.merchant_keyword = merchant
        entry.category = new_category
        entry.confidence_score = max(float(entry.confidence_score or 0.0), CORRECTION_CONFIDENCE)
        entry.source = SOURCE_USER_CORRECTION
        entry.is_active = True
    else:
        entry = MerchantCategoryMap(
            user_id=user_id,
            merchant_keyword=merchant,
            normalized_keyword=normalized_keyword,
            category=new_category,
            confidence_score=CORRECTION_CONFIDENCE,
            source=SOURCE_USER_CORRECTION,
            hit_count=0,
            is_active=True
        )
        db.add(entry)
    db.flush()
    return entry


def _add_correction(
    db: Session,
    user_id: str,
    merchant: Optional[str],
    description: Optional[str],
    old_category: str,
    new_category: str,
    expense_id: Optional[str]
) -> CategoryCorrection:
    correction = CategoryCorrection(
        user_id=user_id,
        expense_id=expense_id,
        merchant=merchant,
        description=description,
        old_category=old_category,
        new_category=new_category
    )
    db.add(correction)
    try:
        db.flush()
    except SQLAlchemyError as e:
        db.rollback()
        if is_missing_table_error(e):
            raise StorageUnavailable("category_corrections is not provisioned") from e
        raise
    return correction


def learn_from_correction(
    db: Session,
    user_id: str,
    merchant: Optional[str],
    description: Optional[str],
    old_category: str,
    new_category: str,
    expense_id: Optional[str] = None,
    locale_suffix: Optional[str] = DEFAULT_LOCALE_SUFFIX
) -> Optional[CorrectionOutcome]:
    """
    Record a user override and teach the dictionary about it.

    The audit row and the dictionary upsert are committed together. Returns
    None when the category did not actually change.

    Raises StorageUnavailable if the audit table is missing. A missing
    dictionary table only skips the upsert; the audit row is still kept.
    """
    if old_category == new_category:
        return None

    args = (db, user_id, merchant, description, old_category, new_category, expense_id)
    correction = _add_correction(*args)

    normalized = normalize_text(merchant, locale_suffix)
    if not normalized:
        db.commit()
        db.refresh(correction)
        return CorrectionOutcome(correction=correction)

    try:
        entry = upsert_user_entry(db, user_id, merchant, normalized, new_category)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        if not is_missing_table_error(e):
            raise
        logger.warning("Dictionary table not provisioned, keeping correction audit only")
        correction = _add_correction(*args)
        db.commit()
        db.refresh(correction)
        return CorrectionOutcome(correction=correction)
    except Exception:
        db.rollback()
        raise

    db.refresh(correction)
    db.refresh(entry)
    logger.info(
        f"Learned {normalized!r} -> {new_category} for user {user_id} "
        f"(confidence {entry.confidence_score:.2f})"
    )
    return CorrectionOutcome(correction=correction, entry=entry)
