"""Fuzzy lookup against the persistent merchant dictionary."""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional

from sqlalchemy import or_, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.models.merchant_category_map import MerchantCategoryMap
from app.schemas.categorization import CategorizationResult
from app.services.categories import snap_category
from app.services.errors import StorageUnavailable, is_missing_table_error
from app.services.normalizer import DEFAULT_LOCALE_SUFFIX, normalize_text
from app.services.similarity import similarity

logger = logging.getLogger(__name__)

DEFAULT_MIN_MATCH_SCORE = 0.72
DEFAULT_SCAN_LIMIT = 300
MAX_MATCH_CONFIDENCE = 0.99


@dataclass
class DictionaryMatch:
    """Best (candidate, entry) pair found by a scan."""
    entry: MerchantCategoryMap
    candidate: str
    score: float


def build_candidates(
    merchant: Optional[str],
    description: Optional[str],
    locale_suffix: Optional[str] = DEFAULT_LOCALE_SUFFIX
) -> List[str]:
    """Normalized merchant and description, deduplicated, empties dropped."""
    candidates = []
    for text in (merchant, description):
        normalized = normalize_text(text, locale_suffix)
        if normalized and normalized not in candidates:
            candidates.append(normalized)
    return candidates


def get_visible_entries(db: Session, user_id: str, limit: int = DEFAULT_SCAN_LIMIT) -> List[MerchantCategoryMap]:
    """
    Active global entries plus the user's own, strongest and most recent first.

    Raises StorageUnavailable when the dictionary table does not exist yet.
    """
    try:
        return db.query(MerchantCategoryMap).filter(
            MerchantCategoryMap.is_active == True,
            or_(
                MerchantCategoryMap.user_id.is_(None),
                MerchantCategoryMap.user_id == user_id
            )
        ).order_by(
            MerchantCategoryMap.confidence_score.desc(),
            MerchantCategoryMap.updated_at.desc()
        ).limit(limit).all()
    except SQLAlchemyError as e:
        db.rollback()
        if is_missing_table_error(e):
            raise StorageUnavailable("merchant_category_map is not provisioned") from e
        raise


def find_best_match(
    candidates: List[str],
    entries: List[MerchantCategoryMap],
    locale_suffix: Optional[str] = DEFAULT_LOCALE_SUFFIX
) -> Optional[DictionaryMatch]:
    """
    Score every (candidate, entry) pair by similarity x entry confidence.

    Ties keep the earlier entry, i.e. the one with higher confidence/recency.
    """
    best: Optional[DictionaryMatch] = None
    for entry in entries:
        keyword = normalize_text(entry.normalized_keyword or entry.merchant_keyword, locale_suffix)
        if not keyword:
            continue
        for candidate in candidates:
            weighted = similarity(candidate, keyword) * float(entry.confidence_score or 0.0)
            if best is None or weighted > best.score:
                best = DictionaryMatch(entry=entry, candidate=candidate, score=weighted)
    return best


def record_hit(db: Session, entry_id: str) -> None:
    """
    Increment hit_count and stamp last_matched_at with a single UPDATE.

    Best-effort: a failure is logged and never reaches the caller.
    """
    try:
        db.execute(
            update(MerchantCategoryMap)
            .where(MerchantCategoryMap.id == entry_id)
            .values(
                hit_count=MerchantCategoryMap.hit_count + 1,
                last_matched_at=datetime.utcnow()
            )
        )
        db.commit()
    except Exception as e:
        logger.warning(f"Could not record dictionary hit for {entry_id}: {e}")
        try:
            db.rollback()
        except Exception:
            logger.debug("Rollback after failed hit update also failed", exc_info=True)


def match_merchant(
    db: Session,
    user_id: str,
    merchant: Optional[str],
    description: Optional[str],
    min_score: float = DEFAULT_MIN_MATCH_SCORE,
    scan_limit: int = DEFAULT_SCAN_LIMIT,
    locale_suffix: Optional[str] = DEFAULT_LOCALE_SUFFIX
) -> Optional[CategorizationResult]:
    """
    Dictionary tier: best weighted match at or above min_score, else None.

    A missing dictionary table degrades to None instead of raising.
    """
    candidates = build_candidates(merchant, description, locale_suffix)
    if not candidates:
        return None

    try:
        entries = get_visible_entries(db, user_id, scan_limit)
    except StorageUnavailable as e:
        logger.warning(f"Dictionary tier skipped: {e}")
        return None

    best = find_best_match(candidates, entries, locale_suffix)
    if best is None or best.score < min_score:
        return None

    entry = best.entry
    category = snap_category(entry.category)
    source = entry.source
    confidence = min(best.score, MAX_MATCH_CONFIDENCE)
    logger.debug(
        f"Dictionary matched {best.candidate!r} to {entry.normalized_keyword!r} "
        f"({category}) with score {best.score:.3f}"
    )

    record_hit(db, entry.id)

    return CategorizationResult(
        category=category,
        confidence=confidence,
        reason=f"matched merchant dictionary ({source})",
    )
