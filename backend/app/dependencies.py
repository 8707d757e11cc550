"""
FastAPI dependencies.
"""

from functools import lru_cache

from fastapi import Depends
from sqlalchemy.orm import Session

from app.config import CategorizationConfig, settings
from app.database import get_db
from app.services.categorization_service import CategorizationEngine, build_categorization_engine


@lru_cache
def get_categorization_config() -> CategorizationConfig:
    """Engine configuration, read from settings once per process."""
    return CategorizationConfig.from_settings(settings)


def get_categorization_engine(
    db: Session = Depends(get_db),
    config: CategorizationConfig = Depends(get_categorization_config)
) -> CategorizationEngine:
    return build_categorization_engine(db, config)
