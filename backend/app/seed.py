"""
Seed script for the global merchant dictionary.
"""

import logging

from sqlalchemy.orm import Session

from app.database import SessionLocal, init_db
from app.models import MerchantCategoryMap, SOURCE_SEED
from app.services.normalizer import normalize_text

logger = logging.getLogger(__name__)

# (merchant keyword, category, confidence)
# Keywords that contain one another (Uber / Uber Eats, Jio / JioMart) share a
# confidence so an exact match always beats the 0.99 containment score.
# Airtel is left to the keyword rules: "airtel" contains "air", all that
# remains of "Air India" after normalizing.
SEED_MERCHANTS = [
    ("Swiggy", "Food", 0.9),
    ("Zomato", "Food", 0.9),
    ("Domino's Pizza", "Food", 0.85),
    ("Starbucks", "Food", 0.85),
    ("BigBasket", "Groceries", 0.9),
    ("Blinkit", "Groceries", 0.9),
    ("Zepto", "Groceries", 0.9),
    ("JioMart", "Groceries", 0.85),
    ("DMart", "Groceries", 0.85),
    ("Uber", "Transport", 0.85),
    ("Uber Eats", "Food", 0.85),
    ("Ola Cabs", "Transport", 0.85),
    ("Rapido", "Transport", 0.85),
    ("Indian Oil", "Fuel", 0.85),
    ("Bharat Petroleum", "Fuel", 0.85),
    ("Amazon", "Shopping", 0.8),
    ("Flipkart", "Shopping", 0.85),
    ("Myntra", "Shopping", 0.85),
    ("Netflix", "Subscriptions", 0.9),
    ("Spotify", "Subscriptions", 0.9),
    ("Prime Video", "Subscriptions", 0.9),
    ("Disney+ Hotstar", "Subscriptions", 0.85),
    ("BookMyShow", "Entertainment", 0.85),
    ("Jio", "Bills & Utilities", 0.85),
    ("BESCOM", "Bills & Utilities", 0.9),
    ("Apollo Pharmacy", "Health", 0.85),
    ("PharmEasy", "Health", 0.85),
    ("MakeMyTrip", "Travel", 0.85),
    ("IRCTC", "Travel", 0.9),
    ("IndiGo", "Travel", 0.85),
    ("Zerodha", "Investments", 0.9),
    ("Groww", "Investments", 0.9),
    ("LIC of India", "Insurance", 0.85),
    ("Urban Company", "Personal Care", 0.8),
]


def seed_merchant_dictionary(db: Session) -> int:
    """
    Insert global seed entries that are not present yet.

    Returns the number of rows added.
    """
    existing = {
        keyword for (keyword,) in db.query(MerchantCategoryMap.normalized_keyword).filter(
            MerchantCategoryMap.user_id.is_(None)
        ).all()
    }

    added = 0
    for keyword, category, confidence in SEED_MERCHANTS:
        normalized = normalize_text(keyword)
        if not normalized or normalized in existing:
            continue
        db.add(MerchantCategoryMap(
            user_id=None,
            merchant_keyword=keyword,
            normalized_keyword=normalized,
            category=category,
            confidence_score=confidence,
            source=SOURCE_SEED,
            hit_count=0,
            is_active=True
        ))
        existing.add(normalized)
        added += 1

    db.commit()
    return added


def main():
    """Create tables and seed the dictionary."""
    logging.basicConfig(level=logging.INFO)
    init_db()

    db = SessionLocal()
    try:
        added = seed_merchant_dictionary(db)
        logger.info(f"Seeded {added} global merchant dictionary entries")
    except Exception as e:
        logger.error(f"Error seeding merchant dictionary: {e}")
        db.rollback()
        raise
    finally:
        db.close()


if __name__ == "__main__":
    main()
