"""
Static keyword rules.

First matching rule wins, so ordering matters: a rule must come before any
broader rule that shares its vocabulary (Rent before EMI before Shopping).
Keywords are plain substrings of the lowercased " description merchant "
text; a leading or trailing space in a keyword pins it to a word edge.
"""

import logging
from typing import List, Optional, Tuple

from app.schemas.categorization import CategorizationResult

logger = logging.getLogger(__name__)

KEYWORD_RULE_CONFIDENCE = 0.82

KEYWORD_RULES: List[Tuple[str, Tuple[str, ...]]] = [
    ("Rent", ("rent", "landlord", "house owner", "nobroker")),
    ("EMI", (" emi", "emi ", "loan repayment", "instalment", "installment", "bajaj finserv", "home credit")),
    ("Insurance", ("insurance", "lic of", " lic ", "policybazaar", "acko", "hdfc ergo", "icici lombard")),
    ("Investments", ("zerodha", "groww", "mutual fund", " sip ", "upstox", "kuvera", "coin by")),
    ("Bills & Utilities", (
        "electricity", "bescom", "tata power", "water bill", "gas bill", "broadband",
        "airtel", " jio ", "vodafone", " vi ", "bsnl", "recharge", "dth", "tata play", "postpaid",
    )),
    ("Fuel", ("petrol", "diesel", "fuel", "indian oil", "iocl", "hpcl", "bpcl", "shell")),
    ("Subscriptions", (
        "netflix", "spotify", "prime video", "hotstar", "youtube", "apple.com", "sonyliv", "zee5",
    )),
    ("Groceries", (
        "bigbasket", "blinkit", "zepto", "instamart", "dmart", "grocery", "grocer",
        "supermarket", "more retail", "jiomart", "kirana",
    )),
    ("Food", (
        "swiggy", "zomato", "restaurant", "cafe", "dominos", "pizza", "starbucks",
        "mcdonald", "kfc", "burger", "uber eats", "eatsure", "chaayos", "dhaba", "bakery",
    )),
    ("Transport", ("uber", " ola ", "olacabs", "rapido", "metro", "auto rickshaw", "fastag", "parking")),
    ("Travel", (
        "makemytrip", "goibibo", "irctc", "indigo", "air india", "vistara", "cleartrip",
        "oyo", "hotel", "yatra", "redbus",
    )),
    ("Health", ("pharmacy", "chemist", "apollo", "hospital", "clinic", "1mg", "pharmeasy", "diagnostic", "medical")),
    ("Education", ("school", "college", "tuition", "udemy", "coursera", "byju", "unacademy", "exam fee")),
    ("Entertainment", ("bookmyshow", "pvr", "inox", "cinema", "movie", "concert", "gaming")),
    ("Personal Care", ("salon", "barber", "spa ", "urban company", "nykaa", "parlour")),
    ("Transfers", ("neft", "imps", "rtgs", "upi transfer", "self transfer", "bank transfer")),
    ("Shopping", (
        "amazon", "flipkart", "myntra", "ajio", "meesho", "shopping", " mall", "store", "mart",
    )),
]


def build_rule_text(description: Optional[str], merchant: Optional[str]) -> str:
    """Lowercased description + merchant, padded so edge-pinned keywords match at the ends."""
    return f" {(description or '').lower()} {(merchant or '').lower()} "


def match_keyword_rule(description: Optional[str], merchant: Optional[str]) -> Optional[CategorizationResult]:
    """Return the first rule whose keyword appears in the text, or None."""
    text = build_rule_text(description, merchant)
    if not text.strip():
        return None

    for category, keywords in KEYWORD_RULES:
        for keyword in keywords:
            if keyword in text:
                logger.debug(f"Keyword {keyword!r} matched rule {category}")
                return CategorizationResult(
                    category=category,
                    confidence=KEYWORD_RULE_CONFIDENCE,
                    reason=f"matched keyword rule for {category}",
                )
    return None
