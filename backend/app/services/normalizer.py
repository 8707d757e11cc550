"""Canonical form for merchant names and free-text descriptions."""

import re
from typing import Optional

DEFAULT_LOCALE_SUFFIX = "india"

# Corporate suffixes that carry no merchant identity
CORPORATE_SUFFIXES = frozenset({"private", "pvt", "ltd", "limited", "inc", "llp", "co"})

_SEPARATORS = re.compile(r"[.,\-_/\\]")
_OTHER_PUNCTUATION = re.compile(r"[^\w\s]")
_WHITESPACE = re.compile(r"\s+")


def normalize_text(value: Optional[str], locale_suffix: Optional[str] = DEFAULT_LOCALE_SUFFIX) -> str:
    """
    Lowercase, turn separators into spaces, drop remaining punctuation, strip
    corporate suffix tokens and the locale marker, collapse whitespace.

    "Swiggy Bangalore Pvt. Ltd" -> "swiggy bangalore"
    "Pvt. Ltd SWIGGY!!" -> "swiggy"

    Idempotent: normalize_text(normalize_text(x)) == normalize_text(x).
    """
    if not value:
        return ""

    text = _SEPARATORS.sub(" ", value.lower())
    text = _OTHER_PUNCTUATION.sub("", text)

    stop_tokens = CORPORATE_SUFFIXES
    if locale_suffix:
        stop_tokens = stop_tokens | {locale_suffix.strip().lower()}

    tokens = [token for token in _WHITESPACE.split(text) if token and token not in stop_tokens]
    return " ".join(tokens)
