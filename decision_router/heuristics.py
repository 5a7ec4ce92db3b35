"""Natural-language recovery of a Decision.

Used when a classifier ignores the JSON instruction and answers in prose,
e.g. "This is a CustomerService request, 85% confident, because the user
wants a refund."  Each rule table is ordered: the first match wins.
"""

import re

from loguru import logger

from decision_router.models import Category, Decision

# Confidence used when the text names a category but no usable number.
DEFAULT_CONFIDENCE = 0.75

INFERRED_REASONING = "Extracted from natural language response using manual parsing"

# Literal category names first, topical keywords after.
CATEGORY_RULES: list[tuple[re.Pattern[str], Category]] = [
    (re.compile(r"customer ?service"), Category.CUSTOMER_SERVICE),
    (re.compile(r"technical ?support"), Category.TECHNICAL_SUPPORT),
    (re.compile(r"general ?inquiry"), Category.GENERAL_INQUIRY),
    (re.compile(r"escalation"), Category.ESCALATION),
    (re.compile(r"billing|refund|subscription"), Category.CUSTOMER_SERVICE),
    (re.compile(r"bug|crash|technical"), Category.TECHNICAL_SUPPORT),
    (re.compile(r"angry|complaint|unacceptable"), Category.ESCALATION),
]

_PERCENT_RE = re.compile(r"(\d+(?:\.\d+)?)\s*(?:%|percent)", re.IGNORECASE)
_DECIMAL_RE = re.compile(r"(?:confidence|confident).*?(\d\.\d+)", re.IGNORECASE)

REASONING_PATTERNS: list[re.Pattern[str]] = [
    re.compile(p, re.IGNORECASE | re.MULTILINE)
    for p in (
        r"because\s+(.+?)(?:[.!?]|$)",
        r"reason:\s*(.+?)(?:[.!?]|$)",
        r"reasoning:\s*(.+?)(?:[.!?]|$)",
        r"since\s+(.+?)(?:[.!?]|$)",
    )
]


def category_from_text(text: str) -> Category | None:
    lowered = text.lower()
    for pattern, category in CATEGORY_RULES:
        if pattern.search(lowered):
            return category
    return None


def confidence_from_text(text: str) -> float:
    """Percentages win over "confidence 0.NN"; out-of-range values are ignored."""
    for match in _PERCENT_RE.finditer(text):
        value = float(match.group(1)) / 100.0
        if 0.0 <= value <= 1.0:
            return value
    for match in _DECIMAL_RE.finditer(text):
        value = float(match.group(1))
        if 0.0 <= value <= 1.0:
            return value
    return DEFAULT_CONFIDENCE


def reasoning_from_text(text: str) -> str:
    for pattern in REASONING_PATTERNS:
        match = pattern.search(text)
        if match:
            return match.group(1).strip()
    return INFERRED_REASONING


def recover(text: str) -> Decision | None:
    """Build a Decision from prose, or None when no category can be found."""
    category = category_from_text(text)
    if category is None:
        logger.debug("Could not extract category from text")
        return None

    confidence = confidence_from_text(text)
    reasoning = reasoning_from_text(text)
    logger.debug(f"Manual parsing result - category: {category.value}, confidence: {confidence}")
    return Decision(category=category, confidence=confidence, reasoning=reasoning)
