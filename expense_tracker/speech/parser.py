"""
Voice Transcript Parser

Turns a spoken sentence such as "I spent $25 on lunch" into a suggested
transaction: an amount, a category guess and a cleaned-up description.

DESIGN DECISION: Rules are ORDERED and the first hit wins.
- Amount patterns are tried in sequence; later patterns never override
  an earlier match, even if the utterance holds several numbers.
- Categories are checked in declaration order, so a transcript that
  mentions both "lunch" and "uber" is food.

IMPORTANT: The parser only suggests. It never checks that the amount is
plausible or that the category fits; the user confirms before anything
is stored.
"""

import re
from decimal import Decimal
from typing import Optional

from expense_tracker.log import get_logger
from expense_tracker.models.transaction import Category, VoiceParseResult


logger = get_logger(__name__)

_NUMBER = r"(\d+(?:\.\d{2})?)"

# Matched against the lower-cased transcript, in this order
AMOUNT_PATTERNS: list[re.Pattern] = [
    re.compile(r"\$" + _NUMBER),
    re.compile(_NUMBER + r" dollars?"),
    re.compile(_NUMBER + r" bucks?"),
    re.compile(r"spent " + _NUMBER),
    re.compile(r"cost " + _NUMBER),
    re.compile(_NUMBER + r" on"),
    re.compile(r"for " + _NUMBER),
]

# Substring keywords per category; dict order is match priority
CATEGORY_KEYWORDS: dict[Category, tuple[str, ...]] = {
    Category.FOOD: (
        "food", "restaurant", "lunch", "dinner", "breakfast", "coffee",
        "snack", "grocery", "groceries", "pizza", "burger", "meal",
    ),
    Category.TRANSPORTATION: (
        "gas", "fuel", "uber", "lyft", "taxi", "bus", "train", "subway",
        "parking", "car", "transportation",
    ),
    Category.ENTERTAINMENT: (
        "movie", "cinema", "concert", "game", "gaming", "netflix",
        "spotify", "entertainment", "fun", "party",
    ),
    Category.UTILITIES: (
        "electricity", "water", "gas bill", "internet", "phone",
        "utilities", "bill",
    ),
    Category.HEALTHCARE: (
        "doctor", "hospital", "medicine", "pharmacy", "health", "medical",
        "dentist",
    ),
    Category.SHOPPING: (
        "clothes", "shirt", "shoes", "shopping", "amazon", "store", "mall",
        "purchase",
    ),
    Category.EDUCATION: (
        "school", "course", "book", "education", "learning", "university",
        "college",
    ),
    Category.TRAVEL: (
        "hotel", "flight", "vacation", "trip", "travel", "booking", "airbnb",
    ),
    Category.HOUSING: ("rent", "mortgage", "house", "apartment", "home", "housing"),
    Category.INSURANCE: ("insurance", "premium", "policy"),
    Category.SAVINGS: ("save", "saving", "savings", "deposit"),
    Category.INVESTMENT: ("stock", "investment", "portfolio", "trading"),
    Category.INCOME: ("salary", "income", "paycheck", "earned", "bonus"),
    Category.OTHER: ("other", "miscellaneous", "misc"),
}

_MONEY = re.compile(r"\$?\d+(?:\.\d{2})?(?:\s*dollars?|\s*bucks?)?", re.IGNORECASE)
_LEADING_VERB = re.compile(
    r"^(?:i\s+)?(?:spent|paid|bought|purchased|cost)\s*", re.IGNORECASE
)
# Whole words only, so "McDonald's" keeps its "on"
_CONNECTORS = re.compile(r"\s*\b(?:on|for)\b\s*", re.IGNORECASE)
_WHITESPACE = re.compile(r"\s+")


class VoiceTextParser:
    """Stateless parser; parse() is a pure function of its arguments."""

    def extract_amount(self, text: str) -> Optional[Decimal]:
        lowered = text.lower()
        for pattern in AMOUNT_PATTERNS:
            match = pattern.search(lowered)
            if match:
                return Decimal(match.group(1))
        return None

    def extract_category(self, text: str) -> Optional[Category]:
        lowered = text.lower()
        for category, keywords in CATEGORY_KEYWORDS.items():
            if any(keyword in lowered for keyword in keywords):
                return category
        return None

    def clean_description(self, text: str, amount: Optional[Decimal]) -> str:
        """
        Strip money, a leading spending verb and connector words.

        Falls back to the original text if nothing is left.
        """
        description = text
        if amount:
            description = _MONEY.sub("", description).strip()

        description = _LEADING_VERB.sub("", description).strip()
        description = _CONNECTORS.sub(" ", description)
        description = _WHITESPACE.sub(" ", description).strip()

        return description or text

    def parse(self, transcript: str, confidence: float) -> VoiceParseResult:
        amount = self.extract_amount(transcript)
        category = self.extract_category(transcript)

        result = VoiceParseResult(
            amount=amount,
            description=self.clean_description(transcript, amount),
            category=category,
            confidence=confidence,
            raw_text=transcript,
        )

        logger.debug(
            "voice_transcript_parsed",
            has_amount=amount is not None,
            category=category.value if category else None,
        )
        return result
