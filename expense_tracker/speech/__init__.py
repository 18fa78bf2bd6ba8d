"""
Speech Package

Parsing of voice transcripts into suggested transactions. Capturing the
audio and producing the transcript is left to the front end.
"""

from expense_tracker.speech.parser import (
    AMOUNT_PATTERNS,
    CATEGORY_KEYWORDS,
    VoiceTextParser,
)

__all__ = [
    "AMOUNT_PATTERNS",
    "CATEGORY_KEYWORDS",
    "VoiceTextParser",
]
