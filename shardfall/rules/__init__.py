"""
Rules - Deck lists and regulation checks.
"""

from .deck import DeckItem, DeckList
from .validation import ValidationResult, validate_deck

__all__ = [
    "DeckItem",
    "DeckList",
    "ValidationResult",
    "validate_deck",
]
