"""
Deck Validation - Regulation checks for deck lists.

Validates that:
1. The deck size is within the regulation bounds
2. No archetype appears more often than allowed
3. Every entry exists in the catalog and is not a token
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from ..engine_core.errors import DeckValidationError

if TYPE_CHECKING:
    from ..catalog.registry import Catalog
    from ..engine_core.config import Regulation
    from .deck import DeckList


@dataclass
class ValidationResult:
    """Result of validation, with errors and warnings."""
    valid: bool
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    def raise_for_errors(self):
        if not self.valid:
            raise DeckValidationError(self.errors)


def validate_deck(deck: DeckList, regulation: Regulation, catalog: Catalog | None = None) -> ValidationResult:
    errors: list[str] = []
    warnings: list[str] = []

    size = len(deck)
    if size < regulation.min_deck_size:
        errors.append(f"deck has {size} cards, minimum is {regulation.min_deck_size}")
    if size > regulation.max_deck_size:
        errors.append(f"deck has {size} cards, maximum is {regulation.max_deck_size}")

    for item in deck:
        if item.count <= 0:
            errors.append(f"{item.archetype_id}: count must be positive")
        if item.count > regulation.max_same_cards:
            errors.append(
                f"{item.archetype_id}: {item.count} copies, maximum is {regulation.max_same_cards}"
            )
        if catalog is not None:
            archetype = catalog.find(item.archetype_id)
            if archetype is None:
                errors.append(f"{item.archetype_id}: unknown card")
            elif archetype.attribute.is_token:
                errors.append(f"{archetype.name}: tokens cannot be put in a deck")

    if size > regulation.initial_hand_size and size - regulation.initial_hand_size < 5:
        warnings.append("deck will run out after very few turns")

    return ValidationResult(valid=not errors, errors=errors, warnings=warnings)
