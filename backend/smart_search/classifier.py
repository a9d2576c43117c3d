"""
Token Classifier
Scores a single token against the category dictionary and returns ranked suggestions
"""

import logging
from dataclasses import dataclass
from typing import Optional

from smart_search.categories import (
    Category,
    DICTIONARY_RULES,
    DISH_RULE,
    EXCLUSION_CONFIDENCE,
    EXCLUSION_LABEL,
    EXCLUSION_PREFIXES,
    FALLBACK_CONFIDENCE,
    FALLBACK_LABEL,
    TIME_CONSTRAINTS,
    TIME_CONSTRAINT_CONFIDENCE,
    TIME_CONSTRAINT_LABEL,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CategorySuggestion:
    """One candidate category for a token"""
    category: Category
    confidence: float
    label: str

    def to_dict(self) -> dict:
        return {
            "category": self.category.value,
            "confidence": self.confidence,
            "label": self.label
        }


def _exclusion_remainder(lowered: str) -> Optional[str]:
    """Text after a leading "no "/"without "/"avoid ", if any"""
    for prefix in EXCLUSION_PREFIXES:
        if lowered.startswith(prefix):
            remainder = lowered[len(prefix):]
            return remainder if remainder.strip() else None
    return None


def classify_token(token: str) -> list[CategorySuggestion]:
    """
    Suggest categories for a token, most confident first

    Every rule is evaluated, then the suggestions are sorted by confidence.
    The sort is stable, so equal confidences keep dictionary-scan order.
    A token nothing recognises still gets a low-confidence ingredient guess.

    Note: the tokenizer splits on whitespace, so "no dairy" never arrives
    here as one token; the exclusion rule only fires for direct callers.
    """
    lowered = token.lower()
    suggestions: list[CategorySuggestion] = []

    remainder = _exclusion_remainder(lowered)
    if remainder is not None:
        suggestions.append(CategorySuggestion(
            category=Category.EXCLUDED_INGREDIENTS,
            confidence=EXCLUSION_CONFIDENCE,
            label=EXCLUSION_LABEL.format(remainder=remainder)
        ))

    for rule in DICTIONARY_RULES:
        if lowered in rule.words:
            suggestions.append(CategorySuggestion(rule.category, rule.confidence, rule.label_for(token)))

    if any(phrase in lowered for phrase in TIME_CONSTRAINTS):
        suggestions.append(CategorySuggestion(
            category=Category.PREP_CONSTRAINTS,
            confidence=TIME_CONSTRAINT_CONFIDENCE,
            label=TIME_CONSTRAINT_LABEL.format(token=token)
        ))

    if lowered in DISH_RULE.words:
        suggestions.append(CategorySuggestion(DISH_RULE.category, DISH_RULE.confidence, DISH_RULE.label_for(token)))

    if not suggestions:
        logger.debug("No rule matched %r, falling back to ingredient", token)
        suggestions.append(CategorySuggestion(
            category=Category.INGREDIENTS,
            confidence=FALLBACK_CONFIDENCE,
            label=FALLBACK_LABEL.format(token=token)
        ))

    return sorted(suggestions, key=lambda s: s.confidence, reverse=True)
