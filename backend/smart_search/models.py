"""
Search Data Model
Parsed tokens, confirmed chips, and the structured query they build up
"""

from dataclasses import dataclass, field, fields
from typing import Optional

from smart_search.categories import Category
from smart_search.classifier import CategorySuggestion, classify_token
from smart_search.tokenizer import tokenize


@dataclass(frozen=True)
class ConfirmedCategory:
    """The category a user picked for a token"""
    category: Category
    label: str

    def to_dict(self) -> dict:
        return {"category": self.category.value, "label": self.label}


@dataclass
class ParsedToken:
    """A token of the live input with its ranked suggestions"""
    text: str
    suggested_categories: list[CategorySuggestion] = field(default_factory=list)
    confirmed: Optional[ConfirmedCategory] = None

    @property
    def is_confirmed(self) -> bool:
        return self.confirmed is not None

    def to_dict(self) -> dict:
        return {
            "text": self.text,
            "suggestedCategories": [s.to_dict() for s in self.suggested_categories],
            "confirmed": self.confirmed.to_dict() if self.confirmed else None
        }


def parse_input(text: str) -> list[ParsedToken]:
    """Tokenize and classify the whole input; nothing carries over from a previous parse"""
    return [
        ParsedToken(text=token.text, suggested_categories=classify_token(token.text))
        for token in tokenize(text)
    ]


@dataclass
class SearchChip:
    """A confirmed token, owned by the session's chip registry"""
    id: str
    text: str
    category: Category
    label: str
    color: str

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "text": self.text,
            "category": self.category.value,
            "label": self.label,
            "color": self.color
        }


@dataclass
class StructuredQuery:
    """Nine value lists, one per category, in confirmation order"""
    ingredients: list[str] = field(default_factory=list)
    excluded_ingredients: list[str] = field(default_factory=list)
    dietary_preferences: list[str] = field(default_factory=list)
    meal_type: list[str] = field(default_factory=list)
    cuisine: list[str] = field(default_factory=list)
    cooking_method: list[str] = field(default_factory=list)
    nutrition_goals: list[str] = field(default_factory=list)
    prep_constraints: list[str] = field(default_factory=list)
    dishes: list[str] = field(default_factory=list)

    def values(self, category: Category) -> list[str]:
        """The live list backing a category"""
        return getattr(self, FIELD_BY_CATEGORY[Category(category)])

    def append(self, category: Category, value: str) -> None:
        self.values(category).append(value)

    def remove_first(self, category: Category, value: str) -> bool:
        """Drop the first occurrence of value; False if it was not there"""
        items = self.values(category)
        if value not in items:
            return False
        items.remove(value)
        return True

    def replace(self, category: Category, old: str, new: str) -> bool:
        """Swap the first occurrence of old for new at the same index"""
        items = self.values(category)
        if old not in items:
            return False
        items[items.index(old)] = new
        return True

    def is_empty(self) -> bool:
        return not any(self.values(category) for category in Category)

    def copy(self) -> "StructuredQuery":
        """Deep copy, safe to hand to history or a collaborator"""
        return StructuredQuery(**{f.name: list(getattr(self, f.name)) for f in fields(self)})

    def to_dict(self) -> dict:
        return {category.value: list(self.values(category)) for category in Category}

    @classmethod
    def from_dict(cls, data: dict) -> "StructuredQuery":
        query = cls()
        for category in Category:
            query.values(category).extend(data.get(category.value, []))
        return query


FIELD_BY_CATEGORY: dict[Category, str] = {
    Category.INGREDIENTS: "ingredients",
    Category.EXCLUDED_INGREDIENTS: "excluded_ingredients",
    Category.DIETARY_PREFERENCES: "dietary_preferences",
    Category.MEAL_TYPE: "meal_type",
    Category.CUISINE: "cuisine",
    Category.COOKING_METHOD: "cooking_method",
    Category.NUTRITION_GOALS: "nutrition_goals",
    Category.PREP_CONSTRAINTS: "prep_constraints",
    Category.DISHES: "dishes",
}
