"""
Smart Search Core Module
Turns free-form search-bar text into a structured, multi-category recipe query
"""

from smart_search.categories import Category, CategoryStyle, CATEGORY_STYLES, get_style
from smart_search.tokenizer import Token, tokenize
from smart_search.classifier import CategorySuggestion, classify_token
from smart_search.models import (
    ConfirmedCategory,
    ParsedToken,
    SearchChip,
    StructuredQuery,
    parse_input,
)
from smart_search.history import SearchHistory
from smart_search.retrieval import (
    RecipePreview,
    RecipeRetriever,
    SpoonacularRetriever,
    RetrievalError,
    RateLimitError,
    APIError,
)
from smart_search.session import SearchSession

__all__ = [
    "Category",
    "CategoryStyle",
    "CATEGORY_STYLES",
    "get_style",
    "Token",
    "tokenize",
    "CategorySuggestion",
    "classify_token",
    "ConfirmedCategory",
    "ParsedToken",
    "SearchChip",
    "StructuredQuery",
    "parse_input",
    "SearchHistory",
    "RecipePreview",
    "RecipeRetriever",
    "SpoonacularRetriever",
    "RetrievalError",
    "RateLimitError",
    "APIError",
    "SearchSession",
]
