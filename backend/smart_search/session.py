"""
Search Session
Live-input parse state, the chip registry, and the structured query it keeps in sync
"""

import logging
import time
import uuid
from collections import Counter
from datetime import datetime
from typing import Optional

from smart_search.categories import Category, get_style
from smart_search.history import SearchHistory
from smart_search.models import (
    ConfirmedCategory,
    ParsedToken,
    SearchChip,
    StructuredQuery,
    parse_input,
)
from smart_search.retrieval import RecipeRetriever

logger = logging.getLogger(__name__)


def new_chip_id(category: Category) -> str:
    """Category, millisecond timestamp and a random suffix"""
    return f"{category.value}-{int(time.time() * 1000)}-{uuid.uuid4().hex[:8]}"


class SearchSession:
    """
    All state behind one search bar

    Every operation here is synchronous and total: unknown token indexes,
    unknown chip ids and blank edits are ignored rather than raised. The
    only suspension point is `execute`, which hands a copy of the query to
    the retriever.
    """

    def __init__(
        self,
        retriever: Optional[RecipeRetriever] = None,
        history: Optional[SearchHistory] = None
    ):
        self.retriever = retriever
        self.history = history if history is not None else SearchHistory()

        self.current_input = ""
        self.parsed_tokens: list[ParsedToken] = []
        self.chips: list[SearchChip] = []
        self.query = StructuredQuery()

        self.show_suggestions = False
        self.active_token_index: Optional[int] = None
        self.is_loading = False
        self.last_search_timestamp: Optional[datetime] = None

    # ========================================================================
    # LIVE INPUT
    # ========================================================================

    def set_input(self, text: str) -> None:
        """Store the live input and re-parse it, or drop the parse if it is blank"""
        self.current_input = text
        if text.strip():
            self.parse(text)
        else:
            self.parsed_tokens = []
            self.show_suggestions = False

    def parse(self, text: str) -> None:
        """Rebuild the token list from scratch; earlier confirmations are not kept"""
        self.parsed_tokens = parse_input(text)
        self._refresh_suggestions()
        logger.debug("Parsed %d tokens from %r", len(self.parsed_tokens), text)

    def _refresh_suggestions(self) -> None:
        self.show_suggestions = any(not token.is_confirmed for token in self.parsed_tokens)

    def set_show_suggestions(self, show: bool) -> None:
        self.show_suggestions = show

    def set_active_token_index(self, index: Optional[int]) -> None:
        self.active_token_index = index

    # ========================================================================
    # CHIP REGISTRY
    # ========================================================================

    def confirm(self, token_index: int, category: Category, label: str) -> Optional[SearchChip]:
        """
        Confirm a category for a token of the live input

        Marks the token, creates a chip and appends the token text to the
        matching query list. Returns the chip, or None for an index outside
        the current parse.
        """
        category = Category(category)
        if not 0 <= token_index < len(self.parsed_tokens):
            logger.debug("Ignoring confirm for token index %s", token_index)
            return None

        token = self.parsed_tokens[token_index]
        chip = SearchChip(
            id=new_chip_id(category),
            text=token.text,
            category=category,
            label=label,
            color=get_style(category).color
        )
        token.confirmed = ConfirmedCategory(category, label)
        self.chips.append(chip)
        self.query.append(category, token.text)
        self._refresh_suggestions()

        logger.debug("Confirmed %r as %s", token.text, category.value)
        return chip

    def confirm_best(self) -> list[SearchChip]:
        """Confirm every unconfirmed token with its top suggestion, then clear the input"""
        chips = []
        for index, token in enumerate(self.parsed_tokens):
            if token.is_confirmed or not token.suggested_categories:
                continue
            best = token.suggested_categories[0]
            chips.append(self.confirm(index, best.category, best.label))
        self.set_input("")
        return chips

    def get_chip(self, chip_id: str) -> Optional[SearchChip]:
        return next((chip for chip in self.chips if chip.id == chip_id), None)

    def remove_chip(self, chip_id: str) -> bool:
        """Delete a chip and the first matching value in its category list"""
        chip = self.get_chip(chip_id)
        if chip is None:
            logger.debug("Ignoring remove for unknown chip %s", chip_id)
            return False

        self.chips.remove(chip)
        self.query.remove_first(chip.category, chip.text)
        logger.debug("Removed chip %s (%r)", chip_id, chip.text)
        return True

    def edit_chip(self, chip_id: str, new_text: str) -> bool:
        """Change a chip's text, replacing its query value in place"""
        chip = self.get_chip(chip_id)
        new_text = new_text.strip()
        if chip is None or not new_text or new_text == chip.text:
            return False

        self.query.replace(chip.category, chip.text, new_text)
        chip.text = new_text
        logger.debug("Edited chip %s to %r", chip_id, new_text)
        return True

    def clear(self) -> None:
        """Drop chips, query, live input and parse; history is kept"""
        self.current_input = ""
        self.parsed_tokens = []
        self.chips = []
        self.query = StructuredQuery()
        self.show_suggestions = False
        self.active_token_index = None

    def chips_match_query(self) -> bool:
        """True when chip texts and query values agree category by category"""
        for category in Category:
            chip_texts = Counter(chip.text for chip in self.chips if chip.category == category)
            if chip_texts != Counter(self.query.values(category)):
                return False
        return True

    # ========================================================================
    # SEARCH
    # ========================================================================

    def add_to_history(self, query: StructuredQuery) -> None:
        self.history.add(query)
        self.last_search_timestamp = datetime.now()

    def clear_history(self) -> None:
        self.history.clear()

    def set_loading(self, loading: bool) -> None:
        self.is_loading = loading

    async def execute(self, retriever: Optional[RecipeRetriever] = None) -> list:
        """
        Log the current query and hand a copy of it to the retriever

        An all-empty query is neither logged nor sent. `is_loading` is reset
        once the retriever settles, whether it returned or raised; retriever
        errors propagate to the caller.
        """
        if self.query.is_empty():
            logger.debug("Skipping search with an empty query")
            return []

        snapshot = self.query.copy()
        self.add_to_history(snapshot)
        logger.info("Executing search with query: %s", snapshot.to_dict())

        retriever = retriever or self.retriever
        if retriever is None:
            return []

        self.set_loading(True)
        try:
            return await retriever.search(snapshot)
        finally:
            self.set_loading(False)

    def snapshot(self) -> dict:
        """Read-only view of the whole session for the presentation layer"""
        return {
            "currentInput": self.current_input,
            "parsedTokens": [token.to_dict() for token in self.parsed_tokens],
            "searchChips": [chip.to_dict() for chip in self.chips],
            "structuredQuery": self.query.to_dict(),
            "showSuggestions": self.show_suggestions,
            "activeTokenIndex": self.active_token_index,
            "isLoading": self.is_loading,
            "searchHistory": self.history.to_list(),
            "lastSearchTimestamp": (
                self.last_search_timestamp.isoformat() if self.last_search_timestamp else None
            )
        }
