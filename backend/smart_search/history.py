"""
Search History
Bounded, most-recent-first log of executed structured queries
"""

from config import HISTORY_LIMIT
from smart_search.models import StructuredQuery


class SearchHistory:
    """Keeps the last `limit` executed queries, newest first"""

    def __init__(self, limit: int = HISTORY_LIMIT):
        self.limit = limit
        self._entries: list[StructuredQuery] = []

    def add(self, query: StructuredQuery) -> None:
        """Snapshot the query at the front, evicting the oldest past the limit"""
        self._entries = [query.copy(), *self._entries][:self.limit]

    def clear(self) -> None:
        self._entries = []

    @property
    def entries(self) -> list[StructuredQuery]:
        return [entry.copy() for entry in self._entries]

    def __len__(self) -> int:
        return len(self._entries)

    def to_list(self) -> list[dict]:
        return [entry.to_dict() for entry in self._entries]
