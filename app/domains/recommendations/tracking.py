"""Last-request-wins tracking for recommendation requests

Each viewing context (user + article being read) remembers the token of its
newest request. A run whose token is no longer current must drop its
results.
"""

import itertools
from typing import Optional

ContextKey = tuple[str, Optional[str]]


class RequestTracker:
    """In-process registry of the newest request per viewing context"""

    def __init__(self) -> None:
        self._counter = itertools.count(1)
        self._latest: dict[ContextKey, int] = {}

    @staticmethod
    def key(user_id: str, current_article_id: Optional[str]) -> ContextKey:
        return (user_id, current_article_id)

    def begin(self, key: ContextKey) -> int:
        """Register a new request; earlier ones for ``key`` become stale"""
        token = next(self._counter)
        self._latest[key] = token
        return token

    def is_current(self, key: ContextKey, token: int) -> bool:
        return self._latest.get(key) == token

    def finish(self, key: ContextKey, token: int) -> None:
        if self._latest.get(key) == token:
            del self._latest[key]

    def __len__(self) -> int:
        return len(self._latest)


request_tracker = RequestTracker()
