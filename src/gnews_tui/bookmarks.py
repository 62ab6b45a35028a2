from __future__ import annotations

import json
import logging
import threading
from typing import Iterable, List, Set

from .config import BOOKMARKS_KEY
from .datamodels import Bookmark
from .errors import StorageDecodeFailed

logger = logging.getLogger("gnews")


class BookmarkStore:
    """The bookmark set, persisted as one JSON array under a single preferences key.

    Mutations are read-modify-write cycles over the whole array and are
    serialized by an instance lock, so concurrent ``add``/``remove`` calls
    on the same store never lose each other's changes.
    """

    def __init__(self, prefs, key: str = BOOKMARKS_KEY):
        self.prefs = prefs
        self.key = key
        self._lock = threading.RLock()

    def load_all(self) -> List[Bookmark]:
        """Return every stored bookmark in insertion order; empty when nothing is stored."""
        raw = self.prefs.get_string(self.key)
        if not raw:
            return []
        try:
            data = json.loads(raw)
            if not isinstance(data, list):
                raise ValueError("bookmark payload is not a JSON array")
            bookmarks = []
            for item in data:
                if not isinstance(item, dict):
                    raise ValueError(f"bookmark entry is not a JSON object: {item!r}")
                bookmarks.append(Bookmark.from_dict(item))
            return bookmarks
        except ValueError as e:
            # json.JSONDecodeError is a ValueError
            logger.error("Failed to decode bookmarks under key %r: %s", self.key, e)
            raise StorageDecodeFailed(f"Stored bookmarks are unreadable: {e}") from e

    def save_all(self, bookmarks: Iterable[Bookmark]) -> None:
        """Replace the stored set; repeated urls keep their first entry."""
        unique: List[Bookmark] = []
        seen: Set[str] = set()
        for bookmark in bookmarks:
            if bookmark.url not in seen:
                seen.add(bookmark.url)
                unique.append(bookmark)
        payload = json.dumps([b.to_dict() for b in unique])
        with self._lock:
            self.prefs.put_string(self.key, payload)
        logger.debug("Saved bookmarks under key %r", self.key)

    def add(self, bookmark: Bookmark) -> bool:
        with self._lock:
            bookmarks = self.load_all()
            if any(b.url == bookmark.url for b in bookmarks):
                return False
            bookmarks.append(bookmark)
            self.save_all(bookmarks)
        logger.info("Bookmarked %s", bookmark.url)
        return True

    def remove(self, bookmark: Bookmark) -> bool:
        with self._lock:
            bookmarks = self.load_all()
            remaining = [b for b in bookmarks if b.url != bookmark.url]
            if len(remaining) == len(bookmarks):
                return False
            self.save_all(remaining)
        logger.info("Removed bookmark %s", bookmark.url)
        return True

    def contains(self, bookmark: Bookmark) -> bool:
        return bookmark.url in self.urls()

    def toggle(self, bookmark: Bookmark) -> bool:
        """Add the bookmark if absent, otherwise remove it. Returns the new state."""
        with self._lock:
            if self.remove(bookmark):
                return False
            self.add(bookmark)
            return True

    def urls(self) -> Set[str]:
        return {b.url for b in self.load_all()}

