"""Data models for Flash News Bot."""

from dataclasses import dataclass
from typing import Any


def is_valid_id(item_id: Any) -> bool:
    """Ids are non-empty strings or integers, never bools."""
    if not item_id or isinstance(item_id, bool):
        return False
    return isinstance(item_id, (str, int))


@dataclass
class NewsItem:
    """Represents a single flash news entry."""

    id: str | int
    title: str | None = None
    content: str | None = None
    level: Any = None

    @property
    def display_text(self) -> str:
        return self.title or self.content or ""

    @property
    def is_important(self) -> bool:
        # bool is an int subclass; a JSON true is not a level
        if isinstance(self.level, bool) or not isinstance(self.level, (int, float)):
            return False
        return self.level > 0

    @classmethod
    def from_raw(cls, entry: Any) -> "NewsItem | None":
        """Build a NewsItem from a raw feed entry.

        Args:
            entry: One element of the feed news list

        Returns:
            NewsItem, or None when the entry is not an object or lacks a usable id
        """
        if not isinstance(entry, dict):
            return None

        item_id = entry.get("id")
        if not is_valid_id(item_id):
            return None

        title = entry.get("title")
        content = entry.get("content")
        return cls(
            id=item_id,
            title=title if isinstance(title, str) else None,
            content=content if isinstance(content, str) else None,
            level=entry.get("level"),
        )
