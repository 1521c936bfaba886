from __future__ import annotations

import enum
from typing import TYPE_CHECKING

from .constants import BLOCK_TAGS, SELF_CLOSING_TAGS

if TYPE_CHECKING:
    from collections.abc import Iterable


class TagCategory(enum.IntEnum):
    INLINE = 0
    BLOCK = 1
    SELF_CLOSING = 2


def merge_categories(
    allowed: Iterable[str],
    block: Iterable[str] = (),
    inline: Iterable[str] = (),
    self_closing: Iterable[str] = (),
) -> dict[str, TagCategory]:
    """Build the category table for the allowed tags.

    Extra assignments override the built-in table. Allowed tags that appear in
    neither are treated as inline.
    """
    table: dict[str, TagCategory] = {}
    for name in allowed:
        if name in SELF_CLOSING_TAGS:
            table[name] = TagCategory.SELF_CLOSING
        elif name in BLOCK_TAGS:
            table[name] = TagCategory.BLOCK
        else:
            table[name] = TagCategory.INLINE

    for names, category in (
        (block, TagCategory.BLOCK),
        (inline, TagCategory.INLINE),
        (self_closing, TagCategory.SELF_CLOSING),
    ):
        for name in names:
            if name in table:
                table[name] = category
    return table


class TagClassifier:
    """Read-only lookup from tag name to category."""

    __slots__ = ("_categories", "_drop_content", "_non_nesting")

    def __init__(
        self,
        categories: dict[str, TagCategory],
        non_nesting: frozenset[str] = frozenset(),
        drop_content: frozenset[str] = frozenset(),
    ) -> None:
        self._categories = dict(categories)
        self._non_nesting = non_nesting
        self._drop_content = drop_content

    def classify(self, name: str) -> TagCategory | None:
        """Return the category of an allowed tag, or None if it is not allowed."""
        return self._categories.get(name)

    def is_allowed(self, name: str) -> bool:
        return name in self._categories

    def is_non_nesting(self, name: str) -> bool:
        return name in self._non_nesting

    def drops_content(self, name: str) -> bool:
        return name in self._drop_content

    def tags_in(self, category: TagCategory) -> frozenset[str]:
        return frozenset(name for name, cat in self._categories.items() if cat == category)
