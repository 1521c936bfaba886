"""Sanitizer configuration.

`SanitizeOptions` is an immutable value validated once at construction. All
downstream passes only read from it, so one instance can be shared freely
between threads.
"""

from __future__ import annotations

import dataclasses
import enum
import re
from collections.abc import Collection
from dataclasses import dataclass, field
from typing import Any

from .classifier import TagCategory, TagClassifier, merge_categories
from .constants import ALLOWED_TAGS, DROP_CONTENT_TAGS, NON_NESTING_TAGS, SPOILER_ALIASES, SPOILER_TARGET_TAG
from .errors import ConfigurationError

_TAG_NAME_PATTERN = re.compile(r"[a-z][a-z0-9-]*")


class UnknownTagPolicy(enum.Enum):
    DROP = "drop"
    ESCAPE = "escape"


def _normalize_names(value: Collection[str] | str, field_name: str) -> frozenset[str]:
    if isinstance(value, str):
        value = (value,)
    names: set[str] = set()
    for raw in value:
        name = str(raw).strip().lower()
        if not _TAG_NAME_PATTERN.fullmatch(name):
            raise ConfigurationError(f"Invalid tag name in {field_name}: {raw!r}")
        names.add(name)
    return frozenset(names)


@dataclass(frozen=True, slots=True)
class SanitizeOptions:
    """Allowlist-driven options for one sanitize call.

    - Tags not in `allowed_tags` are dropped or escaped per `unknown_tags`.
    - `block_tags`, `inline_tags` and `self_closing_tags` assign categories
      on top of the built-in table; every name must also be allowed.
    - `non_nesting_tags` may never contain another instance of themselves.
      Names outside `allowed_tags` are ignored.
    - `drop_content_tags` are disallowed containers whose content is removed
      along with the tags when unknown tags are dropped.

    All tag names are ASCII-lowercased during normalization.
    """

    allowed_tags: Collection[str] = ALLOWED_TAGS
    unknown_tags: UnknownTagPolicy = UnknownTagPolicy.DROP
    allow_collapsible_quotes: bool = True
    block_tags: Collection[str] = ()
    inline_tags: Collection[str] = ()
    self_closing_tags: Collection[str] = ()
    non_nesting_tags: Collection[str] = NON_NESTING_TAGS
    drop_content_tags: Collection[str] = DROP_CONTENT_TAGS

    classifier: TagClassifier = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        for name in (
            "allowed_tags",
            "block_tags",
            "inline_tags",
            "self_closing_tags",
            "non_nesting_tags",
            "drop_content_tags",
        ):
            object.__setattr__(self, name, _normalize_names(getattr(self, name), name))

        if not isinstance(self.unknown_tags, UnknownTagPolicy):
            try:
                policy = UnknownTagPolicy(str(self.unknown_tags).lower())
            except ValueError:
                raise ConfigurationError(
                    f"Unknown tag policy must be 'drop' or 'escape', got {self.unknown_tags!r}"
                ) from None
            object.__setattr__(self, "unknown_tags", policy)

        object.__setattr__(self, "allow_collapsible_quotes", bool(self.allow_collapsible_quotes))

        categories = merge_categories(self.allowed_tags, self.block_tags, self.inline_tags, self.self_closing_tags)
        self._validate(categories)

        object.__setattr__(
            self,
            "classifier",
            TagClassifier(categories, self.non_nesting_tags & self.allowed_tags, self.drop_content_tags),
        )

    def _validate(self, categories: dict[str, TagCategory]) -> None:
        allowed = self.allowed_tags
        assigned: dict[str, str] = {}
        for field_name in ("block_tags", "inline_tags", "self_closing_tags"):
            for name in sorted(getattr(self, field_name)):
                if name not in allowed:
                    raise ConfigurationError(f"{field_name} names <{name}>, which is not in allowed_tags")
                if name in assigned:
                    raise ConfigurationError(f"<{name}> is listed in both {assigned[name]} and {field_name}")
                assigned[name] = field_name

        overlap = sorted(self.drop_content_tags & allowed)
        if overlap:
            raise ConfigurationError(f"drop_content_tags overlaps allowed_tags: {', '.join(overlap)}")

        if allowed & SPOILER_ALIASES and SPOILER_TARGET_TAG not in allowed:
            raise ConfigurationError(f"Spoiler aliases are rewritten to <{SPOILER_TARGET_TAG}>, which must be allowed")

        for alias in sorted(allowed & SPOILER_ALIASES):
            if categories[alias] != categories[SPOILER_TARGET_TAG]:
                raise ConfigurationError(
                    f"<{alias}> is rewritten to <{SPOILER_TARGET_TAG}> and must share its category, "
                    f"got {categories[alias].name} and {categories[SPOILER_TARGET_TAG].name}"
                )

    def replace(self, **changes: Any) -> SanitizeOptions:
        """Return a copy with `changes` applied. The copy is validated again."""
        return dataclasses.replace(self, **changes)


DEFAULT_OPTIONS: SanitizeOptions = SanitizeOptions()
