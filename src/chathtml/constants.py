"""Built-in tag tables and URL policy constants.

These describe the markup subset accepted by the chat renderer. Everything is
immutable so the tables can be shared between concurrent sanitize calls.
"""

from __future__ import annotations

# Tags accepted by the renderer. "spoiler" and "tg-spoiler" are aliases that
# the postprocessor rewrites to a styled span, so "span" must stay allowed.
ALLOWED_TAGS: frozenset[str] = frozenset(
    {
        "a",
        "b",
        "i",
        "u",
        "s",
        "code",
        "pre",
        "br",
        "blockquote",
        "spoiler",
        "tg-spoiler",
        "span",
    }
)

# Allowed tags in neither set are inline.
BLOCK_TAGS: frozenset[str] = frozenset({"pre", "blockquote"})

SELF_CLOSING_TAGS: frozenset[str] = frozenset({"br"})

# A tag in this set can never contain another instance of itself.
NON_NESTING_TAGS: frozenset[str] = frozenset({"a"})

# Disallowed containers whose text payload is discarded together with the tags.
DROP_CONTENT_TAGS: frozenset[str] = frozenset({"script", "style"})

SPOILER_ALIASES: frozenset[str] = frozenset({"spoiler", "tg-spoiler"})
SPOILER_TARGET_TAG = "span"
SPOILER_CLASS = "spoiler"

ALLOWED_URL_SCHEMES: frozenset[str] = frozenset({"http", "https", "mailto", "tel"})
DEFAULT_URL_SCHEME = "https"
PLACEHOLDER_URL = "#"

# Longest value kept for <pre language="...">.
MAX_LANGUAGE_LENGTH = 20

GLOBAL_ATTRIBUTES: tuple[str, ...] = ("id", "class")
