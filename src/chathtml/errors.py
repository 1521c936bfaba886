"""Centralized repair codes, messages and the configuration error type.

The sanitizer never fails on input. Every malformed construct is repaired and,
when the caller asks for it, the repair is recorded under one of the codes
below. The only exception the package raises is `ConfigurationError`, and only
while building a `SanitizeOptions` value.
"""

from __future__ import annotations


class ConfigurationError(ValueError):
    """Raised when sanitizer options are inconsistent."""


def generate_error_message(code: str, tag_name: str | None = None) -> str:
    """Generate human-readable message from a repair code.

    Args:
        code: The repair code string (kebab-case format)
        tag_name: Optional tag name to include in the message for context

    Returns:
        Human-readable message string
    """
    messages = {
        # ================================================================
        # PREPROCESSOR
        # ================================================================
        "comment-removed": "HTML comment removed",
        "truncated-tag-removed": "Unterminated tag at end of input removed",
        # ================================================================
        # ALLOWLIST
        # ================================================================
        "disallowed-tag-dropped": f"Disallowed <{tag_name}> tag dropped",
        "disallowed-tag-escaped": f"Disallowed <{tag_name}> tag escaped as text",
        "disallowed-content-dropped": f"Content of disallowed <{tag_name}> element dropped",
        # ================================================================
        # REBALANCING
        # ================================================================
        "orphan-end-tag": f"Unexpected </{tag_name}> end tag without matching start tag",
        "self-closing-end-tag": f"End tag </{tag_name}> for a self-closing element ignored",
        "end-tag-closes-open-elements": f"</{tag_name}> end tag closed unclosed children",
        "nested-non-nesting-tag": f"<{tag_name}> cannot contain another <{tag_name}>; previous one closed",
        "block-in-inline": f"Block <{tag_name}> start tag closed the enclosing inline elements",
        "expected-closing-tag-but-got-eof": f"Expected </{tag_name}> closing tag but reached end of input",
        # ================================================================
        # ATTRIBUTES
        # ================================================================
        "attribute-dropped": f"Attribute not allowed on <{tag_name}> dropped",
        "unsafe-url-replaced": f"Unsafe or invalid URL on <{tag_name}> replaced with placeholder",
    }

    # Return message or fall back to the code itself if not found
    return messages.get(code, code)
