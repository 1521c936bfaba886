"""Character reference decoding and escaping.

Decoding understands a small fixed table of named references plus decimal
(&#60;) and hexadecimal (&#x3C;) numeric references. A reference must end with
a semicolon; anything unrecognized is left in the text unchanged.
"""

from __future__ import annotations

import re

NAMED_ENTITIES: dict[str, str] = {
    "lt": "<",
    "gt": ">",
    "amp": "&",
    "quot": '"',
    "apos": "'",
    "nbsp": "\u00a0",
    "ndash": "\u2013",
    "mdash": "\u2014",
    "hellip": "\u2026",
    "laquo": "\u00ab",
    "raquo": "\u00bb",
    "copy": "\u00a9",
    "reg": "\u00ae",
    "trade": "\u2122",
}

_HEX_DIGITS = "0123456789abcdefABCDEF"
_MAX_NUMERIC_DIGITS = 8

# An ampersand that does not start a character reference.
_STRAY_AMPERSAND_PATTERN = re.compile(r"&(?!#[0-9]+;|#[xX][0-9a-fA-F]+;|[A-Za-z][A-Za-z0-9]*;)")


def decode_numeric_entity(text: str, is_hex: bool = False) -> str | None:
    """Decode the numeric part of a reference like &#60; or &#x3C;.

    Args:
        text: The numeric part (without &# or ;)
        is_hex: Whether this is hexadecimal (&#x) or decimal (&#)

    Returns:
        The decoded character, or None if the code point is not a valid
        character (zero, a surrogate, or beyond U+10FFFF)
    """
    base = 16 if is_hex else 10
    codepoint = int(text, base)

    if codepoint == 0 or codepoint > 0x10FFFF:
        return None
    if 0xD800 <= codepoint <= 0xDFFF:  # Surrogate range
        return None

    return chr(codepoint)


def decode_entities(text: str) -> str:
    """Decode the character references in text.

    Args:
        text: Input text potentially containing references

    Returns:
        Text with known references decoded and everything else untouched
    """
    if "&" not in text:
        return text

    result: list[str] = []
    i = 0
    length = len(text)
    while i < length:
        next_amp = text.find("&", i)
        if next_amp == -1:
            result.append(text[i:])
            break

        if next_amp > i:
            result.append(text[i:next_amp])

        i = next_amp
        j = i + 1

        if j < length and text[j] == "#":
            j += 1
            is_hex = False
            if j < length and text[j] in "xX":
                is_hex = True
                j += 1

            digit_start = j
            if is_hex:
                while j < length and text[j] in _HEX_DIGITS:
                    j += 1
            else:
                while j < length and text[j].isascii() and text[j].isdigit():
                    j += 1

            digit_text = text[digit_start:j]
            # Long digit runs can't name a valid code point and would make int() slow
            if digit_text and len(digit_text) <= _MAX_NUMERIC_DIGITS and j < length and text[j] == ";":
                decoded = decode_numeric_entity(digit_text, is_hex=is_hex)
                if decoded is not None:
                    result.append(decoded)
                    i = j + 1
                    continue

            # Invalid numeric reference, keep the ampersand and move on
            result.append("&")
            i += 1
            continue

        while j < length and text[j].isascii() and text[j].isalnum():
            j += 1

        entity_name = text[i + 1 : j]
        if entity_name and j < length and text[j] == ";" and entity_name in NAMED_ENTITIES:
            result.append(NAMED_ENTITIES[entity_name])
            i = j + 1
            continue

        result.append("&")
        i += 1

    return "".join(result)


def escape(text: str) -> str:
    """Escape the five reserved characters. Ampersands go first."""
    return (
        text.replace("&", "&amp;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
        .replace('"', "&quot;")
        .replace("'", "&#39;")
    )


def escape_stray(text: str) -> str:
    """Escape angle brackets and bare ampersands, keeping existing references.

    Applying this twice gives the same result as applying it once.
    """
    if "&" in text:
        text = _STRAY_AMPERSAND_PATTERN.sub("&amp;", text)
    return text.replace("<", "&lt;").replace(">", "&gt;")
