"""Attribute filtering and URL normalization for retained start tags.

Each allowed tag has a fixed policy naming the attributes it may carry and
how their values are cleaned. Nothing in here raises on bad input: unusable
values are dropped, unusable URLs become the placeholder.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING
from urllib.parse import urlsplit, urlunsplit

from .constants import (
    ALLOWED_URL_SCHEMES,
    DEFAULT_URL_SCHEME,
    GLOBAL_ATTRIBUTES,
    MAX_LANGUAGE_LENGTH,
    PLACEHOLDER_URL,
)
from .entities import decode_entities

if TYPE_CHECKING:
    from collections.abc import Callable

    from .options import SanitizeOptions

    ReportCallback = Callable[[str, str], None]

_SEPARATOR_PATTERN = re.compile(r"[\t\n\f\r /]+")
_ATTR_NAME_RUN_PATTERN = re.compile(r"[^\t\n\f\r />=\"'<]+")
_ATTR_VALUE_UNQUOTED_PATTERN = re.compile(r"[^\t\n\f\r >]*")
_IDENTIFIER_UNSAFE_PATTERN = re.compile(r"[^A-Za-z0-9_-]")

_SCHEME_PATTERN = re.compile(r"[A-Za-z]+:")
# Browsers drop these anywhere in a URL before parsing it.
_URL_IGNORED_PATTERN = re.compile(r"[\t\n\r]")
_URL_UNSAFE_PATTERN = re.compile(r"[\x00-\x20\"'<>`\x7f]")
_NETWORK_SCHEMES = frozenset({"http", "https"})

_DROP = object()


def _skip_whitespace(raw: str, pos: int) -> int:
    length = len(raw)
    while pos < length and raw[pos] in " \t\n\f\r":
        pos += 1
    return pos


def parse_attributes(raw: str) -> dict[str, str | None]:
    """Parse raw attribute text into an ordered mapping.

    Keys are lowercased and the first occurrence of a key wins. Values are
    entity-decoded; a key written without `=` maps to None.
    """
    attrs: dict[str, str | None] = {}
    pos = 0
    length = len(raw)
    while pos < length:
        match = _SEPARATOR_PATTERN.match(raw, pos)
        if match:
            pos = match.end()
            continue

        match = _ATTR_NAME_RUN_PATTERN.match(raw, pos)
        if not match:
            # Stray quote or "=" with no name in front of it
            pos += 1
            continue

        name = match.group(0).lower()
        pos = _skip_whitespace(raw, match.end())
        value: str | None = None

        if pos < length and raw[pos] == "=":
            pos = _skip_whitespace(raw, pos + 1)
            if pos < length and raw[pos] in "\"'":
                quote = raw[pos]
                end = raw.find(quote, pos + 1)
                if end == -1:
                    value = raw[pos + 1 :]
                    pos = length
                else:
                    value = raw[pos + 1 : end]
                    pos = end + 1
            else:
                match = _ATTR_VALUE_UNQUOTED_PATTERN.match(raw, pos)
                value = match.group(0)
                pos = match.end()
            value = decode_entities(value)

        if name not in attrs:
            attrs[name] = value
    return attrs


def _percent_encode(match: re.Match[str]) -> str:
    return f"%{ord(match.group(0)):02X}"


def normalize_url(value: str) -> str:
    """Validate and canonicalize a link target.

    Returns the placeholder for empty values, unparseable values and schemes
    outside the allowlist.
    """
    url = _URL_IGNORED_PATTERN.sub("", value).strip()
    if not url:
        return PLACEHOLDER_URL

    if url.startswith("//"):
        url = f"{DEFAULT_URL_SCHEME}:{url}"
    elif not _SCHEME_PATTERN.match(url):
        url = f"{DEFAULT_URL_SCHEME}://{url}"

    try:
        parts = urlsplit(url)
    except ValueError:
        return PLACEHOLDER_URL

    scheme = parts.scheme.lower()
    if scheme not in ALLOWED_URL_SCHEMES:
        return PLACEHOLDER_URL
    if scheme in _NETWORK_SCHEMES:
        if not parts.netloc:
            return PLACEHOLDER_URL
    elif not parts.path:
        return PLACEHOLDER_URL

    path = parts.path
    if not parts.query:
        path = path.rstrip("/")

    normalized = urlunsplit((scheme, parts.netloc, path, parts.query, ""))
    return _URL_UNSAFE_PATTERN.sub(_percent_encode, normalized)


def _identifier(value: str | None, limit: int | None = None) -> str | object:
    cleaned = _IDENTIFIER_UNSAFE_PATTERN.sub("", value or "")
    if limit is not None:
        cleaned = cleaned[:limit]
    return cleaned or _DROP


def _link_attribute(key: str, value: str | None, options: SanitizeOptions) -> str | None | object:
    if key != "href":
        return _DROP
    return normalize_url(value or "")


def _preformatted_attribute(key: str, value: str | None, options: SanitizeOptions) -> str | None | object:
    if key != "language":
        return _DROP
    return _identifier(value, MAX_LANGUAGE_LENGTH)


def _quote_attribute(key: str, value: str | None, options: SanitizeOptions) -> str | None | object:
    if key == "collapsible" and not value and options.allow_collapsible_quotes:
        return None
    return _DROP


def _code_attribute(key: str, value: str | None, options: SanitizeOptions) -> str | None | object:
    return _DROP


def _global_attribute(key: str, value: str | None, options: SanitizeOptions) -> str | None | object:
    if key not in GLOBAL_ATTRIBUTES:
        return _DROP
    return _identifier(value)


_ATTRIBUTE_POLICIES: dict[str, Callable[[str, str | None, SanitizeOptions], str | None | object]] = {
    "a": _link_attribute,
    "pre": _preformatted_attribute,
    "blockquote": _quote_attribute,
    "code": _code_attribute,
}


def sanitize_attributes(
    tag: str,
    raw: str,
    options: SanitizeOptions,
    report: ReportCallback | None = None,
) -> dict[str, str | None]:
    """Filter raw attribute text down to what `tag` may carry.

    Args:
        tag: Lowercase tag name, already known to be allowed
        raw: Attribute text as it appeared in the start tag
        options: Active sanitizer options
        report: Optional callback receiving (code, tag) for each repair

    Returns:
        Surviving attributes in source order; None marks a bare attribute
    """
    if not raw or raw.isspace():
        return {}

    policy = _ATTRIBUTE_POLICIES.get(tag, _global_attribute)
    kept: dict[str, str | None] = {}
    for key, value in parse_attributes(raw).items():
        cleaned = policy(key, value, options)
        if cleaned is _DROP:
            if report is not None:
                report("attribute-dropped", tag)
            continue
        if report is not None and cleaned == PLACEHOLDER_URL and (value or "").strip() != PLACEHOLDER_URL:
            report("unsafe-url-replaced", tag)
        kept[key] = cleaned
    return kept
