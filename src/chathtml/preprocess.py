"""Text passes that run before tokenizing and after rebalancing."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from .classifier import TagCategory
from .constants import SPOILER_ALIASES, SPOILER_CLASS, SPOILER_TARGET_TAG

if TYPE_CHECKING:
    from collections.abc import Callable

    from .options import SanitizeOptions

    ReportCallback = Callable[[str, int | None, str | None], None]

# Only "<" followed by what could start a tag, comment or closer counts as truncated
_TAG_OPENING_PATTERN = re.compile(r"<[A-Za-z/!]")
_LINE_BREAK_PATTERN = re.compile(r"<br\s*/?>", re.IGNORECASE)
_EMITTED_LINE_BREAK_PATTERN = re.compile(r"<br(?:[\s/][^<>]*)?>", re.IGNORECASE)
_SPOILER_PATTERN = re.compile(r"<(/?)(?:tg-)?spoiler(?:\s[^<>]*)?>", re.IGNORECASE)

_SPOILER_START = f'<{SPOILER_TARGET_TAG} class="{SPOILER_CLASS}">'
_SPOILER_END = f"</{SPOILER_TARGET_TAG}>"


def _remove_comments(text: str, report: ReportCallback | None) -> str:
    # Manual scan keeps this linear on inputs full of unterminated "<!--"
    if "<!--" not in text:
        return text
    parts: list[str] = []
    pos = 0
    while True:
        start = text.find("<!--", pos)
        if start == -1:
            break
        end = text.find("-->", start + 4)
        if end == -1:
            break
        parts.append(text[pos:start])
        if report is not None:
            report("comment-removed", None, None)
        pos = end + 3
    parts.append(text[pos:])
    return "".join(parts)


def _remove_trailing_tag(text: str, report: ReportCallback | None) -> str:
    match = _TAG_OPENING_PATTERN.search(text, text.rfind(">") + 1)
    if match is None:
        return text
    cut = match.start()
    if report is not None:
        report("truncated-tag-removed", None, None)
    return text[:cut]


def preprocess(text: str, report: ReportCallback | None = None) -> str:
    """Strip comments and a truncated trailing tag, then canonicalize <br>.

    Total over all strings; the empty string maps to itself.
    """
    if not text:
        return ""
    text = _remove_comments(text, report)
    text = _remove_trailing_tag(text, report)
    if "<" in text:
        text = _LINE_BREAK_PATTERN.sub("<br>", text)
    return text


def _spoiler_replacement(match: re.Match[str]) -> str:
    return _SPOILER_END if match.group(1) else _SPOILER_START


def _drop_line_breaks_before_closer(match: re.Match[str]) -> str:
    # A run of line breaks is matched whole, with the closer when one follows
    closer = match.group(1)
    return match.group(0) if closer is None else closer


def postprocess(text: str, options: SanitizeOptions) -> str:
    """Cosmetic fix-ups on rebalanced output.

    - spoiler aliases become the renderer's styled span,
    - every line break is spelled `<br>`,
    - line breaks directly before a block closer are removed.
    """
    if "<" not in text:
        return text

    if options.allowed_tags & SPOILER_ALIASES:
        text = _SPOILER_PATTERN.sub(_spoiler_replacement, text)

    text = _EMITTED_LINE_BREAK_PATTERN.sub("<br>", text)

    block_tags = options.classifier.tags_in(TagCategory.BLOCK)
    if block_tags:
        alternatives = "|".join(re.escape(name) for name in sorted(block_tags))
        text = re.sub(f"(?:<br>)+(</(?:{alternatives})>)?", _drop_line_breaks_before_closer, text)
    return text
