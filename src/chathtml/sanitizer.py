"""Public sanitizer entry points."""

from __future__ import annotations

import logging
import re

from .entities import decode_entities
from .options import DEFAULT_OPTIONS, SanitizeOptions
from .preprocess import postprocess, preprocess
from .rebalancer import Rebalancer
from .tokenizer import Tokenizer
from .tokens import Repair

logger = logging.getLogger(__name__)

_LINE_BREAK_TAG_PATTERN = re.compile(r"<br\s*/?>", re.IGNORECASE)
_ANY_TAG_PATTERN = re.compile(r"<[^<>]+>")
_WHITESPACE_RUN_PATTERN = re.compile(r"\s+")


def _coerce_text(text: object) -> str:
    if text is None:
        return ""
    if isinstance(text, (bytes, bytearray, memoryview)):
        return bytes(text).decode("utf-8", errors="replace")
    return str(text)


def _collapse_whitespace(match: re.Match[str]) -> str:
    return "\n" if "\n" in match.group(0) else " "


def html_to_text(html: str) -> str:
    """Flatten already-sanitized markup to plain text.

    Line breaks become newlines, tags are removed, whitespace runs collapse
    (to a newline when the run contains one, to a space otherwise), the ends
    are trimmed and character references are decoded last.
    """
    text = _LINE_BREAK_TAG_PATTERN.sub("\n", html)
    text = _ANY_TAG_PATTERN.sub("", text)
    text = _WHITESPACE_RUN_PATTERN.sub(_collapse_whitespace, text)
    return decode_entities(text.strip())


class Sanitizer:
    """Sanitize one piece of text and keep the result and its repair log.

    With `collect_errors=True` every repair made on the way is recorded in
    `errors` as a `Repair` with its line and column in the input (after
    comment removal). Repairs made before tokenizing carry no position.
    """

    __slots__ = ("errors", "html", "options", "tokenizer")

    errors: list[Repair]
    html: str
    options: SanitizeOptions
    tokenizer: Tokenizer

    def __init__(
        self,
        text: str | bytes | None,
        *,
        options: SanitizeOptions = DEFAULT_OPTIONS,
        collect_errors: bool = False,
    ) -> None:
        self.options = options
        self.errors = []

        source = _coerce_text(text)
        report = self._record if collect_errors else None

        prepared = preprocess(source, report)
        self.tokenizer = Tokenizer(prepared)
        rebalanced = Rebalancer(options, report).run(self.tokenizer)
        self.html = postprocess(rebalanced, options)

        logger.debug(
            "Sanitized %d chars into %d chars (%d repairs recorded)",
            len(source),
            len(self.html),
            len(self.errors),
        )

    def _record(self, code: str, offset: int | None, tag_name: str | None) -> None:
        line: int | None = None
        column: int | None = None
        if offset is not None:
            line, column = self.tokenizer.line_and_column(offset)
        self.errors.append(Repair(code, line=line, column=column, tag_name=tag_name))

    def to_html(self) -> str:
        return self.html

    def to_text(self) -> str:
        return html_to_text(self.html)


def sanitize(text: str | bytes | None, options: SanitizeOptions = DEFAULT_OPTIONS) -> str:
    """Return `text` reduced to balanced, allowlisted markup with safe URLs.

    Never raises for any input, including the empty string.
    """
    return Sanitizer(text, options=options).html


def extract_plain_text(text: str | bytes | None, options: SanitizeOptions = DEFAULT_OPTIONS) -> str:
    """Sanitize `text`, then strip all markup and decode character references."""
    return html_to_text(sanitize(text, options))
