"""Stack machine that turns a token stream into balanced, allowlisted markup.

Malformed input is repaired rather than rejected:

- a closer pops every element opened after its matching opener,
- a closer with no opener on the stack is discarded,
- a non-nesting tag closes its earlier open instance first,
- a block tag closes every inline element it would otherwise sit inside,
- whatever is still open at the end of input is closed top-down.

The output therefore never contains crossing or unclosed tag pairs.
"""

from __future__ import annotations

from collections import Counter
from typing import TYPE_CHECKING

from .attributes import sanitize_attributes
from .classifier import TagCategory
from .entities import escape, escape_stray
from .options import UnknownTagPolicy
from .serialize import serialize_end_tag, serialize_start_tag
from .tokens import StackEntry, TagToken, TextToken

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Iterator

    from .classifier import TagClassifier
    from .options import SanitizeOptions

    ReportCallback = Callable[[str, int | None, str | None], None]


class Rebalancer:
    __slots__ = ("classifier", "inline_positions", "open_counts", "open_elements", "options", "output", "report")

    classifier: TagClassifier
    inline_positions: list[int]
    open_counts: Counter[str]
    open_elements: list[StackEntry]
    options: SanitizeOptions
    output: list[str]
    report: ReportCallback | None

    def __init__(self, options: SanitizeOptions, report: ReportCallback | None = None) -> None:
        self.options = options
        self.classifier = options.classifier
        self.report = report
        self._reset()

    def _reset(self) -> None:
        self.open_elements = []
        # Kept in step with open_elements by _push_element and _pop_element
        self.open_counts = Counter()
        self.inline_positions = []
        self.output = []

    def run(self, tokens: Iterable[TextToken | TagToken]) -> str:
        self._reset()

        iterator = iter(tokens)
        for token in iterator:
            if isinstance(token, TextToken):
                self.output.append(escape_stray(token.data))
                continue

            category = self.classifier.classify(token.name)
            if category is None:
                self._process_disallowed(token, iterator)
            elif token.kind == TagToken.END:
                self._process_end_tag(token, category)
            else:
                self._process_start_tag(token, category)

        while self.open_elements:
            self._emit_error("expected-closing-tag-but-got-eof", None, self.open_elements[-1].name)
            self._pop_element()

        return "".join(self.output)

    # ------------------------------------------------------------------
    # Token handlers
    # ------------------------------------------------------------------

    def _process_disallowed(self, token: TagToken, iterator: Iterator[TextToken | TagToken]) -> None:
        if self.options.unknown_tags is UnknownTagPolicy.ESCAPE:
            self._emit_error("disallowed-tag-escaped", token.start, token.name)
            self.output.append(escape(token.raw))
            return

        self._emit_error("disallowed-tag-dropped", token.start, token.name)
        if token.kind == TagToken.START and self.classifier.drops_content(token.name):
            self._skip_content(token.name, iterator)
            self._emit_error("disallowed-content-dropped", token.start, token.name)

    def _skip_content(self, name: str, iterator: Iterator[TextToken | TagToken]) -> None:
        # Runs to the matching end tag, or to the end of input if there is none
        for token in iterator:
            if isinstance(token, TagToken) and token.kind == TagToken.END and token.name == name:
                return

    def _process_end_tag(self, token: TagToken, category: TagCategory) -> None:
        name = token.name
        if category == TagCategory.SELF_CLOSING:
            self._emit_error("self-closing-end-tag", token.start, name)
            return

        index = self._find_open_element(name)
        if index == -1:
            self._emit_error("orphan-end-tag", token.start, name)
            return

        if index < len(self.open_elements) - 1:
            self._emit_error("end-tag-closes-open-elements", token.start, name)
        self._pop_until(index)

    def _process_start_tag(self, token: TagToken, category: TagCategory) -> None:
        name = token.name

        if self.classifier.is_non_nesting(name):
            index = self._find_open_element(name)
            if index != -1:
                self._emit_error("nested-non-nesting-tag", token.start, name)
                self._pop_until(index)

        if category == TagCategory.BLOCK:
            index = self._find_shallowest_inline()
            if index != -1:
                self._emit_error("block-in-inline", token.start, name)
                self._pop_until(index)

        attrs = sanitize_attributes(name, token.raw_attrs, self.options, self._attribute_reporter(token.start))
        self.output.append(serialize_start_tag(name, attrs))

        if category != TagCategory.SELF_CLOSING:
            self._push_element(StackEntry(name, category))

    # ------------------------------------------------------------------
    # Stack helpers
    # ------------------------------------------------------------------

    def _find_open_element(self, name: str) -> int:
        """Index of the topmost open element called `name`, or -1."""
        if not self.open_counts[name]:
            return -1
        for index in range(len(self.open_elements) - 1, -1, -1):
            if self.open_elements[index].name == name:
                return index
        return -1

    def _find_shallowest_inline(self) -> int:
        return self.inline_positions[0] if self.inline_positions else -1

    def _push_element(self, entry: StackEntry) -> None:
        if entry.category == TagCategory.INLINE:
            self.inline_positions.append(len(self.open_elements))
        self.open_elements.append(entry)
        self.open_counts[entry.name] += 1

    def _pop_element(self) -> None:
        entry = self.open_elements.pop()
        self.open_counts[entry.name] -= 1
        if entry.category == TagCategory.INLINE:
            self.inline_positions.pop()
        self.output.append(serialize_end_tag(entry.name))

    def _pop_until(self, index: int) -> None:
        """Close every open element from the top of the stack down to `index`."""
        while len(self.open_elements) > index:
            self._pop_element()

    def _emit_error(self, code: str, offset: int | None, tag_name: str | None) -> None:
        if self.report is not None:
            self.report(code, offset, tag_name)

    def _attribute_reporter(self, offset: int) -> Callable[[str, str], None] | None:
        if self.report is None:
            return None
        return lambda code, tag: self._emit_error(code, offset, tag)


def rebalance(tokens: Iterable[TextToken | TagToken], options: SanitizeOptions) -> str:
    """Rebalance a token stream without collecting repairs."""
    return Rebalancer(options).run(tokens)
