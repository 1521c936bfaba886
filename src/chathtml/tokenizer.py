import re
from bisect import bisect_right

from .tokens import TagToken, TextToken

# "<", optional "/", a name, optional attribute text, ">". Attribute text must
# start with whitespace or "/" and never contains another angle bracket.
_TAG_PATTERN = re.compile(r"<(/?)([A-Za-z][A-Za-z0-9-]*)((?:[\s/][^<>]*)?)>")

_ASCII_LOWER_TABLE = str.maketrans({chr(code): chr(code + 32) for code in range(65, 91)})


class Tokenizer:
    """Splits text into text and tag tokens in one left-to-right pass.

    Every character of the input belongs to exactly one token, so joining the
    source spans of the tokens gives back the input. Tags are not judged here:
    allowlist and policy decisions belong to the rebalancer.
    """

    __slots__ = ("_newline_positions", "buffer", "length", "pos")

    def __init__(self, text):
        self.buffer = text
        self.length = len(text)
        self.pos = 0
        self._newline_positions = None

    def __iter__(self):
        buffer = self.buffer
        self.pos = 0
        for match in _TAG_PATTERN.finditer(buffer):
            start = match.start()
            if start > self.pos:
                yield TextToken(buffer[self.pos : start], self.pos)
            kind = TagToken.END if match.group(1) else TagToken.START
            name = match.group(2).translate(_ASCII_LOWER_TABLE)
            raw_attrs = match.group(3) if kind == TagToken.START else ""
            self.pos = match.end()
            yield TagToken(kind, name, raw_attrs, match.group(0), start)

        if self.pos < self.length:
            start = self.pos
            self.pos = self.length
            yield TextToken(buffer[start:], start)

    def tokenize(self):
        return list(self)

    def line_and_column(self, pos):
        """Return the 1-indexed (line, column) for an offset in the buffer."""
        if self._newline_positions is None:
            # Pre-compute newline positions for O(log n) line lookups
            self._newline_positions = []
            found = -1
            while True:
                found = self.buffer.find("\n", found + 1)
                if found == -1:
                    break
                self._newline_positions.append(found)

        line_index = bisect_right(self._newline_positions, pos - 1)
        line_start = self._newline_positions[line_index - 1] + 1 if line_index else 0
        return line_index + 1, pos - line_start + 1


def tokenize(text):
    """Tokenize text into a list of TextToken and TagToken objects."""
    return Tokenizer(text).tokenize()
