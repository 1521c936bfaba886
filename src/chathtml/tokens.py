from __future__ import annotations

from typing import Literal

from .errors import generate_error_message


class TagToken:
    __slots__ = ("kind", "name", "raw", "raw_attrs", "start")

    START: Literal[0] = 0
    END: Literal[1] = 1

    kind: int
    name: str
    raw: str
    raw_attrs: str
    start: int

    def __init__(self, kind: int, name: str, raw_attrs: str, raw: str, start: int) -> None:
        self.kind = kind
        self.name = name
        self.raw_attrs = raw_attrs
        self.raw = raw
        self.start = start

    @property
    def end(self) -> int:
        return self.start + len(self.raw)

    def __repr__(self) -> str:
        slash = "/" if self.kind == TagToken.END else ""
        return f"TagToken(<{slash}{self.name}>, start={self.start})"


class TextToken:
    __slots__ = ("data", "start")

    data: str
    start: int

    def __init__(self, data: str, start: int) -> None:
        self.data = data
        self.start = start

    @property
    def end(self) -> int:
        return self.start + len(self.data)

    def __repr__(self) -> str:
        return f"TextToken({self.data!r}, start={self.start})"


class StackEntry:
    __slots__ = ("category", "name")

    name: str
    category: int

    def __init__(self, name: str, category: int) -> None:
        self.name = name
        self.category = category

    def __repr__(self) -> str:
        return f"StackEntry({self.name!r})"


class Repair:
    """One repair applied to the input.

    `line` and `column` are 1-based and point into the text after comment
    removal. Repairs made before tokenizing have neither.
    """

    __slots__ = ("code", "column", "line", "message", "tag_name")

    code: str
    line: int | None
    column: int | None
    tag_name: str | None
    message: str

    def __init__(
        self,
        code: str,
        line: int | None = None,
        column: int | None = None,
        tag_name: str | None = None,
        message: str | None = None,
    ) -> None:
        self.code = code
        self.line = line
        self.column = column
        self.tag_name = tag_name
        self.message = generate_error_message(code, tag_name) if message is None else message

    def _key(self) -> tuple[str, int | None, int | None, str | None]:
        return (self.code, self.line, self.column, self.tag_name)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Repair):
            return NotImplemented
        return self._key() == other._key()

    def __repr__(self) -> str:
        if self.line is None:
            return f"Repair({self.code!r})"
        return f"Repair({self.code!r}, line={self.line}, column={self.column})"

    def __str__(self) -> str:
        text = self.code if self.message == self.code else f"{self.code} - {self.message}"
        if self.line is None:
            return text
        return f"({self.line},{self.column}): {text}"
