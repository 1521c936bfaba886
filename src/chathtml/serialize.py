"""Tag serialization for rebalanced output."""

from __future__ import annotations

from .entities import escape


def _escape_attr_value(value: str) -> str:
    # escape() covers '"' so double quotes are always safe to use
    return escape(value)


def serialize_start_tag(name: str, attrs: dict[str, str | None] | None) -> str:
    attrs = attrs or {}
    parts: list[str] = ["<", name]
    for key, value in attrs.items():
        if value is None:
            parts.extend([" ", key])
        else:
            parts.extend([" ", key, '="', _escape_attr_value(value), '"'])
    parts.append(">")
    return "".join(parts)


def serialize_end_tag(name: str) -> str:
    return f"</{name}>"
