# signalbook/lang/literals.py
"""
Recursive-descent parser for DSL data literals.

Grammar::

    value   := number | string | "true" | "false" | array | object
    array   := "[" [value ("," value)*] "]"
    object  := "{" [pair ("," pair)*] "}"          (flat: no nested objects)
    pair    := (identifier | string) ":" value

Only data is parsed here; names, calls and arithmetic are rejected.
"""
from __future__ import annotations

import re
from typing import Any

from ..core.exceptions import InvalidInput


_NUMBER = re.compile(r"[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?")
_IDENT = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")


class LiteralSyntaxError(InvalidInput):
    """Raised when a data literal is malformed."""

    def __init__(self, message: str, position: int) -> None:
        super().__init__(f"{message} at position {position}")
        self.position = position


def parse_number(text: str) -> float | None:
    """Return the value of `text` if it is entirely a numeric literal, else None."""
    text = text.strip()
    if _NUMBER.fullmatch(text):
        return float(text)
    return None


class _Parser:
    def __init__(self, text: str) -> None:
        self.text = text
        self.pos = 0

    # ---- helpers ----
    def _skip_ws(self) -> None:
        while self.pos < len(self.text) and self.text[self.pos].isspace():
            self.pos += 1

    def _peek(self) -> str:
        self._skip_ws()
        return self.text[self.pos] if self.pos < len(self.text) else ""

    def _expect(self, ch: str) -> None:
        if self._peek() != ch:
            found = self._peek() or "end of input"
            raise LiteralSyntaxError(f"Expected '{ch}', found '{found}'", self.pos)
        self.pos += 1

    # ---- grammar ----
    def parse(self) -> Any:
        value = self.value(allow_object=True)
        if self._peek():
            raise LiteralSyntaxError("Unexpected trailing input", self.pos)
        return value

    def value(self, *, allow_object: bool) -> Any:
        ch = self._peek()
        if ch == "[":
            return self.array()
        if ch == "{":
            if not allow_object:
                raise LiteralSyntaxError("Nested objects are not supported", self.pos)
            return self.object()
        if ch in ("'", '"'):
            return self.string()
        m = _NUMBER.match(self.text, self.pos)
        if m:
            self.pos = m.end()
            return float(m.group())
        m = _IDENT.match(self.text, self.pos)
        if m and m.group() in ("true", "false"):
            self.pos = m.end()
            return m.group() == "true"
        raise LiteralSyntaxError(f"Unexpected '{ch or 'end of input'}'", self.pos)

    def array(self) -> list[Any]:
        self._expect("[")
        items: list[Any] = []
        if self._peek() == "]":
            self.pos += 1
            return items
        while True:
            items.append(self.value(allow_object=False))
            if self._peek() == ",":
                self.pos += 1
                continue
            self._expect("]")
            return items

    def object(self) -> dict[str, Any]:
        self._expect("{")
        out: dict[str, Any] = {}
        if self._peek() == "}":
            self.pos += 1
            return out
        while True:
            key = self.key()
            self._expect(":")
            out[key] = self.value(allow_object=False)
            if self._peek() == ",":
                self.pos += 1
                continue
            self._expect("}")
            return out

    def key(self) -> str:
        ch = self._peek()
        if ch in ("'", '"'):
            return self.string()
        m = _IDENT.match(self.text, self.pos)
        if not m:
            raise LiteralSyntaxError("Expected an object key", self.pos)
        self.pos = m.end()
        return m.group()

    def string(self) -> str:
        quote = self.text[self.pos]
        end = self.text.find(quote, self.pos + 1)
        if end < 0:
            raise LiteralSyntaxError("Unterminated string", self.pos)
        s = self.text[self.pos + 1:end]
        self.pos = end + 1
        return s


def parse_literal(text: str) -> Any:
    """Parse one complete data literal."""
    return _Parser(text).parse()


def parse_grid(text: str) -> list[list[float]]:
    """Parse a non-empty array of equal-length numeric arrays."""
    try:
        value = parse_literal(text)
    except LiteralSyntaxError as e:
        raise InvalidInput("Invalid matrix data format", cause=e) from e

    if not isinstance(value, list) or not value:
        raise InvalidInput("Invalid matrix data format")
    for row in value:
        if not isinstance(row, list) or not row:
            raise InvalidInput("Invalid matrix data format")
        if not all(isinstance(x, float) for x in row):
            raise InvalidInput("Invalid matrix data format")
    if any(len(row) != len(value[0]) for row in value):
        raise InvalidInput("Invalid matrix data format: rows must have equal length")
    return value


def parse_options(text: str) -> dict[str, Any]:
    """Parse a brace-delimited option bag."""
    try:
        value = parse_literal(text)
    except LiteralSyntaxError as e:
        raise InvalidInput("Invalid options object format", cause=e) from e
    if not isinstance(value, dict):
        raise InvalidInput("Invalid options object format")
    return value
