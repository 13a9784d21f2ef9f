"""A strict-but-forgiving JSON reader producing plain Python values.

Parsing stops after the first complete value; anything after it is left
unread. Numbers always come back as ``float``. Object keys that repeat keep
the last value. A syntax error raises :class:`JsonSyntaxError`, whose
message names the line and the rest of that line from where reading stopped.
"""

from __future__ import annotations

import math
import string
from typing import Any

__all__ = ["JsonSyntaxError", "parse", "parse_prefix", "check_syntax"]

_WHITESPACE = (" ", "\t", "\n", "\r")
_NUMBER_CHARS = frozenset("0123456789+-eE.")
_LITERALS = {"n": ("ull", None), "f": ("alse", False), "t": ("rue", True)}
_UNESCAPES = {
    '"': '"',
    "\\": "\\",
    "/": "/",
    "b": "\b",
    "f": "\f",
    "n": "\n",
    "r": "\r",
    "t": "\t",
}


class JsonSyntaxError(ValueError):
    """Raised when text is not valid JSON."""

    def __init__(self, line: int, near: str) -> None:
        super().__init__(f"syntax error at line {line} near: {near}")
        self.line = line
        self.near = near


class _Reject(Exception):
    """Internal signal that the input does not match the grammar."""


class _Reader:
    """Character reader with one character of push-back and line counting.

    End of input is reported as the empty string.
    """

    def __init__(self, text: str) -> None:
        self._text = text
        self._cur = 0
        self._consumed = False
        self.line = 1

    def getc(self) -> str:
        if self._consumed:
            if self._text[self._cur] == "\n":
                self.line += 1
            self._cur += 1
        if self._cur == len(self._text):
            self._consumed = False
            return ""
        self._consumed = True
        return self._text[self._cur]

    def ungetc(self) -> None:
        self._consumed = False

    def position(self) -> int:
        if self._consumed:
            self._consumed = False
            self._cur += 1
        return self._cur

    def skip_ws(self) -> None:
        while True:
            if self.getc() not in _WHITESPACE:
                self.ungetc()
                return

    def expect(self, expected: str) -> bool:
        self.skip_ws()
        if self.getc() != expected:
            self.ungetc()
            return False
        return True

    def match(self, pattern: str) -> bool:
        for expected in pattern:
            if self.getc() != expected:
                self.ungetc()
                return False
        return True


class _Parser:
    def __init__(self, reader: _Reader, build: bool) -> None:
        self._in = reader
        self._build = build

    def value(self) -> Any:
        reader = self._in
        reader.skip_ws()
        ch = reader.getc()
        if ch in _LITERALS:
            rest, result = _LITERALS[ch]
            if reader.match(rest):
                return result
            raise _Reject
        if ch == '"':
            return self.string()
        if ch == "[":
            return self.array()
        if ch == "{":
            return self.object()
        if ch and (ch.isascii() and ch.isdigit() or ch == "-"):
            reader.ungetc()
            return self.number()
        reader.ungetc()
        raise _Reject

    def number(self) -> float:
        reader = self._in
        chars = []
        while True:
            ch = reader.getc()
            if ch and ch in _NUMBER_CHARS:
                chars.append(ch)
            else:
                reader.ungetc()
                break
        text = "".join(chars)
        if not text:
            raise _Reject
        try:
            number = float(text)
        except ValueError:
            raise _Reject from None
        if self._build and not math.isfinite(number):
            raise OverflowError("JSON numbers must be finite")
        return number

    def string(self) -> str:
        reader = self._in
        out: list[str] = []
        while True:
            ch = reader.getc()
            if ch < " ":
                reader.ungetc()
                raise _Reject
            if ch == '"':
                return "".join(out)
            if ch == "\\":
                ch = reader.getc()
                if ch == "":
                    raise _Reject
                if ch == "u":
                    out.append(self._codepoint())
                elif ch in _UNESCAPES:
                    out.append(_UNESCAPES[ch])
                else:
                    raise _Reject
            else:
                out.append(ch)

    def _quadhex(self) -> int | None:
        reader = self._in
        result = 0
        for _ in range(4):
            ch = reader.getc()
            if ch == "":
                return None
            if ch not in string.hexdigits:
                reader.ungetc()
                return None
            result = result * 16 + int(ch, 16)
        return result

    def _codepoint(self) -> str:
        reader = self._in
        code = self._quadhex()
        if code is None:
            raise _Reject
        if 0xD800 <= code <= 0xDFFF:
            if code >= 0xDC00:
                raise _Reject
            if reader.getc() != "\\" or reader.getc() != "u":
                reader.ungetc()
                raise _Reject
            second = self._quadhex()
            if second is None or not 0xDC00 <= second <= 0xDFFF:
                raise _Reject
            code = (((code - 0xD800) << 10) | ((second - 0xDC00) & 0x3FF)) + 0x10000
        return chr(code)

    def array(self) -> list[Any]:
        reader = self._in
        items: list[Any] = []
        if reader.expect("]"):
            return items
        while True:
            items.append(self.value())
            if not reader.expect(","):
                break
        if not reader.expect("]"):
            raise _Reject
        return items

    def object(self) -> dict[str, Any]:
        reader = self._in
        members: dict[str, Any] = {}
        if reader.expect("}"):
            return members
        while True:
            if not reader.expect('"'):
                raise _Reject
            key = self.string()
            if not reader.expect(":"):
                raise _Reject
            members[key] = self.value()
            if not reader.expect(","):
                break
        if not reader.expect("}"):
            raise _Reject
        return members


def _run(text: str, build: bool) -> tuple[Any, int]:
    if not isinstance(text, str):
        raise TypeError(f"expected str, not {type(text).__name__}")
    reader = _Reader(text)
    try:
        value = _Parser(reader, build).value()
    except _Reject:
        near = []
        while True:
            ch = reader.getc()
            if ch in ("", "\n"):
                break
            if ch >= " ":
                near.append(ch)
        raise JsonSyntaxError(reader.line, "".join(near)) from None
    return value, reader.position()


def parse_prefix(text: str) -> tuple[Any, int]:
    """Parse the first JSON value in ``text``.

    Returns the value and the index just past the last character read.
    """
    return _run(text, True)


def parse(text: str) -> Any:
    """Parse the first JSON value in ``text``; trailing text is ignored."""
    return _run(text, True)[0]


def check_syntax(text: str) -> bool:
    """True if ``text`` starts with a well-formed JSON value.

    No values are built, so out-of-range numbers are accepted.
    """
    try:
        _run(text, False)
    except JsonSyntaxError:
        return False
    return True