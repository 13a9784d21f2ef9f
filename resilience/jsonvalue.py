"""JSON values as plain Python objects, with the text rendering used by traces.

A JSON value is ``None``, a ``bool``, a number (``int`` or ``float``), a
``str``, a ``list`` of values or a ``dict`` mapping ``str`` keys to values.
Numbers are treated as double precision floats, objects are written with
their keys in sorted order, and pretty output indents by two spaces.
"""

from __future__ import annotations

import math
from typing import Any

INDENT_WIDTH = 2

_ESCAPES = {
    '"': '\\"',
    "\\": "\\\\",
    "/": "\\/",
    "\b": "\\b",
    "\f": "\\f",
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
}


def check_value(value: Any) -> Any:
    """Validate that ``value`` is a JSON value and return it unchanged.

    Raises ``OverflowError`` for NaN or infinite numbers and ``TypeError``
    for anything that is not a JSON value.
    """
    if value is None or isinstance(value, (bool, str)):
        return value
    if isinstance(value, (int, float)):
        if not math.isfinite(float(value)):
            raise OverflowError("JSON numbers must be finite")
        return value
    if isinstance(value, list):
        for item in value:
            check_value(item)
        return value
    if isinstance(value, dict):
        for key, item in value.items():
            if not isinstance(key, str):
                raise TypeError(f"JSON object keys must be strings, not {type(key).__name__}")
            check_value(item)
        return value
    raise TypeError(f"{type(value).__name__} is not a JSON value")


def _number_to_str(number: float) -> str:
    if abs(number) < (1 << 53) and number == math.floor(number):
        return "%.f" % number
    return "%.17g" % number


def to_str(value: Any) -> str:
    """Return the plain text form of a value.

    Strings come back unquoted; arrays and objects come back as the words
    ``array`` and ``object``.
    """
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        number = float(value)
        if not math.isfinite(number):
            raise OverflowError("JSON numbers must be finite")
        return _number_to_str(number)
    if isinstance(value, str):
        return value
    if isinstance(value, list):
        return "array"
    if isinstance(value, dict):
        return "object"
    raise TypeError(f"{type(value).__name__} is not a JSON value")


def serialize_string(text: str) -> str:
    """Quote and escape a string for JSON output."""
    parts = ['"']
    for char in text:
        escaped = _ESCAPES.get(char)
        if escaped is not None:
            parts.append(escaped)
        elif ord(char) < 0x20 or ord(char) == 0x7F:
            parts.append("\\u%04x" % ord(char))
        else:
            parts.append(char)
    parts.append('"')
    return "".join(parts)


def _newline(out: list[str], indent: int) -> None:
    out.append("\n" + " " * (indent * INDENT_WIDTH))


def _write(value: Any, out: list[str], indent: int) -> None:
    if isinstance(value, str):
        out.append(serialize_string(value))
    elif isinstance(value, list):
        out.append("[")
        if indent != -1:
            indent += 1
        for position, item in enumerate(value):
            if position:
                out.append(",")
            if indent != -1:
                _newline(out, indent)
            _write(item, out, indent)
        if indent != -1:
            indent -= 1
            if value:
                _newline(out, indent)
        out.append("]")
    elif isinstance(value, dict):
        out.append("{")
        if indent != -1:
            indent += 1
        for position, key in enumerate(sorted(value)):
            if not isinstance(key, str):
                raise TypeError(f"JSON object keys must be strings, not {type(key).__name__}")
            if position:
                out.append(",")
            if indent != -1:
                _newline(out, indent)
            out.append(serialize_string(key))
            out.append(":")
            if indent != -1:
                out.append(" ")
            _write(value[key], out, indent)
        if indent != -1:
            indent -= 1
            if value:
                _newline(out, indent)
        out.append("}")
    else:
        out.append(to_str(value))
    if indent == 0:
        out.append("\n")


def serialize(value: Any, prettify: bool = False) -> str:
    """Render a value as JSON text, optionally indented with a final newline."""
    out: list[str] = []
    _write(value, out, 0 if prettify else -1)
    return "".join(out)


def evaluate_as_boolean(value: Any) -> bool:
    """Truth value of a JSON value: arrays and objects are always true."""
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value != 0
    if isinstance(value, str):
        return bool(value)
    if isinstance(value, (list, dict)):
        return True
    raise TypeError(f"{type(value).__name__} is not a JSON value")