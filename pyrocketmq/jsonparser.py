# Copyright (c) 2026 Firefly Software Solutions Inc.
# Licensed under the Apache License, Version 2.0

"""
Recursive-descent JSON decoder for RocketMQ frame headers and bodies.

RocketMQ serializes its remoting headers with a lenient JSON encoder, so this
parser follows the grammar the broker traffic actually uses rather than
RFC 8259 to the letter:

- Any primitive is accepted in key position and coerced to its string form.
- A trailing comma before the closing bracket is tolerated.
- Escapes other than ``\\\\ \\" \\/ \\b \\f \\n \\r \\t`` pass the escaped
  character through unchanged.

Every syntax problem raises MalformedJsonError with the offset and a short
excerpt of the offending text.
"""

from __future__ import annotations

import math
import re

from .exceptions import MalformedJsonError
from .value import (
    FALSE,
    NULL,
    TRUE,
    JsonArray,
    JsonNumber,
    JsonObject,
    JsonString,
    Value,
    key_text,
)

DEFAULT_MAX_DEPTH: int = 200
EXCERPT_SIZE: int = 10

_WHITESPACE = re.compile(r"[ \t\n\r\f\v]*")
_NUMBER = re.compile(r"-?[0-9]+(?:\.[0-9]+)?(?:[eE][+-]?[0-9]+)?")
_STRING_CHUNK = re.compile(r'[^"\\]*')

_UNESCAPES = {
    "b": "\b",
    "f": "\f",
    "n": "\n",
    "r": "\r",
    "t": "\t",
}

_LITERALS = (
    ("true", TRUE),
    ("false", FALSE),
    ("null", NULL),
)


class _Parser:
    """Parser state for one call; holds no references once the call returns."""

    def __init__(self, text: str, max_depth: int) -> None:
        self.text = text
        self.max_depth = max_depth

    def error(self, message: str, pos: int) -> MalformedJsonError:
        return MalformedJsonError(message, pos, self.text[pos:pos + EXCERPT_SIZE])

    def skip_whitespace(self, pos: int) -> int:
        return _WHITESPACE.match(self.text, pos).end()

    def skip_delimiter(self, pos: int, delimiter: str, required: bool = False) -> tuple[int, bool]:
        pos = self.skip_whitespace(pos)
        if self.text[pos:pos + 1] != delimiter:
            if required:
                raise self.error(f"Expected {delimiter!r}", pos)
            return pos, False
        return pos + 1, True

    def value(self, pos: int, end_delimiter: str | None, depth: int) -> tuple[Value | None, int]:
        pos = self.skip_whitespace(pos)
        if pos >= len(self.text):
            raise self.error("Unexpected end of input", pos)

        first = self.text[pos]
        if first == "{":
            return self.object(pos, depth + 1)
        if first == "[":
            return self.array(pos, depth + 1)
        if first == '"':
            return self.string(pos)
        if first == "-" or "0" <= first <= "9":
            return self.number(pos)
        if first == end_delimiter:
            return None, pos + 1
        return self.literal(pos)

    def object(self, pos: int, depth: int) -> tuple[JsonObject, int]:
        if depth > self.max_depth:
            raise self.error(f"Nesting deeper than {self.max_depth} levels", pos)
        pairs: list[tuple[str, Value]] = []
        delimiter_found = True
        pos += 1
        while True:
            item_pos = self.skip_whitespace(pos)
            key, pos = self.value(item_pos, "}", depth)
            if key is None:
                return JsonObject(tuple(pairs)), pos
            if not delimiter_found:
                raise self.error("Comma missing between object items", item_pos)
            if isinstance(key, (JsonArray, JsonObject)):
                raise self.error(f"Object key cannot be an {key.kind.value}", item_pos)
            pos, _ = self.skip_delimiter(pos, ":", required=True)
            val, pos = self.value(pos, None, depth)
            pairs.append((key_text(key), val))
            pos, delimiter_found = self.skip_delimiter(pos, ",")

    def array(self, pos: int, depth: int) -> tuple[JsonArray, int]:
        if depth > self.max_depth:
            raise self.error(f"Nesting deeper than {self.max_depth} levels", pos)
        items: list[Value] = []
        delimiter_found = True
        pos += 1
        while True:
            item_pos = self.skip_whitespace(pos)
            item, pos = self.value(item_pos, "]", depth)
            if item is None:
                return JsonArray(tuple(items)), pos
            if not delimiter_found:
                raise self.error("Comma missing between array items", item_pos)
            items.append(item)
            pos, delimiter_found = self.skip_delimiter(pos, ",")

    def string(self, pos: int) -> tuple[JsonString, int]:
        text = self.text
        start = pos
        parts: list[str] = []
        pos += 1
        while True:
            chunk = _STRING_CHUNK.match(text, pos)
            parts.append(chunk.group())
            pos = chunk.end()
            if pos >= len(text):
                raise self.error("End of input found while parsing string", start)
            if text[pos] == '"':
                return JsonString("".join(parts)), pos + 1
            # backslash escape
            if pos + 1 >= len(text):
                raise self.error("End of input found while parsing string", start)
            escaped = text[pos + 1]
            parts.append(_UNESCAPES.get(escaped, escaped))
            pos += 2

    def number(self, pos: int) -> tuple[JsonNumber, int]:
        match = _NUMBER.match(self.text, pos)
        if match is None:
            raise self.error("Invalid number", pos)
        number = float(match.group())
        if not math.isfinite(number):
            raise self.error("Number out of range", pos)
        return JsonNumber(number), match.end()

    def literal(self, pos: int) -> tuple[Value, int]:
        for text, value in _LITERALS:
            if self.text.startswith(text, pos):
                return value, pos + len(text)
        raise self.error("Invalid json syntax", pos)


def parse(
    text: str,
    pos: int = 0,
    end_delimiter: str | None = None,
    *,
    max_depth: int = DEFAULT_MAX_DEPTH,
) -> tuple[Value | None, int]:
    """
    Parse one JSON value starting at ``pos``.

    Leading whitespace is skipped. When the first significant character equals
    ``end_delimiter`` there is no value: ``(None, pos + 1)`` is returned so the
    caller can treat it as the closing bracket of an enclosing container.

    Args:
        text: Source text.
        pos: Offset to start at.
        end_delimiter: Character that ends an enclosing container, if any.
        max_depth: Maximum nesting of arrays and objects.

    Returns:
        Tuple of the parsed value (or None) and the offset just past it.

    Raises:
        MalformedJsonError: If the text is not valid JSON.
    """
    return _Parser(text, max_depth).value(pos, end_delimiter, 0)


def loads(text: str, *, max_depth: int = DEFAULT_MAX_DEPTH) -> Value:
    """
    Parse a complete JSON document.

    Raises:
        MalformedJsonError: If the text is not valid JSON or has trailing data.
    """
    parser = _Parser(text, max_depth)
    value, pos = parser.value(0, None, 0)
    pos = parser.skip_whitespace(pos)
    if pos != len(text):
        raise parser.error("Extra data after JSON value", pos)
    return value
