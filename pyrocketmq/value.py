# Copyright (c) 2026 Firefly Software Solutions Inc.
# Licensed under the Apache License, Version 2.0

"""
Decoded JSON value model.

Every header and JSON body is decoded into one of these immutable variants.
The variant is fixed by the parser from the leading character of the source
text, so callers dispatch on ``value.kind`` (or ``isinstance``) instead of
guessing from container shape.

Objects keep their pairs in source order and may hold the same key twice;
lookups return the last occurrence.
"""

from __future__ import annotations

import math
from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any, Union

from .exceptions import JsonEncodeError


class ValueKind(str, Enum):
    """Kinds of decoded values."""

    NULL = "null"
    BOOL = "bool"
    NUMBER = "number"
    STRING = "string"
    ARRAY = "array"
    OBJECT = "object"


@dataclass(frozen=True)
class JsonNull:
    """The JSON ``null`` literal."""

    kind = ValueKind.NULL

    def to_python(self) -> None:
        return None


@dataclass(frozen=True)
class JsonBool:
    """A JSON boolean."""

    value: bool
    kind = ValueKind.BOOL

    def to_python(self) -> bool:
        return self.value


@dataclass(frozen=True)
class JsonNumber:
    """A JSON number. Integer and floating forms are not distinguished."""

    value: float
    kind = ValueKind.NUMBER

    @property
    def is_integral(self) -> bool:
        return math.isfinite(self.value) and self.value.is_integer()

    def as_int(self) -> int | None:
        """Return the number as an int when it has no fractional part."""
        return int(self.value) if self.is_integral else None

    def to_python(self) -> float:
        return self.value


@dataclass(frozen=True)
class JsonString:
    """A JSON string."""

    value: str
    kind = ValueKind.STRING

    def to_python(self) -> str:
        return self.value


@dataclass(frozen=True)
class JsonArray:
    """An ordered sequence of values."""

    items: tuple[Value, ...] = ()
    kind = ValueKind.ARRAY

    def __iter__(self) -> Iterator[Value]:
        return iter(self.items)

    def __len__(self) -> int:
        return len(self.items)

    def __getitem__(self, index: int) -> Value:
        return self.items[index]

    def to_python(self) -> list[Any]:
        return [item.to_python() for item in self.items]


@dataclass(frozen=True)
class JsonObject:
    """An ordered sequence of ``(key, value)`` pairs."""

    pairs: tuple[tuple[str, Value], ...] = ()
    kind = ValueKind.OBJECT

    def get(self, key: str, default: Value | None = None) -> Value | None:
        """Look up a key; the last pair with that key wins."""
        for k, v in reversed(self.pairs):
            if k == key:
                return v
        return default

    def keys(self) -> list[str]:
        return [k for k, _ in self.pairs]

    def items(self) -> tuple[tuple[str, Value], ...]:
        return self.pairs

    def __contains__(self, key: object) -> bool:
        return any(k == key for k, _ in self.pairs)

    def __len__(self) -> int:
        return len(self.pairs)

    def to_python(self) -> dict[str, Any]:
        # dict assignment gives last-write-wins for duplicate keys
        return {k: v.to_python() for k, v in self.pairs}


Value = Union[JsonNull, JsonBool, JsonNumber, JsonString, JsonArray, JsonObject]

NULL = JsonNull()
TRUE = JsonBool(True)
FALSE = JsonBool(False)


# =============================================================================
# Stringify
# =============================================================================

_ESCAPES = {
    "\\": "\\\\",
    '"': '\\"',
    "/": "\\/",
    "\b": "\\b",
    "\f": "\\f",
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
}


def escape_string(text: str) -> str:
    """Escape a string for inclusion between double quotes."""
    return "".join(_ESCAPES.get(ch, ch) for ch in text)


def format_number(number: float) -> str:
    """
    Render a number in decimal form.

    Integral values drop the fractional part (``10.0`` renders as ``10``).

    Raises:
        JsonEncodeError: If the number is NaN or infinite.
    """
    if not math.isfinite(number):
        raise JsonEncodeError(f"Cannot encode non-finite number: {number!r}")
    if number.is_integer():
        return str(int(number))
    return repr(number)


def stringify_key(key: Value | str) -> str:
    """
    Render a value in key position.

    Primitives are forced into quoted string form. Arrays and objects cannot
    be keys.

    Raises:
        JsonEncodeError: If ``key`` is an array or object.
    """
    if isinstance(key, str):
        return f'"{escape_string(key)}"'
    if isinstance(key, (JsonArray, JsonObject)):
        raise JsonEncodeError(f"Cannot encode {key.kind.value} as key")
    return f'"{escape_string(key_text(key))}"'


def key_text(key: Value) -> str:
    """Unquoted string form of a primitive used as an object key."""
    if isinstance(key, JsonString):
        return key.value
    if isinstance(key, JsonNumber):
        return format_number(key.value)
    if isinstance(key, JsonBool):
        return "true" if key.value else "false"
    if isinstance(key, JsonNull):
        return "null"
    raise JsonEncodeError(f"Cannot encode {key.kind.value} as key")


def stringify(value: Value) -> str:
    """
    Render a value as JSON text.

    Raises:
        JsonEncodeError: If the value holds a non-finite number.
    """
    if isinstance(value, JsonNull):
        return "null"
    if isinstance(value, JsonBool):
        return "true" if value.value else "false"
    if isinstance(value, JsonNumber):
        return format_number(value.value)
    if isinstance(value, JsonString):
        return f'"{escape_string(value.value)}"'
    if isinstance(value, JsonArray):
        return "[" + ", ".join(stringify(item) for item in value.items) + "]"
    if isinstance(value, JsonObject):
        return "{" + ", ".join(
            f"{stringify_key(k)}:{stringify(v)}" for k, v in value.pairs
        ) + "}"
    raise JsonEncodeError(f"Unjsonifiable type: {type(value).__name__}")


def from_python(obj: Any) -> Value:
    """
    Build a value from plain Python data.

    Mapping keys are forced to string form; a list or dict used as a key is
    rejected.

    Raises:
        JsonEncodeError: If ``obj`` holds an unsupported type.
    """
    if obj is None:
        return NULL
    if isinstance(obj, (JsonNull, JsonBool, JsonNumber, JsonString, JsonArray, JsonObject)):
        return obj
    if isinstance(obj, bool):
        return TRUE if obj else FALSE
    if isinstance(obj, (int, float)):
        return JsonNumber(float(obj))
    if isinstance(obj, str):
        return JsonString(obj)
    if isinstance(obj, Mapping):
        return JsonObject(tuple(
            (key_text(from_python(k)), from_python(v)) for k, v in obj.items()
        ))
    if isinstance(obj, (list, tuple)):
        return JsonArray(tuple(from_python(item) for item in obj))
    raise JsonEncodeError(f"Unjsonifiable type: {type(obj).__name__}")
