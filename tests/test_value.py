# Copyright (c) 2026 Firefly Software Solutions Inc.
# Licensed under the Apache License, Version 2.0

"""Tests for the decoded value model."""

import pytest

from pyrocketmq.exceptions import JsonEncodeError
from pyrocketmq.jsonparser import loads
from pyrocketmq.value import (
    FALSE,
    NULL,
    TRUE,
    JsonArray,
    JsonNumber,
    JsonObject,
    JsonString,
    ValueKind,
    from_python,
    stringify,
    stringify_key,
)


class TestValues:
    """Tests for value construction and access."""

    def test_kinds(self) -> None:
        """Each variant reports its kind."""
        assert NULL.kind is ValueKind.NULL
        assert TRUE.kind is ValueKind.BOOL
        assert JsonNumber(1.0).kind is ValueKind.NUMBER
        assert JsonString("x").kind is ValueKind.STRING
        assert JsonArray().kind is ValueKind.ARRAY
        assert JsonObject().kind is ValueKind.OBJECT

    def test_object_lookup_last_write_wins(self) -> None:
        """Duplicate keys are kept, lookup returns the last one."""
        obj = JsonObject((("a", JsonNumber(1.0)), ("b", TRUE), ("a", JsonNumber(2.0))))
        assert len(obj) == 3
        assert obj.keys() == ["a", "b", "a"]
        assert obj.get("a") == JsonNumber(2.0)
        assert obj.get("missing") is None
        assert "b" in obj
        assert obj.to_python() == {"a": 2.0, "b": True}

    def test_array_access(self) -> None:
        """Arrays behave as read-only sequences."""
        arr = JsonArray((JsonNumber(1.0), JsonString("x")))
        assert len(arr) == 2
        assert arr[1] == JsonString("x")
        assert list(arr) == [JsonNumber(1.0), JsonString("x")]
        assert arr.to_python() == [1.0, "x"]

    def test_number_as_int(self) -> None:
        """Only integral numbers convert to int."""
        assert JsonNumber(10.0).as_int() == 10
        assert JsonNumber(-3.0).as_int() == -3
        assert JsonNumber(1.5).as_int() is None

    def test_variants_are_distinct(self) -> None:
        """A boolean is never equal to a number."""
        assert TRUE != JsonNumber(1.0)
        assert FALSE != NULL


class TestStringify:
    """Tests for stringify()."""

    def test_primitives(self) -> None:
        """Primitives render as JSON literals."""
        assert stringify(NULL) == "null"
        assert stringify(TRUE) == "true"
        assert stringify(FALSE) == "false"
        assert stringify(JsonNumber(10.0)) == "10"
        assert stringify(JsonNumber(-0.25)) == "-0.25"
        assert stringify(JsonString("abc")) == '"abc"'

    def test_string_escapes(self) -> None:
        """Quotes, backslashes, slashes and control characters are escaped."""
        value = JsonString('a"b\\c/d\b\f\n\r\t')
        assert stringify(value) == '"a\\"b\\\\c\\/d\\b\\f\\n\\r\\t"'

    def test_containers(self) -> None:
        """Arrays and objects render recursively, in order."""
        value = JsonObject((
            ("b", JsonArray((JsonNumber(1.0), JsonString("x")))),
            ("a", JsonObject()),
        ))
        assert stringify(value) == '{"b":[1, "x"], "a":{}}'

    def test_non_finite_number(self) -> None:
        """NaN and infinity cannot be rendered."""
        with pytest.raises(JsonEncodeError):
            stringify(JsonNumber(float("inf")))

    def test_key_position(self) -> None:
        """Primitives in key position are forced to strings."""
        assert stringify_key("k") == '"k"'
        assert stringify_key(JsonNumber(3.0)) == '"3"'
        assert stringify_key(TRUE) == '"true"'
        assert stringify_key(NULL) == '"null"'

    def test_container_in_key_position(self) -> None:
        """Arrays and objects cannot be keys."""
        with pytest.raises(JsonEncodeError, match="as key"):
            stringify_key(JsonArray())
        with pytest.raises(JsonEncodeError, match="as key"):
            stringify_key(JsonObject())

    def test_roundtrip(self) -> None:
        """Parsing the rendered text yields the original value."""
        values = [
            NULL,
            JsonNumber(1.5e-7),
            JsonString('quote " and \\ and \n'),
            JsonArray((TRUE, FALSE, NULL, JsonArray())),
            JsonObject((
                ("code", JsonNumber(10.0)),
                ("extFields", JsonObject((("topic", JsonString("T1")),))),
                ("list", JsonArray((JsonNumber(-2.0), JsonString("")))),
            )),
        ]
        for value in values:
            assert loads(stringify(value)) == value


class TestFromPython:
    """Tests for from_python()."""

    def test_nested(self) -> None:
        """Plain data converts recursively; keys become strings."""
        value = from_python({"a": [1, None, True], 2: "x"})
        assert value == JsonObject((
            ("a", JsonArray((JsonNumber(1.0), NULL, TRUE))),
            ("2", JsonString("x")),
        ))

    def test_container_key_rejected(self) -> None:
        """A tuple key would be an array key."""
        with pytest.raises(JsonEncodeError):
            from_python({(1, 2): 1})

    def test_unsupported_type(self) -> None:
        """Arbitrary objects are rejected."""
        with pytest.raises(JsonEncodeError, match="Unjsonifiable"):
            from_python(object())
