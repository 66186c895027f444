# Copyright (c) 2026 Firefly Software Solutions Inc.
# Licensed under the Apache License, Version 2.0

"""
Custom exceptions for the pyrocketmq wire decoder.

All exceptions inherit from RocketMQError, making it easy to catch every
decoder failure with a single except clause:

    try:
        frame = decoder.decode(data, src_port, dst_port)
    except RocketMQError as e:
        print(f"Could not decode exchange: {e}")

Structural problems with the bytes of one frame raise a DecodeError subclass,
so a caller walking many captured exchanges can skip the bad one and carry on:

    try:
        frame = decoder.decode(data, src_port, dst_port)
    except TruncatedFrameError as e:
        print(f"{e.field} needs {e.needed} bytes, only {e.available} left")
    except MalformedJsonError as e:
        print(f"Bad JSON at {e.position}: {e.excerpt!r}")

An unknown request/response code or a body without recognizable structure is
never an error.
"""

from __future__ import annotations


class RocketMQError(Exception):
    """
    Base exception for all pyrocketmq errors.

    All pyrocketmq exceptions inherit from this class, allowing you to catch
    all decoder-related errors with a single except clause.
    """

    def __init__(self, message: str, *, hint: str | None = None) -> None:
        self.hint = hint
        if hint:
            message = f"{message}\n\n  Hint: {hint}"
        super().__init__(message)


class DecodeError(RocketMQError):
    """Base exception for structural failures while decoding one frame."""


class MalformedJsonError(DecodeError):
    """
    Raised when a header or body segment is not valid JSON text.

    Covers unexpected characters, missing delimiters, unterminated strings,
    unparsable numbers, unmatched literals and excessive nesting.
    """

    def __init__(self, message: str, position: int, excerpt: str = "") -> None:
        self.position = position
        self.excerpt = excerpt
        super().__init__(f"{message} at position {position}: {excerpt!r}")


class TruncatedFrameError(DecodeError):
    """
    Raised when the buffer is shorter than a declared length.

    This typically happens when:
    - The capture ended in the middle of an exchange
    - Transport reassembly handed over an incomplete segment
    - A length prefix inside a message record is corrupt
    """

    def __init__(self, field: str, needed: int, available: int) -> None:
        self.field = field
        self.needed = needed
        self.available = available
        super().__init__(
            f"Truncated {field}: need {needed} bytes, only {available} available",
            hint="Make sure the buffer holds one complete, reassembled exchange",
        )


class FrameTooLargeError(DecodeError):
    """Raised when a declared frame length exceeds the configured maximum."""

    def __init__(self, size: int, max_size: int) -> None:
        self.size = size
        self.max_size = max_size
        super().__init__(
            f"Frame size {size} bytes exceeds maximum {max_size} bytes",
            hint="The stream is probably out of sync or not RocketMQ traffic",
        )


class JsonEncodeError(RocketMQError):
    """Raised when a value cannot be rendered as JSON text."""


class RecordEncodeError(RocketMQError):
    """Raised when a message record field cannot be written in the stored layout."""

    def __init__(self, field: str, message: str) -> None:
        self.field = field
        super().__init__(f"Cannot encode {field}: {message}")
