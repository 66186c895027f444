# Copyright (c) 2026 Firefly Software Solutions Inc.
# Licensed under the Apache License, Version 2.0

"""
RocketMQ Remoting Frame Layout.

Protocol Format:
    +-------+-------+-------+-------+-------+-------+-------+-------+
    | Length (4 bytes, big-endian)  | Header Length (4 bytes, BE)   |
    +-------+-------+-------+-------+-------+-------+-------+-------+
    |              Header (Header Length bytes, JSON)               |
    +---------------------------------------------------------------+
    |              Body (remaining bytes, optional)                 |
    +---------------------------------------------------------------+

Fields:
    - Length (4 bytes): Size of everything after this field
    - Header Length (4 bytes): Size of the JSON header
    - Header: UTF-8 JSON object (code, remark, extFields, ...)
    - Body: JSON, a serialized stored message, or opaque bytes

The declared Length is informational only. The body extent is taken from the
bytes actually supplied, and a disagreement between the two is reported
through Frame.length_mismatch.
"""

from __future__ import annotations

import io
import logging
import struct
from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from .exceptions import FrameTooLargeError, TruncatedFrameError
from .value import JsonObject, Value, from_python, stringify

if TYPE_CHECKING:
    from typing import BinaryIO

logger = logging.getLogger(__name__)

# Protocol constants
LENGTH_FIELD_SIZE: int = 4
PREFIX_SIZE: int = 8
MAX_FRAME_SIZE: int = 16 * 1024 * 1024  # 16MB


@dataclass(frozen=True)
class Frame:
    """One length-delimited request or response exchange."""

    total_length: int
    header_length: int
    header: bytes
    body: bytes = b""

    @property
    def has_body(self) -> bool:
        return len(self.body) > 0

    @property
    def actual_length(self) -> int:
        """Number of bytes actually present after the length field."""
        return LENGTH_FIELD_SIZE + self.header_length + len(self.body)

    @property
    def length_mismatch(self) -> bool:
        """True when the declared length disagrees with the supplied bytes."""
        return self.total_length != self.actual_length

    @property
    def length_range(self) -> tuple[int, int]:
        return (0, LENGTH_FIELD_SIZE)

    @property
    def header_range(self) -> tuple[int, int]:
        return (PREFIX_SIZE, PREFIX_SIZE + self.header_length)

    @property
    def body_range(self) -> tuple[int, int]:
        start = PREFIX_SIZE + self.header_length
        return (start, start + len(self.body))

    def to_bytes(self) -> bytes:
        """Serialize the frame back to wire bytes."""
        return (
            struct.pack(">II", self.total_length, self.header_length)
            + self.header
            + self.body
        )


def split_frame(buffer: bytes | bytearray | memoryview) -> Frame:
    """
    Split one complete exchange into its length field, header and body.

    Args:
        buffer: Bytes of exactly one reassembled exchange.

    Returns:
        Frame holding copies of the header and body bytes.

    Raises:
        TruncatedFrameError: If the buffer cannot hold the prefix or the
            declared header.
    """
    if len(buffer) < PREFIX_SIZE:
        raise TruncatedFrameError("frame prefix", PREFIX_SIZE, len(buffer))

    total_length, header_length = struct.unpack_from(">II", buffer, 0)
    header_end = PREFIX_SIZE + header_length
    if header_end > len(buffer):
        raise TruncatedFrameError("header", header_length, len(buffer) - PREFIX_SIZE)

    frame = Frame(
        total_length=total_length,
        header_length=header_length,
        header=bytes(buffer[PREFIX_SIZE:header_end]),
        body=bytes(buffer[header_end:]),
    )
    if frame.length_mismatch:
        logger.debug(
            "Declared frame length %d differs from %d bytes supplied",
            frame.total_length,
            frame.actual_length,
        )
    return frame


def read_frame(reader: BinaryIO, max_frame_size: int = MAX_FRAME_SIZE) -> bytes:
    """
    Read one complete length-delimited frame from a binary stream.

    Args:
        reader: Binary stream to read from.
        max_frame_size: Largest declared length accepted.

    Returns:
        The frame bytes, length field included, ready for split_frame().

    Raises:
        EOFError: If the stream is exhausted before a new frame starts.
        TruncatedFrameError: If the stream ends inside a frame.
        FrameTooLargeError: If the declared length exceeds max_frame_size.
    """
    prefix = reader.read(LENGTH_FIELD_SIZE)
    if len(prefix) == 0:
        raise EOFError("End of stream")
    if len(prefix) < LENGTH_FIELD_SIZE:
        raise TruncatedFrameError("length field", LENGTH_FIELD_SIZE, len(prefix))

    (total_length,) = struct.unpack(">I", prefix)
    if total_length > max_frame_size:
        raise FrameTooLargeError(total_length, max_frame_size)

    payload = reader.read(total_length)
    if len(payload) < total_length:
        raise TruncatedFrameError("frame", total_length, len(payload))

    return prefix + payload


def iter_frames(data: bytes, max_frame_size: int = MAX_FRAME_SIZE) -> Iterator[bytes]:
    """
    Split a byte stream holding back-to-back frames.

    Yields:
        The bytes of each complete frame in order.

    Raises:
        TruncatedFrameError: If the stream ends inside a frame.
        FrameTooLargeError: If a declared length exceeds max_frame_size.
    """
    reader = io.BytesIO(data)
    while True:
        try:
            frame = read_frame(reader, max_frame_size)
        except EOFError:
            return
        yield frame


def encode_frame(header: Value | Mapping[str, Any], body: bytes = b"") -> bytes:
    """
    Build wire bytes for a frame.

    Args:
        header: Header object, either a decoded value or a plain mapping.
        body: Body bytes (default: empty).

    Returns:
        Complete frame bytes.
    """
    if not isinstance(header, JsonObject):
        header = from_python(header)
    header_bytes = stringify(header).encode("utf-8")
    total_length = LENGTH_FIELD_SIZE + len(header_bytes) + len(body)
    return struct.pack(">II", total_length, len(header_bytes)) + header_bytes + body


def write_frame(writer: BinaryIO, header: Value | Mapping[str, Any], body: bytes = b"") -> None:
    """
    Write a complete frame to a binary stream.

    Args:
        writer: Binary stream to write to.
        header: Header object.
        body: Body bytes (default: empty).
    """
    writer.write(encode_frame(header, body))
