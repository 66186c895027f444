# Copyright (c) 2026 Firefly Software Solutions Inc.
# Licensed under the Apache License, Version 2.0

"""Tests for RocketMQ frame splitting and stream extraction."""

import io
import logging
import struct

import pytest

from pyrocketmq.exceptions import FrameTooLargeError, TruncatedFrameError
from pyrocketmq.protocol import (
    LENGTH_FIELD_SIZE,
    MAX_FRAME_SIZE,
    PREFIX_SIZE,
    Frame,
    encode_frame,
    iter_frames,
    read_frame,
    split_frame,
    write_frame,
)
from pyrocketmq.value import JsonNumber, JsonObject


class TestFrame:
    """Tests for Frame class."""

    def test_frame_to_bytes(self) -> None:
        """Test frame serialization."""
        frame = Frame(total_length=9, header_length=2, header=b"{}", body=b"abc")
        data = frame.to_bytes()
        assert len(data) == PREFIX_SIZE + 5
        # Lengths are big-endian 4 bytes
        assert int.from_bytes(data[0:4], "big") == 9
        assert int.from_bytes(data[4:8], "big") == 2
        assert data[8:] == b"{}abc"

    def test_frame_ranges(self) -> None:
        """Test byte ranges of the three segments."""
        frame = Frame(total_length=9, header_length=2, header=b"{}", body=b"abc")
        assert frame.length_range == (0, LENGTH_FIELD_SIZE)
        assert frame.header_range == (8, 10)
        assert frame.body_range == (10, 13)

    def test_frame_length_mismatch(self) -> None:
        """Test declared vs actual length comparison."""
        assert not Frame(total_length=9, header_length=2, header=b"{}", body=b"abc").length_mismatch
        assert Frame(total_length=99, header_length=2, header=b"{}", body=b"abc").length_mismatch


class TestSplitFrame:
    """Tests for split_frame function."""

    def test_split_header_only(self) -> None:
        """Test a frame without a body."""
        data = encode_frame({"code": 10})
        frame = split_frame(data)

        assert frame.header == b'{"code":10}'
        assert frame.header_length == 11
        assert frame.total_length == 15
        assert frame.body == b""
        assert not frame.has_body
        assert not frame.length_mismatch

    def test_split_with_body(self) -> None:
        """Test a frame with a body."""
        data = encode_frame({"code": 0}, b"payload")
        frame = split_frame(data)

        assert frame.header == b'{"code":0}'
        assert frame.body == b"payload"
        assert frame.has_body
        assert frame.to_bytes() == data

    def test_split_roundtrip(self) -> None:
        """Test that split frames serialize back to the same bytes."""
        data = encode_frame(JsonObject((("code", JsonNumber(12.0)),)), b"\x00\x01\x02")
        assert split_frame(data).to_bytes() == data

    def test_split_prefix_too_short(self) -> None:
        """Test a buffer shorter than the two length fields."""
        with pytest.raises(TruncatedFrameError, match="frame prefix") as exc_info:
            split_frame(b"\x00\x00\x00")
        assert exc_info.value.needed == PREFIX_SIZE
        assert exc_info.value.available == 3

    def test_split_header_truncated(self) -> None:
        """Test a declared header longer than the buffer."""
        data = struct.pack(">II", 100, 50) + b"{}"
        with pytest.raises(TruncatedFrameError) as exc_info:
            split_frame(data)
        assert exc_info.value.field == "header"
        assert exc_info.value.needed == 50
        assert exc_info.value.available == 2

    def test_split_body_from_buffer(self) -> None:
        """Test that the body extent follows the buffer, not the declared length."""
        data = struct.pack(">II", 999, 2) + b"{}" + b"xyz"
        frame = split_frame(data)
        assert frame.body == b"xyz"
        assert frame.total_length == 999
        assert frame.actual_length == 9
        assert frame.length_mismatch

    def test_split_logs_length_mismatch(self, caplog: pytest.LogCaptureFixture) -> None:
        """Test that a length mismatch is reported."""
        caplog.set_level(logging.DEBUG, logger="pyrocketmq.protocol")
        split_frame(struct.pack(">II", 999, 2) + b"{}")
        assert "differs" in caplog.text

    def test_split_accepts_memoryview(self) -> None:
        """Test splitting a borrowed buffer."""
        data = encode_frame({"code": 10}, b"body")
        frame = split_frame(memoryview(data))
        assert isinstance(frame.body, bytes)
        assert frame.body == b"body"


class TestReadFrame:
    """Tests for read_frame function."""

    def test_read_frame_success(self) -> None:
        """Test reading consecutive frames from a stream."""
        first = encode_frame({"code": 10}, b"a")
        second = encode_frame({"code": 11})
        reader = io.BytesIO(first + second)

        assert read_frame(reader) == first
        assert read_frame(reader) == second

    def test_read_frame_eof(self) -> None:
        """Test reading from an exhausted stream."""
        with pytest.raises(EOFError, match="End of stream"):
            read_frame(io.BytesIO(b""))

    def test_read_frame_incomplete_length(self) -> None:
        """Test a stream ending inside the length field."""
        with pytest.raises(TruncatedFrameError, match="length field"):
            read_frame(io.BytesIO(b"\x00\x00"))

    def test_read_frame_incomplete_payload(self) -> None:
        """Test a stream ending inside the frame."""
        reader = io.BytesIO(struct.pack(">I", 100) + b"x" * 10)
        with pytest.raises(TruncatedFrameError) as exc_info:
            read_frame(reader)
        assert exc_info.value.needed == 100
        assert exc_info.value.available == 10

    def test_read_frame_too_large(self) -> None:
        """Test a declared length above the maximum."""
        reader = io.BytesIO(struct.pack(">I", MAX_FRAME_SIZE + 1))
        with pytest.raises(FrameTooLargeError) as exc_info:
            read_frame(reader)
        assert exc_info.value.size == MAX_FRAME_SIZE + 1

    def test_read_frame_custom_limit(self) -> None:
        """Test a caller-supplied maximum."""
        data = encode_frame({"code": 10}, b"x" * 100)
        with pytest.raises(FrameTooLargeError):
            read_frame(io.BytesIO(data), max_frame_size=64)


class TestIterWriteFrames:
    """Tests for iter_frames and write_frame functions."""

    def test_iter_frames(self) -> None:
        """Test splitting back-to-back frames."""
        frames = [
            encode_frame({"code": 10}, b"one"),
            encode_frame({"code": 0, "remark": "FOUND"}),
            encode_frame({"code": 34}, b"[1,2]"),
        ]
        assert list(iter_frames(b"".join(frames))) == frames

    def test_iter_frames_empty(self) -> None:
        """Test an empty stream."""
        assert list(iter_frames(b"")) == []

    def test_iter_frames_truncated_tail(self) -> None:
        """Test a stream ending inside the last frame."""
        data = encode_frame({"code": 10}) + encode_frame({"code": 11})[:-3]
        frames = iter_frames(data)
        assert next(frames) == encode_frame({"code": 10})
        with pytest.raises(TruncatedFrameError):
            next(frames)

    def test_write_frame(self) -> None:
        """Test writing a frame to a stream."""
        writer = io.BytesIO()
        write_frame(writer, {"code": 10, "extFields": {"topic": "T1"}}, b"body")

        data = writer.getvalue()
        assert data == encode_frame({"code": 10, "extFields": {"topic": "T1"}}, b"body")
        assert int.from_bytes(data[0:4], "big") == len(data) - LENGTH_FIELD_SIZE
