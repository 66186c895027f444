# Copyright (c) 2026 Firefly Software Solutions Inc.
# Licensed under the Apache License, Version 2.0

"""Shared fixtures for pyrocketmq tests."""

import struct
from collections.abc import Callable

import pytest

from pyrocketmq.models import MessageRecord
from pyrocketmq.record import encode_message_record


@pytest.fixture
def make_frame() -> Callable[[bytes, bytes], bytes]:
    """Build frame bytes from raw header and body bytes."""

    def _make_frame(header: bytes, body: bytes = b"") -> bytes:
        return struct.pack(">II", 4 + len(header) + len(body), len(header)) + header + body

    return _make_frame


@pytest.fixture
def record() -> MessageRecord:
    """A stored message as a broker would return it."""
    return MessageRecord(
        total_size=135,
        magic_code=0xDAA320A7,
        body_crc=12345,
        queue_id=3,
        flag=0,
        queue_offset=42,
        physical_offset=123456789,
        sys_flag=0,
        born_timestamp=1700000000000,
        born_host="192.168.0.10",
        born_port=51234,
        store_timestamp=1700000000123,
        store_host="10.0.0.1",
        store_port=10911,
        reconsume_times=1,
        prepared_transaction_offset=0,
        body=b"Hello RocketMQ",
        topic="TopicTest",
        properties=[("KEYS", "order1"), ("TAGS", "TagA")],
    )


@pytest.fixture
def record_bytes(record: MessageRecord) -> bytes:
    return encode_message_record(record)
